"""
Esc key watcher.

Puts the terminal into cbreak mode (Ctrl+C still raises SIGINT) and
polls stdin on a daemon thread. Only active on a POSIX tty; elsewhere
Ctrl+C is the only way to stop.
"""

import logging
import os
import select
import sys
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)

ESC = "\x1b"

try:
    import termios
    import tty
except ImportError:  # Windows
    termios = None
    tty = None


class EscapeKeyWatcher:
    """Calls `on_escape` once when Esc is pressed."""

    def __init__(self, on_escape: Callable[[], None], stream=None,
                 poll_interval: float = 0.1, escape_timeout: float = 0.03):
        self.on_escape = on_escape
        self.stream = stream or sys.stdin
        self.poll_interval = poll_interval
        self.escape_timeout = escape_timeout
        self._saved_attrs = None
        self._halt = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def supported(self) -> bool:
        if termios is None:
            return False
        try:
            return os.isatty(self.stream.fileno())
        except (AttributeError, ValueError, OSError):
            return False

    def __enter__(self):
        if not self.supported:
            logger.debug("stdin is not a tty; Esc watcher disabled")
            return self
        fd = self.stream.fileno()
        self._saved_attrs = termios.tcgetattr(fd)
        tty.setcbreak(fd)
        self._thread = threading.Thread(target=self._poll, name="pinormal-keys", daemon=True)
        self._thread.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self._halt.set()
        if self._thread is not None:
            self._thread.join(self.poll_interval * 5)
        if self._saved_attrs is not None:
            termios.tcsetattr(self.stream.fileno(), termios.TCSADRAIN, self._saved_attrs)
            self._saved_attrs = None
        return False

    def _poll(self):
        fd = self.stream.fileno()
        while not self._halt.is_set():
            ready, _, _ = select.select([fd], [], [], self.poll_interval)
            if not ready:
                continue
            if os.read(fd, 1).decode(errors="ignore") != ESC:
                continue
            # arrow, function and Alt keys arrive as ESC followed by more bytes
            if self._drain_sequence(fd):
                continue
            logger.debug("Esc pressed")
            self.on_escape()
            return

    def _drain_sequence(self, fd) -> bool:
        """Consume the rest of an escape sequence; False if ESC stood alone."""
        drained = False
        while select.select([fd], [], [], self.escape_timeout)[0]:
            os.read(fd, 64)
            drained = True
        return drained
