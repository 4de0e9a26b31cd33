"""
Logging setup: console handler plus an optional file handler.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

LOGGER_NAME = "pinormal"


class _CurrentStderr:
    """Resolves sys.stderr on every write, so a live display that swaps
    sys.stderr also captures log lines."""

    def write(self, text):
        return sys.stderr.write(text)

    def flush(self):
        sys.stderr.flush()


def setup_logging(level: str = "INFO",
                  log_file: Optional[str] = None,
                  stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Configure the package logger.

    Console lines are short ('[12:00:00] message'); the file handler, when
    given, records everything at DEBUG with level names. Calling this
    again replaces the previous handlers.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(stream or _CurrentStderr())
    console.setLevel(getattr(logging, level.upper()))
    console.setFormatter(logging.Formatter('[%(asctime)s] %(message)s', datefmt='%H:%M:%S'))
    logger.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter('[%(asctime)s] %(levelname)s %(name)s: %(message)s'))
        logger.addHandler(file_handler)

    return logger
