"""
Latest-value snapshot channel.

A single slot: publishing overwrites whatever the reader has not seen
yet, so a slow display never holds up the computation thread.
"""

import threading
from typing import Optional, Tuple

from .snapshot import Snapshot


class SnapshotChannel:

    def __init__(self, initial: Optional[Snapshot] = None):
        self._cond = threading.Condition()
        self._snapshot = initial or Snapshot()
        self._version = 0

    def publish(self, snapshot: Snapshot) -> int:
        """
        Replace the current snapshot and wake any waiting reader.

        Raises:
            ValueError: if the snapshot would roll back the digit count.
        """
        with self._cond:
            if snapshot.digits_emitted < self._snapshot.digits_emitted:
                raise ValueError(
                    f"snapshot rollback: {snapshot.digits_emitted} < {self._snapshot.digits_emitted}")
            self._snapshot = snapshot
            self._version += 1
            self._cond.notify_all()
            return self._version

    def latest(self) -> Tuple[int, Snapshot]:
        with self._cond:
            return self._version, self._snapshot

    def wait_for_update(self, after_version: int, timeout: Optional[float] = None) -> Tuple[int, Snapshot]:
        """
        Block until a version newer than `after_version` is published or
        the timeout expires; returns the latest (version, snapshot) either way.
        """
        with self._cond:
            self._cond.wait_for(lambda: self._version > after_version, timeout)
            return self._version, self._snapshot

    @property
    def version(self) -> int:
        with self._cond:
            return self._version
