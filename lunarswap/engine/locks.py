"""Per-pair mutual exclusion.

Operations on the same pair serialize; operations on different pairs only
contend for the short critical section that hands out locks.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class PairLocks:
    """One re-entrant lock per pair id, created on first use."""

    def __init__(self) -> None:
        self._locks: dict[bytes, threading.RLock] = {}
        self._guard = threading.Lock()

    def lock_for(self, pair_id: bytes) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(pair_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[pair_id] = lock
            return lock

    @contextmanager
    def hold(self, pair_id: bytes) -> Iterator[None]:
        """Hold the pair's lock for the duration of the block."""
        with self.lock_for(pair_id):
            yield

    def __len__(self) -> int:
        return len(self._locks)
