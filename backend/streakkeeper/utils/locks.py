"""
Per-key locks - serialize read-modify-write sequences on the same habit
"""
from contextlib import contextmanager
from typing import Dict, Hashable
import threading


class KeyedLocks:
    """A registry handing out one lock per key"""

    def __init__(self):
        self._locks: Dict[Hashable, threading.Lock] = {}
        self._guard = threading.Lock()

    def get(self, key: Hashable) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, key: Hashable):
        """Hold the lock for `key` for the duration of the block"""
        with self.get(key):
            yield

    def discard(self, key: Hashable) -> None:
        """Forget the lock for a key that no longer exists (e.g. a deleted habit)"""
        with self._guard:
            self._locks.pop(key, None)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
