"""In-process mutual exclusion keyed by string.

The store offers no transactions, so read-modify-write sequences on the same
record are serialised here. This only covers threads of one process.
"""

import threading
from collections import defaultdict
from contextlib import contextmanager


class KeyedLock:
    """A lazily-populated family of locks, one per key."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: defaultdict[str, threading.Lock] = defaultdict(threading.Lock)

    def _lock_for(self, key: str) -> threading.Lock:
        with self._guard:
            return self._locks[key]

    @contextmanager
    def hold(self, key: str):
        lock = self._lock_for(key)
        with lock:
            yield

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
