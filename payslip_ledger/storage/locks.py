import threading
from collections.abc import Generator
from contextlib import contextmanager


class KeyLockRegistry:
    """One re-entrant lock per storage key.

    Every read-modify-write cycle on a key runs while holding that key's
    lock; operations on different keys do not block each other.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}

    def lock_for(self, key: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, *keys: str) -> Generator[None, None, None]:
        """Acquire the locks for keys in sorted order so callers cannot deadlock."""
        locks = [self.lock_for(key) for key in sorted(set(keys))]
        for lock in locks:
            lock.acquire()
        try:
            yield
        finally:
            for lock in reversed(locks):
                lock.release()
