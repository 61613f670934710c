from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Hashable, Iterator


class KeyedLocks:
    """
    One lock per key, created on first use.

    Each entry counts the callers holding or waiting for it and is dropped
    when the last of them leaves, so the registry only holds keys in use.
    """

    def __init__(self) -> None:
        self._locks: dict[Hashable, list] = {}  # key -> [lock, users]
        self._lock_lock = threading.Lock()  # Lock for managing locks dict

    def __len__(self) -> int:
        with self._lock_lock:
            return len(self._locks)

    def _checkout(self, key: Hashable) -> threading.Lock:
        with self._lock_lock:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = [threading.Lock(), 0]
            entry[1] += 1
            return entry[0]

    def _checkin(self, key: Hashable) -> None:
        with self._lock_lock:
            entry = self._locks[key]
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[key]

    @contextmanager
    def hold(self, key: Hashable, timeout: float | None = None) -> Iterator[bool]:
        """Yield True once the key's lock is held, or False if `timeout` seconds passed first."""
        lock = self._checkout(key)
        try:
            acquired = lock.acquire() if timeout is None else lock.acquire(timeout=timeout)
            try:
                yield acquired
            finally:
                if acquired:
                    lock.release()
        finally:
            self._checkin(key)
