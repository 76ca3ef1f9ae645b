"""
Non-reentrant exclusive lock for mutating pool operations.

Entry while the lock is held, whether from a callback on the same thread or
from another thread, is rejected with `PoolLockedError`. Callers are never
queued.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from .errors import PoolLockedError


class NonReentrantLock:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._holder: Optional[str] = None

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def held(self, operation: str) -> Iterator[None]:
        """Hold the lock for the duration of `operation`; released on every exit path."""
        if not self._lock.acquire(blocking=False):
            raise PoolLockedError(f"{operation} rejected: pool is locked by {self._holder}")
        self._holder = operation
        try:
            yield
        finally:
            self._holder = None
            self._lock.release()
