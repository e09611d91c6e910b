"""Key/value cache with per-entry expiry.

``Cache`` is the capability the story pipeline depends on; ``MemoryCache`` is
the in-process implementation used by the API. The store owns its locking so
callers never hold a lock across an await.
"""

import time
from datetime import timedelta
from threading import Lock
from typing import Any, Callable, Protocol


class Cache(Protocol):
    def try_get(self, key: str) -> tuple[bool, Any]: ...

    def set(self, key: str, value: Any, ttl: timedelta) -> None: ...


class MemoryCache:
    """Process-local cache; expired entries are dropped lazily on read."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._store: dict[str, tuple[Any, float]] = {}
        self._lock = Lock()

    def try_get(self, key: str) -> tuple[bool, Any]:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return False, None

            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._store[key]
                return False, None

            return True, value

    def set(self, key: str, value: Any, ttl: timedelta) -> None:
        expires_at = self._clock() + ttl.total_seconds()
        with self._lock:
            self._store[key] = (value, expires_at)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
