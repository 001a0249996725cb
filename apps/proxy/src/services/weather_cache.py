from __future__ import annotations

import time
from threading import RLock
from typing import Any, Callable, Dict, Optional, Protocol, Tuple


class CacheStore(Protocol):
    """Key/value store with per-entry expiry used by the weather service."""

    def get(self, key: str) -> Optional[Any]:
        """Return the stored value, or ``None`` on a miss or an expired entry."""
        ...

    def set(self, key: str, value: Any, ttl: float) -> None:
        """Store ``value`` under ``key`` for ``ttl`` seconds, replacing any previous entry."""
        ...


class InMemoryTTLCache:
    """Thread-safe in-process cache.

    Expired entries are dropped lazily: on read of the same key, and in a sweep
    on every write. ``max_entries`` bounds the live set; when it is full the
    entry written longest ago is evicted.
    """

    def __init__(
        self,
        time_func: Callable[[], float] = time.monotonic,
        *,
        max_entries: Optional[int] = 10_000,
    ) -> None:
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be positive")
        self._time_func = time_func
        self._max_entries = max_entries
        self._lock = RLock()
        # insertion order doubles as write order; set() re-inserts on overwrite
        self._entries: Dict[str, Tuple[float, Any]] = {}

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            item = self._entries.get(key)
            if item is None:
                return None
            expires_at, value = item
            if expires_at <= self._time_func():
                self._entries.pop(key, None)
                return None
            return value

    def set(self, key: str, value: Any, ttl: float) -> None:
        with self._lock:
            now = self._time_func()
            self._purge_expired(now)
            self._entries.pop(key, None)
            if self._max_entries is not None:
                while len(self._entries) >= self._max_entries:
                    self._entries.pop(next(iter(self._entries)))
            self._entries[key] = (now + ttl, value)

    def _purge_expired(self, now: float) -> None:
        expired = [key for key, (expires_at, _) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = ["CacheStore", "InMemoryTTLCache"]
