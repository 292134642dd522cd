"""In-memory key/value cache with per-entry TTL and explicit stale reads."""
from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Generic, Hashable, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass(frozen=True)
class _CacheEntry(Generic[V]):
    value: V
    stored_at: float
    ttl: float


class TTLCache(Generic[K, V]):
    """Key/value store whose entries expire after a TTL.

    Expired entries are never returned by :meth:`get` but stay readable
    through :meth:`get_stale` until overwritten or cleared. There is no size
    bound; the key space is the set of actively held tokens.
    """

    def __init__(
        self,
        default_ttl: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if default_ttl <= 0:
            raise ValueError("Cache TTL must be positive")
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[K, _CacheEntry[V]] = {}
        self._lock = threading.Lock()

    def put(self, key: K, value: V, ttl: float | None = None) -> None:
        """Store ``value`` under ``key``, replacing any previous entry."""
        ttl = self.default_ttl if ttl is None else ttl
        if ttl <= 0:
            raise ValueError("Cache TTL must be positive")
        entry = _CacheEntry(value=value, stored_at=self._clock(), ttl=ttl)
        with self._lock:
            self._entries[key] = entry

    def get(self, key: K) -> V | None:
        """Return the value for ``key`` if it has not expired."""
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at < entry.ttl:
            return entry.value
        return None

    def get_stale(self, key: K) -> V | None:
        """Return the value for ``key`` regardless of expiry. Fallback use only."""
        with self._lock:
            entry = self._entries.get(key)
        return entry.value if entry is not None else None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
