"""
Cache - In-memory TTL cache for parsed feeds.

Provides:
- CacheBackend: the interface the feed fetcher depends on
- MemoryCache: in-memory cache with TTL expiry and LRU eviction

The clock is injectable so tests can move time forward without sleeping.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable


@dataclass
class CacheEntry:
    key: str
    value: Any
    created_at: datetime
    expires_at: datetime | None


class CacheBackend(ABC):
    """Abstract base class for cache backends."""

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Get a value from cache."""
        pass

    @abstractmethod
    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Set a value in cache with optional TTL in seconds."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete a value from cache."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Clear all values from cache."""
        pass


class MemoryCache(CacheBackend):
    """Fast in-memory cache with TTL expiry and LRU eviction."""

    def __init__(self, max_size: int = 256, clock: Callable[[], datetime] = datetime.now):
        self.max_size = max_size
        self.clock = clock
        self._cache: dict[str, CacheEntry] = {}
        self._access_order: list[str] = []  # Track access order for LRU

    def get(self, key: str) -> Any | None:
        entry = self._cache.get(key)
        if entry is None:
            return None

        # Served only while now < expires_at
        if entry.expires_at and self.clock() >= entry.expires_at:
            self.delete(key)
            return None

        self._touch(key)
        return entry.value

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        # Evict if at capacity
        while self._cache and len(self._cache) >= self.max_size and key not in self._cache:
            self._evict_oldest()

        now = self.clock()
        expires_at = now + timedelta(seconds=ttl) if ttl else None

        # Whole-entry replacement, never partial mutation
        self._cache[key] = CacheEntry(
            key=key,
            value=value,
            created_at=now,
            expires_at=expires_at,
        )
        self._touch(key)

    def delete(self, key: str) -> None:
        self._cache.pop(key, None)
        if key in self._access_order:
            self._access_order.remove(key)

    def clear(self) -> None:
        self._cache.clear()
        self._access_order.clear()

    def _touch(self, key: str) -> None:
        if key in self._access_order:
            self._access_order.remove(key)
        self._access_order.append(key)

    def _evict_oldest(self):
        """Evict least recently used entry."""
        if self._access_order:
            oldest_key = self._access_order.pop(0)
            self._cache.pop(oldest_key, None)
        elif self._cache:
            self._cache.pop(next(iter(self._cache)))

    @property
    def size(self) -> int:
        return len(self._cache)
