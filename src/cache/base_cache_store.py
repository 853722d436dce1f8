# src/cache/base_cache_store.py - v1
"""Abstract response-cache store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ragcache.cache.models import CacheEntry


class BaseCacheStore(ABC):
    """Unified interface for response-cache storage backends.

    put() overwrites unconditionally (last writer wins). Backends may evict
    entries by size or age; a miss after eviction is indistinguishable from
    a key that was never stored.
    """

    @abstractmethod
    async def get(self, key: str) -> CacheEntry | None:
        """Retrieve cache entry by normalized key."""

    @abstractmethod
    async def put(self, key: str, entry: CacheEntry) -> None:
        """Store cache entry, replacing any previous one."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove cache entry."""

    @abstractmethod
    async def list_entries(self) -> list[CacheEntry]:
        """List all live entries."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove every entry."""

    def close(self) -> None:
        """Release backend resources. No-op by default."""
