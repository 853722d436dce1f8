# src/cache/redis_store.py - v1
"""Redis-based cache store (RESPONSE_CACHE_BACKEND=redis).

Requires 'redis' package: pip install redis.
Shares answers between several service instances. Expiry is delegated to
Redis via SET EX.
"""

from __future__ import annotations

import asyncio
import json
import logging

from ragcache.cache.base_cache_store import BaseCacheStore
from ragcache.cache.models import CacheEntry

logger = logging.getLogger(__name__)

_KEY_PREFIX = "ragcache:response:"
_INDEX_KEY = "ragcache:response:__index__"


class RedisCacheStore(BaseCacheStore):
    """Redis-backed response cache for multi-instance deployments."""

    def __init__(self, redis_url: str, ttl_s: int = 0) -> None:
        try:
            import redis
        except ImportError as e:
            raise ImportError(
                "redis package required: pip install redis"
            ) from e

        self._client = redis.Redis.from_url(redis_url, decode_responses=True)
        self._ttl_s = ttl_s

    def _get_sync(self, key: str) -> CacheEntry | None:
        data = self._client.get(f"{_KEY_PREFIX}{key}")
        if data is None:
            return None
        try:
            return CacheEntry(**json.loads(data))
        except (ValueError, TypeError) as e:
            logger.warning("Failed to deserialize cache entry %s: %s", key, e)
            return None

    def _put_sync(self, key: str, entry: CacheEntry) -> None:
        redis_key = f"{_KEY_PREFIX}{key}"
        if self._ttl_s > 0:
            self._client.set(redis_key, entry.model_dump_json(), ex=self._ttl_s)
        else:
            self._client.set(redis_key, entry.model_dump_json())
        # Index of keys for list_entries / clear
        self._client.sadd(_INDEX_KEY, key)

    def _delete_sync(self, key: str) -> None:
        self._client.delete(f"{_KEY_PREFIX}{key}")
        self._client.srem(_INDEX_KEY, key)

    def _list_sync(self) -> list[CacheEntry]:
        entries: list[CacheEntry] = []
        for key in self._client.smembers(_INDEX_KEY):
            entry = self._get_sync(key)
            if entry is None:
                # expired under SET EX
                self._client.srem(_INDEX_KEY, key)
                continue
            entries.append(entry)
        return entries

    def _clear_sync(self) -> None:
        keys = self._client.smembers(_INDEX_KEY)
        if keys:
            self._client.delete(*(f"{_KEY_PREFIX}{k}" for k in keys))
        self._client.delete(_INDEX_KEY)

    async def get(self, key: str) -> CacheEntry | None:
        """Retrieve cache entry by key."""
        return await asyncio.to_thread(self._get_sync, key)

    async def put(self, key: str, entry: CacheEntry) -> None:
        """Store a cache entry."""
        await asyncio.to_thread(self._put_sync, key, entry)

    async def delete(self, key: str) -> None:
        """Remove a cache entry."""
        await asyncio.to_thread(self._delete_sync, key)

    async def list_entries(self) -> list[CacheEntry]:
        """List all live entries."""
        return await asyncio.to_thread(self._list_sync)

    async def clear(self) -> None:
        await asyncio.to_thread(self._clear_sync)

    def close(self) -> None:
        """Close the Redis connection."""
        self._client.close()
