# src/cache/cache_factory.py - v1
"""Factory for response-cache store instantiation."""

from __future__ import annotations

from ragcache.cache.base_cache_store import BaseCacheStore
from ragcache.config.settings import Settings


def create_cache_store(settings: Settings | None = None) -> BaseCacheStore:
    """Instantiate the configured cache backend.

    Args:
        settings: Application settings. Defaults to a bounded memory backend.

    Returns:
        Configured BaseCacheStore implementation.
    """
    backend = "memory" if settings is None else settings.response_cache_backend

    if backend == "memory":
        from ragcache.cache.memory_store import MemoryCacheStore
        if settings is None:
            return MemoryCacheStore()
        return MemoryCacheStore(
            max_entries=settings.response_cache_max_entries,
            ttl_s=settings.response_cache_ttl_s,
        )

    if backend == "sqlite":
        from ragcache.cache.sqlite_store import SqliteCacheStore
        return SqliteCacheStore(
            db_path=settings.response_cache_path,
            max_entries=settings.response_cache_max_entries,
            ttl_s=settings.response_cache_ttl_s,
        )

    if backend == "redis":
        from ragcache.cache.redis_store import RedisCacheStore
        if not settings.response_cache_redis_url:
            raise ValueError(
                "RESPONSE_CACHE_REDIS_URL must be set when RESPONSE_CACHE_BACKEND=redis"
            )
        return RedisCacheStore(
            redis_url=settings.response_cache_redis_url,
            ttl_s=settings.response_cache_ttl_s,
        )

    raise ValueError(f"Unsupported cache backend: {backend!r}")
