# src/cache/response_cache.py - v1
"""Answer cache keyed by normalized prompt.

ResponseCache wraps a BaseCacheStore with the lookup/store contract used by
the orchestrator. `cached` turns any async answer function into a cached one,
and SingleFlight optionally coalesces concurrent misses on the same key.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Any, Awaitable, Callable

from ragcache.cache.base_cache_store import BaseCacheStore
from ragcache.cache.memory_store import MemoryCacheStore
from ragcache.cache.models import CacheEntry, SourceSummary

logger = logging.getLogger(__name__)


class SingleFlight:
    """Coalesce concurrent computations that share a key.

    The first caller runs fn; callers arriving while it runs await the same
    result. Nothing is remembered once the computation finishes.
    """

    def __init__(self) -> None:
        self._inflight: dict[str, asyncio.Task[Any]] = {}

    def __len__(self) -> int:
        return len(self._inflight)

    async def run(self, key: str, fn: Callable[[], Awaitable[Any]]) -> Any:
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(fn())
            self._inflight[key] = task
            task.add_done_callback(lambda _t: self._inflight.pop(key, None))
        else:
            logger.debug("Coalescing request for key %r", key)
        return await asyncio.shield(task)


class ResponseCache:
    """Lookup/store facade over a cache backend.

    Args:
        store: Backend holding the entries (bounded memory store by default).
        single_flight: Coalesce concurrent misses on the same key.
    """

    def __init__(
        self,
        store: BaseCacheStore | None = None,
        single_flight: bool = False,
    ) -> None:
        self._store = store if store is not None else MemoryCacheStore()
        self._flights = SingleFlight() if single_flight else None

    @property
    def backend(self) -> BaseCacheStore:
        return self._store

    @property
    def single_flight(self) -> SingleFlight | None:
        return self._flights

    async def lookup(self, key: str) -> CacheEntry | None:
        """Return the stored entry for key, never computing anything."""
        entry = await self._store.get(key)
        logger.debug("Response cache %s for %r", "hit" if entry else "miss", key)
        return entry

    async def store(
        self,
        key: str,
        answer: str,
        sources: SourceSummary | None = None,
    ) -> CacheEntry:
        """Store answer under key, replacing any previous entry."""
        entry = CacheEntry(
            normalized_key=key,
            answer=answer,
            source_summary=sources or SourceSummary(),
        )
        await self._store.put(key, entry)
        return entry

    async def invalidate(self, key: str) -> None:
        await self._store.delete(key)

    async def clear(self) -> None:
        await self._store.clear()

    async def run_once(self, key: str, fn: Callable[[], Awaitable[Any]]) -> Any:
        """Run fn, sharing the result with concurrent callers when single-flight is on."""
        if self._flights is None:
            return await fn()
        return await self._flights.run(key, fn)


def cached(
    key_fn: Callable[..., str],
    cache: ResponseCache,
) -> Callable[[Callable[..., Awaitable[str]]], Callable[..., Awaitable[str]]]:
    """Decorate an async answer function with response caching.

    key_fn receives the decorated function's arguments and returns the cache
    key. A blank key bypasses the cache.

    Usage:
        @cached(lambda prompt, **_: normalize_prompt(prompt), cache)
        async def answer(prompt: str) -> str: ...
    """

    def decorator(fn: Callable[..., Awaitable[str]]) -> Callable[..., Awaitable[str]]:
        @functools.wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any) -> str:
            key = key_fn(*args, **kwargs)
            if not key:
                return await fn(*args, **kwargs)

            entry = await cache.lookup(key)
            if entry is not None:
                return entry.answer

            async def compute() -> str:
                answer = await fn(*args, **kwargs)
                await cache.store(key, answer)
                return answer

            return await cache.run_once(key, compute)

        return wrapper

    return decorator
