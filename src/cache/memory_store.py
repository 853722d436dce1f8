# src/cache/memory_store.py - v1
"""In-process cache store (RESPONSE_CACHE_BACKEND=memory).

Bounded LRU with optional time-to-live. All state sits behind one lock so
the store can be shared between the event loop and worker threads.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from typing import Callable

from ragcache.cache.base_cache_store import BaseCacheStore
from ragcache.cache.models import CacheEntry

logger = logging.getLogger(__name__)


class MemoryCacheStore(BaseCacheStore):
    """LRU + TTL response cache held in memory.

    Args:
        max_entries: Capacity before least-recently-used eviction (0 = unbounded).
        ttl_s: Seconds an entry stays valid after being stored (0 = forever).
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        max_entries: int = 1024,
        ttl_s: float = 0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_entries = max_entries
        self._ttl_s = ttl_s
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: OrderedDict[str, tuple[float, CacheEntry]] = OrderedDict()

    def _expired(self, stored_at: float) -> bool:
        return self._ttl_s > 0 and self._clock() - stored_at >= self._ttl_s

    async def get(self, key: str) -> CacheEntry | None:
        with self._lock:
            item = self._entries.get(key)
            if item is None:
                return None
            stored_at, entry = item
            if self._expired(stored_at):
                del self._entries[key]
                logger.debug("Expired cache entry %r", key)
                return None
            self._entries.move_to_end(key)
            return entry

    async def put(self, key: str, entry: CacheEntry) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), entry)
            self._entries.move_to_end(key)
            while self._max_entries and len(self._entries) > self._max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted cache entry %r", evicted)

    async def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    async def list_entries(self) -> list[CacheEntry]:
        with self._lock:
            return [
                entry
                for stored_at, entry in self._entries.values()
                if not self._expired(stored_at)
            ]

    async def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
