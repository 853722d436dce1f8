# src/cache/content_cache.py - v1
"""Per-process memo of extracted source content.

A source is extracted at most once while its entry is cached: concurrent
requests for the same id share one in-flight extraction. Failed extractions
are not cached, so the next request retries. Capacity is bounded by LRU
eviction.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections import OrderedDict
from typing import Awaitable, Callable

from ragcache.core.models import ContentCacheEntry, Source

logger = logging.getLogger(__name__)


class ContentCache:
    """Bounded, thread-safe map of source id to extracted content.

    Args:
        max_entries: Capacity before least-recently-used eviction (0 = unbounded).
    """

    def __init__(self, max_entries: int = 256) -> None:
        self._max_entries = max_entries
        self._lock = threading.Lock()
        self._entries: OrderedDict[str, ContentCacheEntry] = OrderedDict()
        self._inflight: dict[str, asyncio.Future[Source]] = {}
        self.extractions = 0

    def get(self, source_id: str) -> ContentCacheEntry | None:
        with self._lock:
            return self._get_locked(source_id)

    def _get_locked(self, source_id: str) -> ContentCacheEntry | None:
        entry = self._entries.get(source_id)
        if entry is not None:
            self._entries.move_to_end(source_id)
        return entry

    def put(self, source: Source) -> ContentCacheEntry:
        entry = ContentCacheEntry(source_id=source.id, source=source)
        with self._lock:
            self._entries[source.id] = entry
            self._entries.move_to_end(source.id)
            while self._max_entries and len(self._entries) > self._max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted content for %s", evicted)
        return entry

    def invalidate(self, source_id: str) -> None:
        with self._lock:
            self._entries.pop(source_id, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, source_id: object) -> bool:
        with self._lock:
            return source_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    async def get_or_extract(
        self,
        source_id: str,
        extract: Callable[[], Awaitable[Source]],
    ) -> Source:
        """Return cached content, extracting it once if missing.

        Raises:
            Whatever extract() raises. Waiters on the same in-flight
            extraction receive the same exception.
        """
        with self._lock:
            entry = self._get_locked(source_id)
            if entry is not None:
                return entry.source
            future = self._inflight.get(source_id)
            owner = future is None
            if owner:
                future = asyncio.get_running_loop().create_future()
                self._inflight[source_id] = future
                self.extractions += 1

        if not owner:
            logger.debug("Joining in-flight extraction of %s", source_id)
            return await asyncio.shield(future)

        try:
            source = await extract()
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as exc:
            future.set_exception(exc)
            future.exception()  # mark retrieved when nobody else waits
            raise
        else:
            self.put(source)
            future.set_result(source)
            return source
        finally:
            with self._lock:
                self._inflight.pop(source_id, None)
