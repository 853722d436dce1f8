# src/cache/sqlite_store.py - v1
"""SQLite-based cache store (RESPONSE_CACHE_BACKEND=sqlite).

Uses stdlib sqlite3, no external dependency. Answers survive restarts.
Queries run in a worker thread; one lock serializes access to the shared
connection.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sqlite3
import threading
import time
from pathlib import Path
from typing import Callable

from ragcache.cache.base_cache_store import BaseCacheStore
from ragcache.cache.models import CacheEntry

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS response_cache (
    key TEXT PRIMARY KEY,
    data TEXT NOT NULL,
    stored_at REAL NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_stored_at ON response_cache(stored_at);
"""


class SqliteCacheStore(BaseCacheStore):
    """SQLite-backed response cache with optional size and age bounds."""

    def __init__(
        self,
        db_path: Path | str,
        max_entries: int = 0,
        ttl_s: float = 0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._db_path = Path(db_path).expanduser()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._max_entries = max_entries
        self._ttl_s = ttl_s
        self._clock = clock
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)

    def _cutoff(self) -> float | None:
        return self._clock() - self._ttl_s if self._ttl_s > 0 else None

    def _get_sync(self, key: str) -> CacheEntry | None:
        with self._lock:
            row = self._conn.execute(
                "SELECT data, stored_at FROM response_cache WHERE key = ?", (key,)
            ).fetchone()
            if row is None:
                return None
            cutoff = self._cutoff()
            if cutoff is not None and row[1] <= cutoff:
                self._conn.execute("DELETE FROM response_cache WHERE key = ?", (key,))
                self._conn.commit()
                return None
        try:
            return CacheEntry(**json.loads(row[0]))
        except (ValueError, TypeError) as e:
            logger.warning("Failed to deserialize cache entry %s: %s", key, e)
            return None

    def _put_sync(self, key: str, entry: CacheEntry) -> None:
        with self._lock:
            self._conn.execute(
                """INSERT OR REPLACE INTO response_cache (key, data, stored_at)
                   VALUES (?, ?, ?)""",
                (key, entry.model_dump_json(), self._clock()),
            )
            if self._max_entries:
                self._conn.execute(
                    """DELETE FROM response_cache WHERE key NOT IN (
                           SELECT key FROM response_cache
                           ORDER BY stored_at DESC LIMIT ?)""",
                    (self._max_entries,),
                )
            self._conn.commit()

    def _execute_sync(self, sql: str, params: tuple = ()) -> None:
        with self._lock:
            self._conn.execute(sql, params)
            self._conn.commit()

    def _list_sync(self) -> list[CacheEntry]:
        cutoff = self._cutoff()
        with self._lock:
            if cutoff is None:
                rows = self._conn.execute("SELECT data FROM response_cache").fetchall()
            else:
                rows = self._conn.execute(
                    "SELECT data FROM response_cache WHERE stored_at > ?", (cutoff,)
                ).fetchall()
        entries: list[CacheEntry] = []
        for row in rows:
            try:
                entries.append(CacheEntry(**json.loads(row[0])))
            except (ValueError, TypeError):
                continue
        return entries

    async def get(self, key: str) -> CacheEntry | None:
        """Retrieve cache entry by key."""
        return await asyncio.to_thread(self._get_sync, key)

    async def put(self, key: str, entry: CacheEntry) -> None:
        """Store a cache entry (upsert)."""
        await asyncio.to_thread(self._put_sync, key, entry)

    async def delete(self, key: str) -> None:
        """Remove a cache entry."""
        await asyncio.to_thread(
            self._execute_sync, "DELETE FROM response_cache WHERE key = ?", (key,)
        )

    async def list_entries(self) -> list[CacheEntry]:
        """List all live entries."""
        return await asyncio.to_thread(self._list_sync)

    async def clear(self) -> None:
        await asyncio.to_thread(self._execute_sync, "DELETE FROM response_cache")

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            self._conn.close()
