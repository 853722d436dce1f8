# src/sources/tables.py - v1
"""Table repository over a SQLite database.

Every table is exposed as a source named after the table. Reads are capped
at a row limit, and a failed read is reported inside TableContent.error
rather than raised, so the table still appears (empty) in the context.
"""

from __future__ import annotations

import asyncio
import logging
import re
import sqlite3
from pathlib import Path
from typing import Any, Iterable

from ragcache.cache.content_cache import ContentCache
from ragcache.core.errors import SourceNotFoundError
from ragcache.core.keywords import extract_keywords
from ragcache.core.models import RelevanceScore, Source, TableContent
from ragcache.logging.context import set_source_context
from ragcache.ranking.ranker import DEFAULT_MIN_SCORE, DEFAULT_TOP_K, rank_sources

logger = logging.getLogger(__name__)

_FROM_CLAUSE = re.compile(r"\bfrom\s+([\w.\"`\[\]]+)", re.IGNORECASE)
UNKNOWN_TABLE = "Unknown"


def quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


def apply_row_limit(query: str, row_limit: int) -> str:
    """Append LIMIT unless the query already bounds its rows."""
    padded = f" {query.strip().rstrip(';').lower()} "
    if " limit " in padded:
        return query
    return f"{query.strip().rstrip(';')} LIMIT {row_limit}"


def table_name_from_query(query: str) -> str:
    """Name following the first FROM keyword, or 'Unknown'."""
    match = _FROM_CLAUSE.search(query)
    if not match:
        return UNKNOWN_TABLE
    return match.group(1).strip('"`[]')


class TableRepository:
    """Read-only access to the tables of one SQLite database.

    Args:
        database_path: SQLite file to read.
        row_limit: Maximum rows fetched per unbounded query.
        content_cache: Memo of fetched rows (a private one when None).
    """

    def __init__(
        self,
        database_path: Path | str,
        row_limit: int = 100,
        content_cache: ContentCache | None = None,
    ) -> None:
        self._database_path = Path(database_path).expanduser()
        self._row_limit = row_limit
        self._cache = content_cache if content_cache is not None else ContentCache()

    @property
    def content_cache(self) -> ContentCache:
        return self._cache

    def _connect(self) -> sqlite3.Connection:
        # mode=ro refuses to create a missing database file
        uri = f"{self._database_path.resolve().as_uri()}?mode=ro"
        conn = sqlite3.connect(uri, uri=True)
        conn.row_factory = sqlite3.Row
        return conn

    def _query_sync(self, sql: str, params: tuple = ()) -> list[dict[str, Any]]:
        conn = self._connect()
        try:
            return [dict(row) for row in conn.execute(sql, params).fetchall()]
        finally:
            conn.close()

    # --- Discovery ---

    async def list_tables(self) -> list[str]:
        """User tables of the database, sorted by name."""
        rows = await asyncio.to_thread(
            self._query_sync,
            "SELECT name FROM sqlite_master WHERE type = 'table' "
            "AND name NOT LIKE 'sqlite_%' ORDER BY name",
        )
        return [row["name"] for row in rows]

    async def table_schema(self, table: str) -> list[dict[str, Any]]:
        """Column descriptions (name, type, notnull, pk) of a table.

        Raises:
            SourceNotFoundError: If the table does not exist.
        """
        rows = await asyncio.to_thread(
            self._query_sync, f"PRAGMA table_info({quote_identifier(table)})"
        )
        if not rows:
            raise SourceNotFoundError(table)
        return [
            {"name": r["name"], "type": r["type"], "notnull": bool(r["notnull"]), "pk": bool(r["pk"])}
            for r in rows
        ]

    # --- Reads ---

    async def execute_query(self, query: str, description: str | None = None) -> TableContent:
        """Run a read query with the row limit applied.

        Failures are recorded in TableContent.error.
        """
        bounded = apply_row_limit(query, self._row_limit)
        table_name = table_name_from_query(query)
        content = TableContent(
            table_name=table_name,
            query=bounded,
            description=description or f"Custom query on table: {table_name}",
        )
        try:
            rows = await asyncio.to_thread(self._query_sync, bounded)
        except sqlite3.Error as e:
            logger.error("Query on %s failed: %s", table_name, e)
            content.error = str(e)
            return content
        content.rows = rows
        content.row_count = len(rows)
        return content

    async def fetch_rows(self, table: str) -> TableContent:
        """All rows of a table, up to the row limit."""
        return await self.execute_query(
            f"SELECT * FROM {quote_identifier(table)}",
            description=f"All data from table: {table}",
        )

    async def _fetch_source(self, table: str) -> Source:
        content = await self.fetch_rows(table)
        content.table_name = table
        return Source(id=table, kind="table", content=content)

    async def extract(self, table: str) -> Source:
        """Rows of one table as a source, memoized unless the read failed."""
        source = await self._cache.get_or_extract(table, lambda: self._fetch_source(table))
        if source.content.error:
            self._cache.invalidate(table)
        return source

    async def _extract_logged(self, table: str) -> Source:
        set_source_context(table)
        source = await self.extract(table)
        if source.content.error:
            logger.warning("Table %s read failed: %s", table, source.content.error)
        return source

    async def extract_many(self, tables: Iterable[str]) -> list[Source]:
        """Fetch tables concurrently, keeping input order."""
        return list(await asyncio.gather(*(self._extract_logged(t) for t in tables)))

    async def find_relevant(
        self,
        raw_query: str,
        top_k: int = DEFAULT_TOP_K,
        min_score: float = DEFAULT_MIN_SCORE,
    ) -> list[RelevanceScore]:
        """Rank every table against the query, by name and serialized rows."""
        if not extract_keywords(raw_query):
            return []
        try:
            tables = await self.list_tables()
        except sqlite3.Error as e:
            logger.error("Cannot list tables of %s: %s", self._database_path, e)
            return []
        sources = await self.extract_many(tables)
        return rank_sources(raw_query, sources, top_k=top_k, min_score=min_score)
