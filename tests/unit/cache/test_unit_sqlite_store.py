# tests/unit/cache/test_unit_sqlite_store.py - v1
"""Tests for cache/sqlite_store.py - persistent response cache."""

from __future__ import annotations

import pytest

from ragcache.cache.models import CacheEntry, SourceSummary
from ragcache.cache.sqlite_store import SqliteCacheStore
from ragcache.core.models import DocumentSource


class StepClock:
    """Advances one second per reading so insertion order is unambiguous."""

    def __init__(self) -> None:
        self.now = 1_700_000_000.0

    def __call__(self) -> float:
        self.now += 1.0
        return self.now


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "cache" / "responses.db"


def _entry(key: str, answer: str = "answer") -> CacheEntry:
    return CacheEntry(normalized_key=key, answer=answer)


class TestSqliteCacheStore:
    @pytest.mark.asyncio
    async def test_put_get_roundtrip_keeps_summary(self, db_path):
        store = SqliteCacheStore(db_path)
        summary = SourceSummary(
            documents=[DocumentSource(filename="a.pdf", type="pdf", page_numbers=[3])],
            answer_path="direct",
        )
        await store.put("k", CacheEntry(normalized_key="k", answer="A", source_summary=summary))
        entry = await store.get("k")
        assert entry.answer == "A"
        assert entry.source_summary.answer_path == "direct"
        assert entry.source_summary.documents[0].filename == "a.pdf"
        store.close()

    @pytest.mark.asyncio
    async def test_creates_parent_directory(self, db_path):
        store = SqliteCacheStore(db_path)
        assert db_path.parent.is_dir()
        store.close()

    @pytest.mark.asyncio
    async def test_overwrite_delete_clear(self, db_path):
        store = SqliteCacheStore(db_path)
        await store.put("k", _entry("k", "old"))
        await store.put("k", _entry("k", "new"))
        assert (await store.get("k")).answer == "new"
        assert len(await store.list_entries()) == 1
        await store.delete("k")
        assert await store.get("k") is None
        await store.put("x", _entry("x"))
        await store.clear()
        assert await store.list_entries() == []
        store.close()

    @pytest.mark.asyncio
    async def test_survives_reopen(self, db_path):
        store = SqliteCacheStore(db_path)
        await store.put("capital france", _entry("capital france", "Paris"))
        store.close()
        reopened = SqliteCacheStore(db_path)
        assert (await reopened.get("capital france")).answer == "Paris"
        reopened.close()

    @pytest.mark.asyncio
    async def test_prunes_oldest_beyond_capacity(self, db_path):
        store = SqliteCacheStore(db_path, max_entries=2, clock=StepClock())
        for key in ("a", "b", "c"):
            await store.put(key, _entry(key))
        assert await store.get("a") is None
        assert {e.normalized_key for e in await store.list_entries()} == {"b", "c"}
        store.close()

    @pytest.mark.asyncio
    async def test_ttl(self, db_path):
        clock = StepClock()
        store = SqliteCacheStore(db_path, ttl_s=5, clock=clock)
        await store.put("k", _entry("k"))
        assert await store.get("k") is not None
        clock.now += 10
        assert await store.list_entries() == []
        assert await store.get("k") is None
        store.close()
