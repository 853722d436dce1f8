# tests/conftest.py - v1
"""Shared test fixtures for all unit and integration tests.

Provides a stub generative model, source factories, a populated documents
directory, a small SQLite database and orchestrator wiring. The model is
never contacted over the network.
"""

from __future__ import annotations

import asyncio
import sqlite3
from pathlib import Path
from typing import Any

import pytest

from ragcache.cache.memory_store import MemoryCacheStore
from ragcache.cache.response_cache import ResponseCache
from ragcache.config.settings import Settings
from ragcache.core.models import DocumentContent, Source, TableContent
from ragcache.llm.base_client import BaseLLMClient
from ragcache.llm.models import LLMResponse
from ragcache.logging.context import clear_context
from ragcache.pipeline.orchestrator import QueryOrchestrator


class StubLLMClient(BaseLLMClient):
    """Records every prompt and answers with a fixed reply or error."""

    def __init__(
        self,
        reply: str = "stub answer",
        error: Exception | None = None,
        delay_s: float = 0.0,
    ) -> None:
        self.reply = reply
        self.error = error
        self.delay_s = delay_s
        self.calls: list[dict[str, Any]] = []

    async def complete(
        self,
        prompt: str,
        system: str | None = None,
        max_tokens: int = 2000,
        temperature: float = 0.7,
    ) -> LLMResponse:
        self.calls.append(
            {"prompt": prompt, "max_tokens": max_tokens, "temperature": temperature}
        )
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        if self.error is not None:
            raise self.error
        return LLMResponse(content=self.reply, model="stub", provider="stub")

    @property
    def call_count(self) -> int:
        return len(self.calls)

    @property
    def provider_name(self) -> str:
        return "stub"

    @property
    def model(self) -> str:
        return "stub"


# === FIXTURES: Context hygiene ===


@pytest.fixture(autouse=True)
def _reset_log_context():
    clear_context()
    yield
    clear_context()


# === FIXTURES: Model ===


@pytest.fixture
def llm_factory() -> type[StubLLMClient]:
    """The StubLLMClient class, for tests that need a custom reply or error."""
    return StubLLMClient


@pytest.fixture
def stub_llm() -> StubLLMClient:
    return StubLLMClient()


# === FIXTURES: Sample data ===


@pytest.fixture
def make_document():
    """Factory for document sources."""

    def _make(filename: str, text: str, page_count: int = 0, document_type: str = "txt") -> Source:
        return Source(
            id=filename,
            kind="document",
            content=DocumentContent(
                filename=filename,
                document_type=document_type,
                content=text,
                page_count=page_count,
            ),
        )

    return _make


@pytest.fixture
def make_table():
    """Factory for table sources."""

    def _make(name: str, rows: list[dict[str, Any]], error: str | None = None) -> Source:
        return Source(
            id=name,
            kind="table",
            content=TableContent(
                table_name=name,
                query=f'SELECT * FROM "{name}" LIMIT 100',
                description=f"All data from table: {name}",
                rows=rows,
                row_count=len(rows),
                error=error,
            ),
        )

    return _make


FLUMOX_FAQ = (
    "Product catalogue overview for the internal tooling group.\n\n"
    "FAQ entry: what is flumox? Flumox is a widget used for testing "
    "the assembly line sensors before shipment.\n\n"
    "Short note.\n"
)

NIS2_NOTES = (
    "The NIS2 directive extends cybersecurity obligations to essential "
    "and important entities across the European Union.\n\n"
    "Member states must transpose the directive into national law.\n"
)


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    """Documents directory with two readable files and one unsupported file."""
    root = tmp_path / "documents"
    root.mkdir()
    (root / "flumox_faq.txt").write_text(FLUMOX_FAQ, encoding="utf-8")
    (root / "nis2_notes.md").write_text(NIS2_NOTES, encoding="utf-8")
    (root / "archive.zip.part").write_text("ignored", encoding="utf-8")
    return root


@pytest.fixture
def sample_db(tmp_path: Path) -> Path:
    """SQLite database with customers and orders tables."""
    path = tmp_path / "shop.db"
    conn = sqlite3.connect(path)
    conn.executescript(
        """
        CREATE TABLE customers (id INTEGER PRIMARY KEY, name TEXT NOT NULL, city TEXT);
        CREATE TABLE orders (id INTEGER PRIMARY KEY, customer_id INTEGER, total REAL);
        INSERT INTO customers (name, city) VALUES
            ('Alice', 'Paris'), ('Bob', 'Lyon'), ('Chloe', 'Paris');
        INSERT INTO orders (customer_id, total) VALUES (1, 12.5), (2, 99.0);
        """
    )
    conn.commit()
    conn.close()
    return path


# === FIXTURES: Wiring ===


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        documents_path=tmp_path / "documents",
        response_cache_path=tmp_path / "responses.db",
    )


@pytest.fixture
def make_orchestrator(test_settings: Settings):
    """Factory wiring an orchestrator with a memory cache and no retries."""

    def _make(
        llm: BaseLLMClient | None,
        documents: Any = None,
        tables: Any = None,
        single_flight: bool = False,
        **overrides: Any,
    ) -> QueryOrchestrator:
        settings = test_settings.model_copy(update=overrides) if overrides else test_settings
        return QueryOrchestrator(
            response_cache=ResponseCache(MemoryCacheStore(), single_flight=single_flight),
            llm_client=llm,
            documents=documents,
            tables=tables,
            settings=settings,
            retry_configs={},
        )

    return _make
