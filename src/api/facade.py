# src/api/facade.py - v1
"""Public API facade: single entry point for answering prompts.

Usage:
    from ragcache.api.facade import process_prompt
    response = await process_prompt(PromptRequest(prompt="What is NIS2?"))

Without an explicit orchestrator, one built from Settings is created on first
use and reused, so its caches persist for the life of the process.
"""

from __future__ import annotations

import asyncio
import logging
import time

from ragcache.api.models import PromptRequest, PromptResponse, WarmupReport
from ragcache.cache.base_cache_store import BaseCacheStore
from ragcache.cache.cache_factory import create_cache_store
from ragcache.cache.content_cache import ContentCache
from ragcache.cache.response_cache import ResponseCache
from ragcache.config.settings import Settings
from ragcache.llm.base_client import BaseLLMClient
from ragcache.llm.client_factory import create_default_client
from ragcache.pipeline.orchestrator import QueryOrchestrator
from ragcache.sources.documents import DocumentRepository
from ragcache.sources.tables import TableRepository

logger = logging.getLogger(__name__)

_default_orchestrator: QueryOrchestrator | None = None


def build_orchestrator(
    settings: Settings | None = None,
    llm_client: BaseLLMClient | None = None,
    cache_store: BaseCacheStore | None = None,
) -> QueryOrchestrator:
    """Wire repositories, caches and the model client from settings.

    Args:
        settings: Global settings. Loaded from .env if None.
        llm_client: Generative model. Created from LLM_PROVIDER if None.
        cache_store: Response-cache backend. Created from RESPONSE_CACHE_BACKEND if None.

    Returns:
        Ready QueryOrchestrator (caches empty).
    """
    settings = settings or Settings()

    documents = DocumentRepository(
        root=settings.documents_path,
        extensions=settings.document_extensions_list,
        content_cache=ContentCache(settings.content_cache_max_entries),
    )
    tables = None
    if settings.database_path:
        tables = TableRepository(
            database_path=settings.database_path,
            row_limit=settings.table_row_limit,
            content_cache=ContentCache(settings.content_cache_max_entries),
        )

    response_cache = ResponseCache(
        store=cache_store if cache_store is not None else create_cache_store(settings),
        single_flight=settings.response_single_flight,
    )
    client = llm_client or create_default_client(settings)

    logger.info(
        "Orchestrator ready: documents=%s, database=%s, cache=%s, model=%s/%s",
        settings.documents_path, settings.database_path or "-",
        settings.response_cache_backend, settings.llm_provider, settings.llm_model,
    )
    return QueryOrchestrator(
        response_cache=response_cache,
        llm_client=client,
        documents=documents,
        tables=tables,
        settings=settings,
    )


async def create_service(
    settings: Settings | None = None,
    llm_client: BaseLLMClient | None = None,
    cache_store: BaseCacheStore | None = None,
) -> QueryOrchestrator:
    """Build an orchestrator and preload its caches when PRELOAD_ON_STARTUP is set."""
    settings = settings or Settings()
    orchestrator = build_orchestrator(settings, llm_client, cache_store)
    if settings.preload_on_startup:
        await warm_caches(orchestrator)
    return orchestrator


def default_orchestrator() -> QueryOrchestrator:
    """Process-wide orchestrator built from .env on first call."""
    global _default_orchestrator
    if _default_orchestrator is None:
        _default_orchestrator = build_orchestrator()
    return _default_orchestrator


async def process_prompt(
    request: PromptRequest | str,
    orchestrator: QueryOrchestrator | None = None,
    budget_s: float | None = None,
) -> PromptResponse:
    """Answer a prompt end-to-end.

    Never raises for source, cache or model failures: the response then
    carries a placeholder answer with answer_path "degraded".
    """
    if isinstance(request, str):
        request = PromptRequest(prompt=request)
    orchestrator = orchestrator or default_orchestrator()

    params = request.model_parameters
    state = await orchestrator.run(
        request.prompt,
        document_ids=request.document_references,
        table_ids=request.database_references,
        temperature=params.temperature if params else None,
        max_tokens=params.max_tokens if params else None,
        budget_s=budget_s,
    )
    return PromptResponse(
        prompt=request.prompt,
        response=state.answer,
        document_sources=state.document_sources(),
        database_sources=state.database_sources(),
        answer_path=state.answer_path,
        cached=state.cached,
    )


def process_prompt_sync(
    request: PromptRequest | str,
    orchestrator: QueryOrchestrator | None = None,
    budget_s: float | None = None,
) -> PromptResponse:
    """Blocking wrapper around process_prompt for non-async callers."""
    return asyncio.run(process_prompt(request, orchestrator, budget_s))


async def generate_simple_response(
    prompt: str,
    temperature: float | None = None,
    orchestrator: QueryOrchestrator | None = None,
) -> str:
    """Model answer without retrieval, cached by normalized prompt."""
    orchestrator = orchestrator or default_orchestrator()
    return await orchestrator.generate_simple(prompt, temperature)


async def warm_caches(orchestrator: QueryOrchestrator | None = None) -> WarmupReport:
    """Extract every document and fetch every table into the content caches.

    Documents and tables load concurrently; failures are logged and skipped.
    """
    orchestrator = orchestrator or default_orchestrator()
    start = time.monotonic()
    report = WarmupReport()

    async def load_documents() -> None:
        repo = orchestrator.documents
        if repo is None:
            return
        names = await repo.list_documents()
        report.documents_listed = len(names)
        report.documents_loaded = len(await repo.extract_many(names))

    async def load_tables() -> None:
        repo = orchestrator.tables
        if repo is None:
            return
        try:
            names = await repo.list_tables()
        except Exception:
            logger.exception("Cannot list tables for warm-up")
            return
        report.tables_listed = len(names)
        loaded = await repo.extract_many(names)
        report.tables_loaded = sum(1 for src in loaded if not src.content.error)

    await asyncio.gather(load_documents(), load_tables())
    report.duration_s = time.monotonic() - start
    logger.info(
        "Caches warmed: %d/%d documents, %d/%d tables in %.1fs",
        report.documents_loaded, report.documents_listed,
        report.tables_loaded, report.tables_listed, report.duration_s,
    )
    return report
