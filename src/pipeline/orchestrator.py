# src/pipeline/orchestrator.py - v1
"""Query orchestrator: answer a prompt from cache, sources or the model.

Stages, in order:
  CACHE_CHECK            normalized-key lookup, a hit ends the query
  SOURCE_DISCOVERY       explicit ids, or concurrent ranking of documents
                         and tables; contents extracted through the caches
  DIRECT_ANSWER_ATTEMPT  quote a document paragraph when one clearly answers
  GENERATIVE_FALLBACK    grounded prompt sent to the generative model
  CACHE_WRITE            answer stored under the normalized key
  DONE

Failures are absorbed: unreadable sources are dropped, model failures and an
exhausted request budget produce a placeholder answer that is not cached.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Any, Awaitable, Iterable

from ragcache.cache.models import CacheEntry, SourceSummary
from ragcache.cache.response_cache import ResponseCache, cached
from ragcache.config.settings import Settings
from ragcache.core.errors import (
    GenerativeModelFailure,
    InvalidQuery,
    LLMMalformedResponseError,
    NoRelevantSources,
)
from ragcache.core.models import Query
from ragcache.core.normalizer import normalize_prompt
from ragcache.llm.retry import RetryConfig, root_cause, with_retry
from ragcache.logging.context import set_query_context, set_stage_context
from ragcache.pipeline.prompt_builder import build_full_prompt, build_system_prompt
from ragcache.pipeline.state import QueryStage, QueryState
from ragcache.ranking.direct_answer import find_direct_answer

if TYPE_CHECKING:
    from ragcache.llm.base_client import BaseLLMClient
    from ragcache.sources.documents import DocumentRepository
    from ragcache.sources.tables import TableRepository

logger = logging.getLogger(__name__)

ERROR_PREFIX = "Error generating response: "
NO_RESPONSE_PREFIX = "No response from AI model: "
SIMPLE_KEY_PREFIX = "simple:"


def failure_placeholder(error: BaseException) -> str:
    """User-visible answer standing in for a failed generation."""
    cause = root_cause(error)
    if isinstance(cause, LLMMalformedResponseError):
        return f"{NO_RESPONSE_PREFIX}{cause}"
    return f"{ERROR_PREFIX}{cause}"


class QueryOrchestrator:
    """Answers queries over documents and tables with response caching.

    Args:
        response_cache: Answer cache keyed by normalized prompt.
        llm_client: Generative model for the fallback (None disables it).
        documents: Document repository (None = no documents).
        tables: Table repository (None = no tables).
        settings: Thresholds, defaults and request budget.
        retry_configs: Retry policy per error type for model calls.
    """

    def __init__(
        self,
        response_cache: ResponseCache,
        llm_client: BaseLLMClient | None,
        documents: DocumentRepository | None = None,
        tables: TableRepository | None = None,
        settings: Settings | None = None,
        retry_configs: dict[str, RetryConfig] | None = None,
    ) -> None:
        self._cache = response_cache
        self._llm = llm_client
        self._documents = documents
        self._tables = tables
        self._settings = settings or Settings()
        self._retry_configs = retry_configs
        self._simple = cached(_simple_key, response_cache)(self._generate_simple_uncached)

    @property
    def response_cache(self) -> ResponseCache:
        return self._cache

    @property
    def documents(self) -> DocumentRepository | None:
        return self._documents

    @property
    def tables(self) -> TableRepository | None:
        return self._tables

    async def run(
        self,
        raw_query: str | None,
        document_ids: Iterable[str] | None = None,
        table_ids: Iterable[str] | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        budget_s: float | None = None,
    ) -> QueryState:
        """Answer one query. Never raises for component failures.

        Args:
            raw_query: Query text as typed (None is treated as empty).
            document_ids: Explicit documents to use instead of ranking.
            table_ids: Explicit tables to use instead of ranking.
            temperature: Sampling temperature for the fallback.
            max_tokens: Generation cap for the fallback.
            budget_s: Wall-clock budget for the whole request (0 = none).

        Returns:
            Final QueryState carrying the answer and the sources used.
        """
        state = QueryState(query=Query(raw=raw_query or ""))
        set_query_context(state.query_id)
        budget = self._settings.request_budget_s if budget_s is None else budget_s
        start = time.monotonic()

        work = self._run_stages(
            state,
            list(document_ids or []),
            list(table_ids or []),
            self._settings.llm_default_temperature if temperature is None else temperature,
            max_tokens or self._settings.llm_max_tokens,
        )
        try:
            if budget and budget > 0:
                await asyncio.wait_for(work, timeout=budget)
            else:
                await work
        except asyncio.TimeoutError:
            logger.warning(
                "Request budget of %.1fs exceeded during %s", budget, state.stage.value
            )
            self._degrade(state, f"{ERROR_PREFIX}request exceeded its time budget of {budget:g}s")
        except Exception as exc:
            logger.exception("Query failed during %s", state.stage.value)
            self._degrade(state, f"{ERROR_PREFIX}{exc}")

        if state.stage is not QueryStage.DONE:
            state.enter(QueryStage.DONE)
        set_stage_context(None)
        logger.info(
            "Query answered via %s in %.2fs (%d documents, %d tables)",
            state.answer_path, time.monotonic() - start,
            len(state.documents), len(state.tables),
        )
        return state

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _enter(self, state: QueryState, stage: QueryStage) -> None:
        state.enter(stage)
        set_stage_context(stage.value)
        logger.debug("Entering stage %s", stage.value)

    @staticmethod
    def _degrade(state: QueryState, answer: str) -> None:
        state.answer = answer
        state.answer_path = "degraded"
        state.cached = False

    async def _run_stages(
        self,
        state: QueryState,
        document_ids: list[str],
        table_ids: list[str],
        temperature: float,
        max_tokens: int,
    ) -> None:
        self._enter(state, QueryStage.CACHE_CHECK)
        state.cache_key = state.query.normalized_key
        if state.cache_key:
            entry = await self._lookup(state.cache_key)
            if entry is not None:
                state.answer = entry.answer
                state.answer_path = "cache"
                state.cached = True
                state.cached_summary = entry.source_summary
                self._enter(state, QueryStage.DONE)
                return

        async def compute() -> tuple[str, SourceSummary]:
            return await self._compute(state, document_ids, table_ids, temperature, max_tokens)

        if not state.cache_key:
            await compute()
            return

        answer, summary = await self._cache.run_once(state.cache_key, compute)
        if state.stage is not QueryStage.DONE:
            # joined another caller's in-flight computation
            state.answer = answer
            state.answer_path = summary.answer_path
            state.cached_summary = summary
            self._enter(state, QueryStage.DONE)

    async def _compute(
        self,
        state: QueryState,
        document_ids: list[str],
        table_ids: list[str],
        temperature: float,
        max_tokens: int,
    ) -> tuple[str, SourceSummary]:
        self._enter(state, QueryStage.SOURCE_DISCOVERY)
        await self._discover(state, document_ids, table_ids)

        self._enter(state, QueryStage.DIRECT_ANSWER_ATTEMPT)
        direct = find_direct_answer(
            state.query.raw,
            state.documents,
            threshold=self._settings.direct_answer_threshold,
            min_paragraph_chars=self._settings.direct_answer_min_paragraph_chars,
        )
        if direct is not None:
            state.answer = direct.answer
            state.answer_path = "direct"
        else:
            self._enter(state, QueryStage.GENERATIVE_FALLBACK)
            await self._generate(state, temperature, max_tokens)

        summary = state.source_summary()
        if state.answer_path != "degraded" and state.cache_key:
            self._enter(state, QueryStage.CACHE_WRITE)
            await self._store(state.cache_key, state.answer, summary)
        self._enter(state, QueryStage.DONE)
        return state.answer, summary

    # --- Discovery ---

    async def _discover(
        self, state: QueryState, document_ids: list[str], table_ids: list[str]
    ) -> None:
        if document_ids or table_ids:
            # Explicit references replace ranking for both kinds.
            state.document_ids, state.table_ids = document_ids, table_ids
        else:
            try:
                raw = state.query.require_text()
            except InvalidQuery as exc:
                logger.warning("%s, answering without context", exc)
                return
            state.document_ids, state.table_ids = await asyncio.gather(
                self._guard(self._rank_documents(state, raw), "document ranking"),
                self._guard(self._rank_tables(state, raw), "table ranking"),
            )

        state.documents, state.tables = await asyncio.gather(
            self._guard(self._documents.extract_many(state.document_ids), "document extraction")
            if self._documents and state.document_ids else _empty(),
            self._guard(self._tables.extract_many(state.table_ids), "table extraction")
            if self._tables and state.table_ids else _empty(),
        )
        if not state.documents and not state.tables:
            logger.info("No usable sources, continuing with empty context")

    async def _rank_documents(self, state: QueryState, raw: str) -> list[str]:
        if self._documents is None:
            return []
        scores = await self._documents.find_relevant(
            raw, top_k=self._settings.ranking_top_k, min_score=self._settings.ranking_min_score
        )
        if not scores:
            raise NoRelevantSources("No document scored above the relevance floor")
        state.document_scores = scores
        return [s.source_id for s in scores]

    async def _rank_tables(self, state: QueryState, raw: str) -> list[str]:
        if self._tables is None:
            return []
        scores = await self._tables.find_relevant(
            raw, top_k=self._settings.ranking_top_k, min_score=self._settings.ranking_min_score
        )
        if not scores:
            raise NoRelevantSources("No table scored above the relevance floor")
        state.table_scores = scores
        return [s.source_id for s in scores]

    @staticmethod
    async def _guard(work: Awaitable[list[Any]], label: str) -> list[Any]:
        """Fan-out boundary: failures become an empty result."""
        try:
            return await work
        except NoRelevantSources as exc:
            logger.info("%s", exc)
        except Exception:
            logger.exception("%s failed, continuing without it", label.capitalize())
        return []

    # --- Generation ---

    async def _generate(self, state: QueryState, temperature: float, max_tokens: int) -> None:
        if self._llm is None:
            self._degrade(state, f"{ERROR_PREFIX}no generative model configured")
            return

        system_prompt = build_system_prompt(state.documents, state.tables)
        prompt = build_full_prompt(system_prompt, state.query.raw)
        state.llm_calls += 1
        try:
            response = await with_retry(
                self._llm.complete,
                prompt,
                max_tokens=max_tokens,
                temperature=temperature,
                operation="generate",
                retry_configs=self._retry_configs,
            )
        except GenerativeModelFailure as exc:
            logger.error("Generative fallback failed: %s", exc)
            self._degrade(state, failure_placeholder(exc))
            return
        if response.truncated:
            logger.warning("Answer truncated at max_tokens=%d", max_tokens)
        state.answer = response.content
        state.answer_path = "generative"

    async def generate_simple(self, prompt: str, temperature: float | None = None) -> str:
        """Model answer without retrieval, cached by normalized prompt."""
        try:
            return await self._simple(prompt, temperature)
        except GenerativeModelFailure as exc:
            logger.error("Simple generation failed: %s", exc)
            return failure_placeholder(exc)

    async def _generate_simple_uncached(self, prompt: str, temperature: float | None = None) -> str:
        if self._llm is None:
            raise GenerativeModelFailure("no generative model configured")
        response = await with_retry(
            self._llm.complete,
            prompt,
            max_tokens=self._settings.llm_max_tokens,
            temperature=self._settings.llm_default_temperature if temperature is None else temperature,
            operation="generate_simple",
            retry_configs=self._retry_configs,
        )
        return response.content

    # --- Cache I/O ---

    async def _lookup(self, key: str) -> CacheEntry | None:
        try:
            return await self._cache.lookup(key)
        except Exception:
            logger.exception("Response cache lookup failed, treating as miss")
            return None

    async def _store(self, key: str, answer: str, summary: SourceSummary) -> None:
        try:
            await self._cache.store(key, answer, summary)
        except Exception:
            logger.exception("Response cache write failed")


def _simple_key(prompt: str, temperature: float | None = None) -> str:
    key = normalize_prompt(prompt)
    return f"{SIMPLE_KEY_PREFIX}{key}" if key else ""


async def _empty() -> list[Any]:
    return []
