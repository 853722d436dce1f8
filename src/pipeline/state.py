# src/pipeline/state.py - v1
"""Mutable per-query state flowing through the orchestrator stages.

Accumulates the cache key, selected sources, extracted contents and the
final answer with how it was obtained.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field

from ragcache.cache.models import AnswerPath, SourceSummary
from ragcache.core.models import (
    DatabaseSource,
    DocumentContent,
    DocumentSource,
    Query,
    RelevanceScore,
    Source,
    TableContent,
)


class QueryStage(str, Enum):
    """Orchestrator stages, in execution order."""

    CACHE_CHECK = "cache_check"
    SOURCE_DISCOVERY = "source_discovery"
    DIRECT_ANSWER_ATTEMPT = "direct_answer_attempt"
    GENERATIVE_FALLBACK = "generative_fallback"
    CACHE_WRITE = "cache_write"
    DONE = "done"


class QueryState(BaseModel):
    """State of one query as it moves through the stages."""

    # === IDENTITY ===
    query_id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    query: Query
    cache_key: str = ""
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # === PROGRESS ===
    stage: QueryStage = QueryStage.CACHE_CHECK
    stage_history: list[QueryStage] = Field(default_factory=list)

    # === SOURCES ===
    document_ids: list[str] = Field(default_factory=list)
    table_ids: list[str] = Field(default_factory=list)
    document_scores: list[RelevanceScore] = Field(default_factory=list)
    table_scores: list[RelevanceScore] = Field(default_factory=list)
    documents: list[Source] = Field(default_factory=list)
    tables: list[Source] = Field(default_factory=list)

    # === RESULT ===
    answer: str = ""
    answer_path: AnswerPath = "generative"
    cached: bool = False
    cached_summary: SourceSummary | None = None
    llm_calls: int = 0

    def enter(self, stage: QueryStage) -> None:
        self.stage = stage
        self.stage_history.append(stage)

    def document_sources(self) -> list[DocumentSource]:
        if self.cached_summary is not None:
            return list(self.cached_summary.documents)
        sources: list[DocumentSource] = []
        for src in self.documents:
            content = src.content
            if isinstance(content, DocumentContent):
                pages = [content.page_count] if content.page_count else []
                sources.append(
                    DocumentSource(filename=src.id, type=content.document_type, page_numbers=pages)
                )
        return sources

    def database_sources(self) -> list[DatabaseSource]:
        if self.cached_summary is not None:
            return list(self.cached_summary.tables)
        return [
            DatabaseSource(table_name=src.id, query=src.content.query)
            for src in self.tables
            if isinstance(src.content, TableContent)
        ]

    def source_summary(self) -> SourceSummary:
        return SourceSummary(
            documents=self.document_sources(),
            tables=self.database_sources(),
            answer_path=self.answer_path,
        )
