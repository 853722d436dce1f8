# src/cache/models.py - v1
"""Cache domain models: SourceSummary, CacheEntry."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field

from ragcache.core.models import DatabaseSource, DocumentSource

AnswerPath = Literal["cache", "direct", "generative", "degraded"]


class SourceSummary(BaseModel):
    """Sources that backed a cached answer."""

    documents: list[DocumentSource] = Field(default_factory=list)
    tables: list[DatabaseSource] = Field(default_factory=list)
    answer_path: AnswerPath = "generative"


class CacheEntry(BaseModel):
    """Single response-cache entry. At most one per normalized key."""

    normalized_key: str
    answer: str
    source_summary: SourceSummary = Field(default_factory=SourceSummary)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
