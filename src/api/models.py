# src/api/models.py - v1
"""API-level models: PromptRequest, ModelParameters, PromptResponse."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from ragcache.cache.models import AnswerPath
from ragcache.core.models import DatabaseSource, DocumentSource

__all__ = [
    "DatabaseSource",
    "DocumentSource",
    "ModelParameters",
    "PromptRequest",
    "PromptResponse",
    "WarmupReport",
]


class ModelParameters(BaseModel):
    """Sampling parameters for the generative fallback."""

    temperature: float = Field(default=0.7, ge=0.0)
    max_tokens: int = Field(default=1000, gt=0)


class PromptRequest(BaseModel):
    """A query with optional explicit sources and sampling parameters."""

    prompt: str = ""
    document_references: list[str] = Field(default_factory=list)
    database_references: list[str] = Field(default_factory=list)
    model_parameters: ModelParameters | None = None


class PromptResponse(BaseModel):
    """Answer with the sources actually used and how it was produced."""

    prompt: str
    response: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    document_sources: list[DocumentSource] = Field(default_factory=list)
    database_sources: list[DatabaseSource] = Field(default_factory=list)
    answer_path: AnswerPath
    cached: bool = False


class WarmupReport(BaseModel):
    """Outcome of preloading the content caches."""

    documents_listed: int = 0
    documents_loaded: int = 0
    tables_listed: int = 0
    tables_loaded: int = 0
    duration_s: float = 0.0
