# src/core/models.py - v1
"""Shared Pydantic domain models used across modules.

Sources are identified by filename (documents) or table name (tables).
Derived query fields are pure functions of the raw text.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, Field

from ragcache.core.errors import InvalidQuery
from ragcache.core.keywords import extract_keywords
from ragcache.core.normalizer import normalize_prompt

SourceKind = Literal["document", "table"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# === EXTRACTION ===


class ExtractionResult(BaseModel):
    """Output of a document extractor."""

    text: str
    unit_count: int = 0  # pages or slides, 0 when the format has none
    document_type: str


# === SOURCE CONTENT ===


class DocumentContent(BaseModel):
    """Extracted text of one document file."""

    filename: str
    document_type: str
    content: str
    page_count: int = 0

    def as_text(self) -> str:
        return self.content


class TableContent(BaseModel):
    """Rows fetched from one table, or the error that prevented it."""

    table_name: str
    query: str
    description: str = ""
    rows: list[dict[str, Any]] = Field(default_factory=list)
    row_count: int = 0
    error: str | None = None

    def row_texts(self) -> list[str]:
        """One 'column: value' line per row, in fetch order."""
        return [
            ", ".join(f"{col}: {val}" for col, val in row.items())
            for row in self.rows
        ]

    def as_text(self) -> str:
        """Serialized rows only; the description is prompt decoration."""
        return "\n".join(self.row_texts())


class Source(BaseModel):
    """A document or table that can be ranked and quoted."""

    id: str
    kind: SourceKind
    content: DocumentContent | TableContent

    @property
    def text(self) -> str:
        return self.content.as_text()

    @property
    def locator(self) -> int | None:
        """Page/slide count for documents, None when unknown."""
        if isinstance(self.content, DocumentContent) and self.content.page_count > 0:
            return self.content.page_count
        return None


class ContentCacheEntry(BaseModel):
    """Extracted content memoized per source id."""

    source_id: str
    source: Source
    extracted_at: datetime = Field(default_factory=_utcnow)


# === RANKING ===


class RelevanceScore(BaseModel):
    """Transient per-query score of one source."""

    source_id: str
    score: float = Field(ge=0.0)
    matched_fragment: str | None = None


# === QUERY ===


class Query(BaseModel):
    """Raw query text with its derived keywords and cache key."""

    raw: str = ""

    @property
    def keywords(self) -> list[str]:
        return extract_keywords(self.raw)

    @property
    def normalized_key(self) -> str:
        return normalize_prompt(self.raw)

    def require_text(self) -> str:
        """Return the stripped query text.

        Raises:
            InvalidQuery: If the query is empty or blank.
        """
        text = self.raw.strip()
        if not text:
            raise InvalidQuery("Query is empty")
        return text


# === ATTRIBUTION ===


class DocumentSource(BaseModel):
    """Document that contributed to an answer."""

    filename: str
    type: str
    page_numbers: list[int] = Field(default_factory=list)


class DatabaseSource(BaseModel):
    """Table that contributed to an answer."""

    table_name: str
    query: str
