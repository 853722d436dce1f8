# src/sources/documents.py - v1
"""Document repository: listing, memoized extraction and ranking of files.

Files live flat in one directory and are identified by filename. Extraction
goes through the content cache, so each file is parsed at most once while it
stays cached. Failing files are logged and left out of fan-out results.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Iterable

from ragcache.cache.content_cache import ContentCache
from ragcache.core.errors import (
    SourceNotFoundError,
    SourceReadError,
    SourceUnavailableError,
    UnsupportedFormatError,
)
from ragcache.core.keywords import extract_keywords
from ragcache.core.models import DocumentContent, RelevanceScore, Source
from ragcache.extraction.extractor_factory import create_extractor, supported_extensions
from ragcache.logging.context import set_source_context
from ragcache.ranking.ranker import DEFAULT_MIN_SCORE, DEFAULT_TOP_K, rank_sources

logger = logging.getLogger(__name__)


class DocumentRepository:
    """Documents directory with cached extraction.

    Args:
        root: Directory holding the documents.
        extensions: Dotted lowercase suffixes to expose (default: all supported).
        content_cache: Memo of extracted content (a private one when None).
    """

    def __init__(
        self,
        root: Path | str,
        extensions: Iterable[str] | None = None,
        content_cache: ContentCache | None = None,
    ) -> None:
        self._root = Path(root).expanduser()
        self._extensions = set(extensions or supported_extensions())
        self._cache = content_cache if content_cache is not None else ContentCache()

    @property
    def root(self) -> Path:
        return self._root

    @property
    def content_cache(self) -> ContentCache:
        return self._cache

    def _list_sync(self) -> list[str]:
        if not self._root.is_dir():
            logger.warning("Documents directory %s does not exist", self._root)
            return []
        return sorted(
            p.name
            for p in self._root.iterdir()
            if p.is_file() and p.suffix.lower() in self._extensions
        )

    async def list_documents(self) -> list[str]:
        """Filenames of all supported documents, sorted."""
        return await asyncio.to_thread(self._list_sync)

    def _resolve(self, filename: str) -> Path:
        path = (self._root / filename).resolve()
        if path.parent != self._root.resolve() or not path.is_file():
            raise SourceNotFoundError(filename)
        return path

    async def _extract_uncached(self, filename: str) -> Source:
        path = await asyncio.to_thread(self._resolve, filename)
        suffix = path.suffix.lower()
        if suffix not in self._extensions:
            raise UnsupportedFormatError(suffix, filename)
        try:
            extractor = create_extractor(suffix)
        except UnsupportedFormatError as e:
            raise UnsupportedFormatError(suffix, filename) from e

        try:
            result = await extractor.extract(path)
        except Exception as e:
            raise SourceReadError(filename, str(e)) from e

        logger.info("Extracted %s (%d chars)", filename, len(result.text))
        return Source(
            id=filename,
            kind="document",
            content=DocumentContent(
                filename=filename,
                document_type=result.document_type,
                content=result.text,
                page_count=result.unit_count,
            ),
        )

    async def extract(self, filename: str) -> Source:
        """Extracted content of one document, memoized.

        Raises:
            SourceUnavailableError: If the file is missing, unsupported or unreadable.
        """
        return await self._cache.get_or_extract(
            filename, lambda: self._extract_uncached(filename)
        )

    async def _extract_or_none(self, filename: str) -> Source | None:
        set_source_context(filename)
        try:
            return await self.extract(filename)
        except SourceUnavailableError as e:
            logger.warning("Skipping document: %s", e)
            return None

    async def extract_many(self, filenames: Iterable[str]) -> list[Source]:
        """Extract documents concurrently, dropping failures, keeping input order."""
        results = await asyncio.gather(
            *(self._extract_or_none(name) for name in filenames)
        )
        return [source for source in results if source is not None]

    async def find_relevant(
        self,
        raw_query: str,
        top_k: int = DEFAULT_TOP_K,
        min_score: float = DEFAULT_MIN_SCORE,
    ) -> list[RelevanceScore]:
        """Rank every listed document against the query."""
        if not extract_keywords(raw_query):
            logger.warning("No meaningful keywords extracted from query")
            return []
        filenames = await self.list_documents()
        if not filenames:
            return []
        sources = await self.extract_many(filenames)
        return rank_sources(raw_query, sources, top_k=top_k, min_score=min_score)
