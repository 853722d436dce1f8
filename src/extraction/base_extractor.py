# src/extraction/base_extractor.py - v1
"""Abstract extractor interface for document formats.

Parsing is blocking, so extract() runs the format-specific work in a worker
thread and keeps the event loop free during fan-out.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from pathlib import Path

from ragcache.core.models import ExtractionResult


class BaseExtractor(ABC):
    """Unified interface for document format extractors."""

    @property
    @abstractmethod
    def supported_extensions(self) -> list[str]:
        """File extensions this extractor handles (e.g., ['.pdf'])."""

    @property
    @abstractmethod
    def document_type(self) -> str:
        """Short type label reported with answers (e.g., 'pdf')."""

    @abstractmethod
    def extract_sync(self, content: bytes | str | Path) -> ExtractionResult:
        """Blocking extraction of text and unit count."""

    async def extract(self, content: bytes | str | Path) -> ExtractionResult:
        """Extract text from a document without blocking the event loop."""
        return await asyncio.to_thread(self.extract_sync, content)

    @staticmethod
    def _read_text(content: bytes | str | Path) -> str:
        """Decode text-based inputs; a str naming an existing file is read."""
        if isinstance(content, Path):
            return content.read_text(encoding="utf-8", errors="replace")
        if isinstance(content, bytes):
            return content.decode("utf-8", errors="replace")
        p = Path(content)
        if p.exists() and p.is_file():
            return p.read_text(encoding="utf-8", errors="replace")
        return content
