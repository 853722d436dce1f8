# src/extraction/txt_extractor.py - v1
"""Plain text extractor: passthrough."""

from __future__ import annotations

from pathlib import Path

from ragcache.core.models import ExtractionResult
from ragcache.extraction.base_extractor import BaseExtractor


class TxtExtractor(BaseExtractor):
    """Extractor for plain text files (.txt)."""

    @property
    def supported_extensions(self) -> list[str]:
        return [".txt"]

    @property
    def document_type(self) -> str:
        return "txt"

    def extract_sync(self, content: bytes | str | Path) -> ExtractionResult:
        return ExtractionResult(text=self._read_text(content), document_type=self.document_type)
