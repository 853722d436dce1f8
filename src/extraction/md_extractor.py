# src/extraction/md_extractor.py - v1
"""Markdown extractor: image syntax is reduced to its alt text."""

from __future__ import annotations

import re
from pathlib import Path

from ragcache.core.models import ExtractionResult
from ragcache.extraction.base_extractor import BaseExtractor

_IMAGE_REF = re.compile(r"!\[([^\]]*)\]\([^)]+\)")


class MdExtractor(BaseExtractor):
    """Extractor for Markdown files (.md, .markdown)."""

    @property
    def supported_extensions(self) -> list[str]:
        return [".md", ".markdown"]

    @property
    def document_type(self) -> str:
        return "md"

    def extract_sync(self, content: bytes | str | Path) -> ExtractionResult:
        text = _IMAGE_REF.sub(r"\1", self._read_text(content))
        return ExtractionResult(text=text, document_type=self.document_type)
