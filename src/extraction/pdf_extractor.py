# src/extraction/pdf_extractor.py - v1
"""PDF extractor using PyMuPDF (fitz).

Requires the 'pymupdf' package. The unit count is the number of pages.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ragcache.core.models import ExtractionResult
from ragcache.extraction.base_extractor import BaseExtractor

logger = logging.getLogger(__name__)


class PdfExtractor(BaseExtractor):
    """Extractor for PDF files using PyMuPDF."""

    @property
    def supported_extensions(self) -> list[str]:
        return [".pdf"]

    @property
    def document_type(self) -> str:
        return "pdf"

    def extract_sync(self, content: bytes | str | Path) -> ExtractionResult:
        """Extract the text layer of every page."""
        try:
            import fitz  # PyMuPDF
        except ImportError as e:
            raise ImportError(
                "pymupdf package required for PDF extraction: pip install pymupdf"
            ) from e

        doc = self._open_document(content, fitz)
        try:
            pages = [doc[i].get_text("text") for i in range(len(doc))]
        finally:
            doc.close()

        logger.debug("Extracted %d PDF pages", len(pages))
        return ExtractionResult(
            text="\n".join(pages),
            unit_count=len(pages),
            document_type=self.document_type,
        )

    @staticmethod
    def _open_document(content: bytes | str | Path, fitz_module: object) -> object:
        """Open PDF from various input types."""
        fitz_mod = fitz_module  # type: ignore[assignment]
        if isinstance(content, (str, Path)):
            return fitz_mod.open(str(content))
        return fitz_mod.open(stream=content, filetype="pdf")
