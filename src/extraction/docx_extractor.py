# src/extraction/docx_extractor.py - v1
"""DOCX extractor using python-docx.

Paragraphs are separated by blank lines so each one can be quoted on its
own; tables contribute one 'cell | cell' line per row.
Requires the 'python-docx' package.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path

from ragcache.core.models import ExtractionResult
from ragcache.extraction.base_extractor import BaseExtractor

logger = logging.getLogger(__name__)


class DocxExtractor(BaseExtractor):
    """Extractor for Word documents (.docx)."""

    @property
    def supported_extensions(self) -> list[str]:
        return [".docx"]

    @property
    def document_type(self) -> str:
        return "docx"

    def extract_sync(self, content: bytes | str | Path) -> ExtractionResult:
        """Extract paragraph and table text from a DOCX document."""
        try:
            import docx
        except ImportError as e:
            raise ImportError(
                "python-docx package required for DOCX extraction: "
                "pip install python-docx"
            ) from e

        doc = self._open_document(content, docx)

        text_parts = [para.text for para in doc.paragraphs if para.text.strip()]
        for table in doc.tables:
            rows = [
                " | ".join(cell.text.strip() for cell in row.cells)
                for row in table.rows
            ]
            if rows:
                text_parts.append("\n".join(rows))

        return ExtractionResult(
            text="\n\n".join(text_parts),
            document_type=self.document_type,
        )

    @staticmethod
    def _open_document(content: bytes | str | Path, docx_module: object) -> object:
        """Open DOCX from various input types."""
        docx_mod = docx_module  # type: ignore[assignment]
        if isinstance(content, bytes):
            return docx_mod.Document(io.BytesIO(content))
        path = Path(content)
        if not path.is_file():
            raise FileNotFoundError(f"DOCX file not found: {content}")
        return docx_mod.Document(str(path))
