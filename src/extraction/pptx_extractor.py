# src/extraction/pptx_extractor.py - v1
"""PPTX extractor reading slide XML straight from the OOXML zip container.

Each slide renders as:
    Slide Title: <first non-empty text shape>
    Content: <each further text shape>
followed by a blank line. The unit count is the number of slides.
"""

from __future__ import annotations

import io
import logging
import re
import zipfile
from pathlib import Path
from xml.etree import ElementTree

from ragcache.core.models import ExtractionResult
from ragcache.extraction.base_extractor import BaseExtractor

logger = logging.getLogger(__name__)

_NS = {
    "p": "http://schemas.openxmlformats.org/presentationml/2006/main",
    "a": "http://schemas.openxmlformats.org/drawingml/2006/main",
}
_SLIDE_NAME = re.compile(r"^ppt/slides/slide(\d+)\.xml$")


class PptxExtractor(BaseExtractor):
    """Extractor for PowerPoint presentations (.pptx)."""

    @property
    def supported_extensions(self) -> list[str]:
        return [".pptx"]

    @property
    def document_type(self) -> str:
        return "pptx"

    def extract_sync(self, content: bytes | str | Path) -> ExtractionResult:
        source = io.BytesIO(content) if isinstance(content, bytes) else str(content)
        with zipfile.ZipFile(source) as zf:
            numbered: list[tuple[int, str]] = []
            for name in zf.namelist():
                match = _SLIDE_NAME.match(name)
                if match:
                    numbered.append((int(match.group(1)), name))
            rendered = [
                self._render_slide(zf.read(name)) for _, name in sorted(numbered)
            ]

        logger.debug("Extracted %d slides", len(rendered))
        return ExtractionResult(
            text="".join(rendered),
            unit_count=len(rendered),
            document_type=self.document_type,
        )

    @staticmethod
    def shape_texts(slide_xml: bytes) -> list[str]:
        """Non-empty text of each shape on a slide, in document order."""
        root = ElementTree.fromstring(slide_xml)
        texts: list[str] = []
        for shape in root.iter(f"{{{_NS['p']}}}sp"):
            paragraphs = [
                "".join(t.text or "" for t in para.iter(f"{{{_NS['a']}}}t"))
                for para in shape.iter(f"{{{_NS['a']}}}p")
            ]
            text = "\n".join(paragraphs).strip()
            if text:
                texts.append(text)
        return texts

    def _render_slide(self, slide_xml: bytes) -> str:
        lines: list[str] = []
        for i, text in enumerate(self.shape_texts(slide_xml)):
            label = "Slide Title" if i == 0 else "Content"
            lines.append(f"{label}: {text}\n")
        lines.append("\n")
        return "".join(lines)
