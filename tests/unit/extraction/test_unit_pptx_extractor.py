# tests/unit/extraction/test_unit_pptx_extractor.py - v1
"""Tests for extraction/pptx_extractor.py using hand-built OOXML archives."""

from __future__ import annotations

import io
import zipfile

import pytest

from ragcache.extraction.pptx_extractor import PptxExtractor

_P = "http://schemas.openxmlformats.org/presentationml/2006/main"
_A = "http://schemas.openxmlformats.org/drawingml/2006/main"


def _shape(*paragraphs: str) -> str:
    paras = "".join(f"<a:p><a:r><a:t>{p}</a:t></a:r></a:p>" for p in paragraphs)
    return f"<p:sp><p:txBody>{paras}</p:txBody></p:sp>"


def _slide(*shapes: str) -> str:
    return (
        f'<p:sld xmlns:p="{_P}" xmlns:a="{_A}"><p:cSld><p:spTree>'
        + "".join(shapes)
        + "</p:spTree></p:cSld></p:sld>"
    )


def _pptx(slides: dict[int, str]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        zf.writestr("[Content_Types].xml", "<Types/>")
        zf.writestr("ppt/presentation.xml", "<presentation/>")
        for number, xml in slides.items():
            zf.writestr(f"ppt/slides/slide{number}.xml", xml)
        zf.writestr("ppt/slides/_rels/slide1.xml.rels", "<Relationships/>")
    return buf.getvalue()


class TestPptxExtractor:
    def test_title_and_content_lines(self):
        data = _pptx({1: _slide(_shape("Quarterly review"), _shape("Revenue up", "Costs flat"))})
        result = PptxExtractor().extract_sync(data)
        assert result.text == (
            "Slide Title: Quarterly review\n"
            "Content: Revenue up\nCosts flat\n"
            "\n"
        )
        assert result.unit_count == 1
        assert result.document_type == "pptx"

    def test_slides_in_numeric_order(self):
        data = _pptx({
            10: _slide(_shape("Ten")),
            2: _slide(_shape("Two")),
            1: _slide(_shape("One")),
        })
        result = PptxExtractor().extract_sync(data)
        titles = [line for line in result.text.splitlines() if line.startswith("Slide Title")]
        assert titles == ["Slide Title: One", "Slide Title: Two", "Slide Title: Ten"]
        assert result.unit_count == 3

    def test_empty_shapes_skipped(self):
        xml = _slide(_shape("   "), _shape("Agenda"))
        assert PptxExtractor.shape_texts(xml.encode()) == ["Agenda"]

    @pytest.mark.asyncio
    async def test_from_path(self, tmp_path):
        path = tmp_path / "deck.pptx"
        path.write_bytes(_pptx({1: _slide(_shape("Hello"))}))
        result = await PptxExtractor().extract(path)
        assert result.text.startswith("Slide Title: Hello")

    def test_not_a_zip(self):
        with pytest.raises(zipfile.BadZipFile):
            PptxExtractor().extract_sync(b"definitely not a presentation")
