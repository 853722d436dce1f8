# src/extraction/extractor_factory.py - v1
"""Factory: instantiate extractor from file extension."""

from __future__ import annotations

from ragcache.core.errors import UnsupportedFormatError
from ragcache.extraction.base_extractor import BaseExtractor
from ragcache.extraction.docx_extractor import DocxExtractor
from ragcache.extraction.md_extractor import MdExtractor
from ragcache.extraction.pdf_extractor import PdfExtractor
from ragcache.extraction.pptx_extractor import PptxExtractor
from ragcache.extraction.txt_extractor import TxtExtractor

__all__ = [
    "UnsupportedFormatError",
    "create_extractor",
    "register_extractor",
    "supported_extensions",
]

# Registry maps extension to extractor class.
_EXTRACTOR_REGISTRY: dict[str, type[BaseExtractor]] = {}


def _register_defaults() -> None:
    """Register built-in extractors."""
    for cls in [TxtExtractor, MdExtractor, PdfExtractor, PptxExtractor, DocxExtractor]:
        instance = cls()
        for ext in instance.supported_extensions:
            _EXTRACTOR_REGISTRY[ext.lower()] = cls


_register_defaults()


def _normalize_extension(extension: str) -> str:
    ext = extension.lower()
    return ext if ext.startswith(".") else f".{ext}"


def create_extractor(extension: str) -> BaseExtractor:
    """Create an extractor for the given file extension.

    Args:
        extension: File extension, with or without dot (e.g. ".pdf", "md").

    Returns:
        BaseExtractor instance.

    Raises:
        UnsupportedFormatError: If no extractor is registered.
    """
    ext = _normalize_extension(extension)
    cls = _EXTRACTOR_REGISTRY.get(ext)
    if cls is None:
        raise UnsupportedFormatError(ext)
    return cls()


def register_extractor(extension: str, cls: type[BaseExtractor]) -> None:
    """Register a custom extractor for an extension."""
    _EXTRACTOR_REGISTRY[_normalize_extension(extension)] = cls


def supported_extensions() -> list[str]:
    """Return list of supported file extensions."""
    return sorted(_EXTRACTOR_REGISTRY.keys())
