# src/core/errors.py - v1
"""Domain exceptions for source access, generation and query handling.

Source errors are recoverable: the failing source is logged and dropped from
the fan-out. Generation errors become a placeholder answer. Neither reaches
the caller of process_prompt.
"""

from __future__ import annotations


class SourceUnavailableError(Exception):
    """A document or table could not be read or parsed."""

    def __init__(self, source_id: str, reason: str) -> None:
        self.source_id = source_id
        self.reason = reason
        super().__init__(f"Source '{source_id}' unavailable: {reason}")


class SourceNotFoundError(SourceUnavailableError):
    """The referenced file or table does not exist."""

    def __init__(self, source_id: str) -> None:
        super().__init__(source_id, "not found")


class UnsupportedFormatError(SourceUnavailableError, ValueError):
    """No extractor is registered for the file extension."""

    def __init__(self, extension: str, source_id: str | None = None) -> None:
        self.extension = extension
        super().__init__(source_id or extension, f"unsupported format {extension!r}")


class SourceReadError(SourceUnavailableError):
    """The source exists but reading or parsing it failed."""


class NoRelevantSources(Exception):
    """Discovery produced no usable source. Informational only."""


class GenerativeModelFailure(Exception):
    """The generative model could not produce an answer."""


class LLMTimeoutError(GenerativeModelFailure):
    """The generative call exceeded its deadline."""


class LLMUnreachableError(GenerativeModelFailure):
    """The model endpoint refused or dropped the connection."""


class LLMMalformedResponseError(GenerativeModelFailure):
    """The model answered without the expected text field."""


class InvalidQuery(ValueError):
    """The query is empty or blank after stripping."""
