# src/logging/context.py - v1
"""Contextual logging support: attach query_id and pipeline stage to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per query execution.
_query_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "query_id", default=None
)
_stage: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "stage", default=None
)
_source_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "source_id", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    query_id: str | None = None
    stage: str | None = None
    source_id: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        query_id=_query_id.get(),
        stage=_stage.get(),
        source_id=_source_id.get(),
    )


def set_query_context(query_id: str) -> None:
    """Set query-level context (called once per incoming query)."""
    _query_id.set(query_id)
    _stage.set(None)


def set_stage_context(stage: str | None) -> None:
    """Set the orchestrator stage currently executing."""
    _stage.set(stage)


def set_source_context(source_id: str | None) -> None:
    """Set the source being extracted or ranked (per fan-out task)."""
    _source_id.set(source_id)


def clear_context() -> None:
    """Reset all context variables."""
    _query_id.set(None)
    _stage.set(None)
    _source_id.set(None)
