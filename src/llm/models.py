# src/llm/models.py - v1
"""Normalized generation result returned by every LLM client."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class LLMResponse(BaseModel):
    """One completed generation.

    Token counts are 0 when the provider does not report them. done_reason
    is "length" when generation stopped at the max_tokens cap.
    """

    content: str
    model: str
    provider: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    done_reason: str | None = None
    latency_ms: int = 0
    raw_response: Any = None

    @property
    def truncated(self) -> bool:
        return self.done_reason == "length"
