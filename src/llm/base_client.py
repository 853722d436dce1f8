# src/llm/base_client.py - v1
"""Abstract LLM client interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ragcache.llm.models import LLMResponse


class BaseLLMClient(ABC):
    """Unified interface for generative model providers.

    Implementations raise GenerativeModelFailure subclasses from
    ragcache.core.errors: LLMTimeoutError, LLMUnreachableError or
    LLMMalformedResponseError.
    """

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        system: str | None = None,
        max_tokens: int = 2000,
        temperature: float = 0.7,
    ) -> LLMResponse:
        """Single-shot text completion."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (e.g. ollama)."""

    @property
    @abstractmethod
    def model(self) -> str:
        """Model name sent to the provider."""
