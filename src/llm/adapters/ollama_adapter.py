# src/llm/adapters/ollama_adapter.py - v1
"""Ollama local LLM adapter implementing BaseLLMClient.

Uses the ollama Python SDK generate endpoint (non-streaming). Transport and
format failures are normalized into GenerativeModelFailure subclasses.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

from ragcache.core.errors import (
    GenerativeModelFailure,
    LLMMalformedResponseError,
    LLMTimeoutError,
    LLMUnreachableError,
)
from ragcache.llm.base_client import BaseLLMClient
from ragcache.llm.models import LLMResponse

_TEXT_KEYS = ("response", "text")


class OllamaAdapter(BaseLLMClient):
    """Ollama local inference adapter."""

    def __init__(
        self,
        model: str = "llama3",
        host: str = "http://localhost:11434",
        timeout_s: float = 300.0,
        **kwargs: Any,
    ):
        self._model = model
        self._host = host
        self._timeout_s = timeout_s

    async def complete(
        self,
        prompt: str,
        system: str | None = None,
        max_tokens: int = 2000,
        temperature: float = 0.7,
    ) -> LLMResponse:
        import ollama

        client = ollama.AsyncClient(host=self._host)
        kwargs: dict[str, Any] = {
            "model": self._model,
            "prompt": prompt,
            "stream": False,
            "options": {"num_predict": max_tokens, "temperature": temperature},
        }
        if system:
            kwargs["system"] = system

        t0 = time.monotonic()
        try:
            resp = await asyncio.wait_for(client.generate(**kwargs), timeout=self._timeout_s)
        except asyncio.TimeoutError as e:
            raise LLMTimeoutError(
                f"Ollama did not answer within {self._timeout_s:.0f}s"
            ) from e
        except ollama.ResponseError as e:
            raise GenerativeModelFailure(f"Ollama error {e.status_code}: {e.error}") from e
        except (ConnectionError, OSError) as e:
            raise LLMUnreachableError(f"Ollama unreachable at {self._host}: {e}") from e
        latency = int((time.monotonic() - t0) * 1000)

        return LLMResponse(
            content=_response_text(resp),
            model=self._model,
            provider="ollama",
            prompt_tokens=_field(resp, "prompt_eval_count") or 0,
            completion_tokens=_field(resp, "eval_count") or 0,
            done_reason=_field(resp, "done_reason"),
            latency_ms=latency,
            raw_response=resp,
        )

    @property
    def provider_name(self) -> str:
        return "ollama"

    @property
    def model(self) -> str:
        return self._model


def _field(resp: Any, key: str) -> Any:
    try:
        return resp[key]
    except (KeyError, TypeError):
        return None


def _response_text(resp: Any) -> str:
    for key in _TEXT_KEYS:
        value = _field(resp, key)
        if isinstance(value, str):
            return value
    raise LLMMalformedResponseError("Unexpected response format")
