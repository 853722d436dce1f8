# tests/unit/llm/test_unit_retry.py - v1
"""Tests for llm/retry.py - classification and backoff loop."""

from __future__ import annotations

import pytest

from ragcache.core.errors import (
    GenerativeModelFailure,
    LLMMalformedResponseError,
    LLMTimeoutError,
    LLMUnreachableError,
)
from ragcache.llm.retry import (
    LLMRetryExhausted,
    RetryConfig,
    classify_error,
    root_cause,
    with_retry,
)

FAST = {
    "connection": RetryConfig(max_retries=2, base_delay_s=0.0, jitter=False),
    "server_error": RetryConfig(max_retries=1, base_delay_s=0.0, jitter=False),
}


class TestClassifyError:
    @pytest.mark.parametrize(
        "error,expected",
        [
            (LLMTimeoutError("no answer"), "timeout"),
            (LLMUnreachableError("down"), "connection"),
            (ConnectionError("Connection refused"), "connection"),
            (GenerativeModelFailure("HTTP 429 rate limit"), "rate_limit"),
            (GenerativeModelFailure("Ollama error 503: busy"), "server_error"),
            (LLMMalformedResponseError("Unexpected response format"), "malformed"),
            (ValueError("odd"), "unknown"),
        ],
    )
    def test_classification(self, error, expected):
        assert classify_error(error) == expected


class TestWithRetry:
    @pytest.mark.asyncio
    async def test_success_first_try(self):
        async def ok(x):
            return x * 2

        assert await with_retry(ok, 21, retry_configs=FAST) == 42

    @pytest.mark.asyncio
    async def test_transient_then_success(self):
        attempts = []

        async def flaky():
            attempts.append(1)
            if len(attempts) < 3:
                raise LLMUnreachableError("down")
            return "ok"

        assert await with_retry(flaky, retry_configs=FAST) == "ok"
        assert len(attempts) == 3

    @pytest.mark.asyncio
    async def test_exhausted(self):
        async def down():
            raise GenerativeModelFailure("Ollama error 500: crash")

        with pytest.raises(LLMRetryExhausted) as exc_info:
            await with_retry(down, operation="answer", retry_configs=FAST)
        err = exc_info.value
        assert err.attempts == 2
        assert err.error_type == "server_error"
        assert err.operation == "answer"
        assert isinstance(root_cause(err), GenerativeModelFailure)

    @pytest.mark.asyncio
    async def test_timeout_not_retried(self):
        attempts = []

        async def slow():
            attempts.append(1)
            raise LLMTimeoutError("no answer")

        with pytest.raises(LLMRetryExhausted) as exc_info:
            await with_retry(slow, retry_configs=FAST)
        assert len(attempts) == 1
        assert isinstance(root_cause(exc_info.value), LLMTimeoutError)

    @pytest.mark.asyncio
    async def test_empty_configs_disable_retries(self):
        attempts = []

        async def down():
            attempts.append(1)
            raise LLMUnreachableError("down")

        with pytest.raises(LLMRetryExhausted):
            await with_retry(down, retry_configs={})
        assert len(attempts) == 1

    def test_root_cause_passthrough(self):
        err = ValueError("x")
        assert root_cause(err) is err
