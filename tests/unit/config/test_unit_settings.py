# tests/unit/config/test_unit_settings.py - v1
"""Tests for config/settings.py - defaults, validation, env loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from ragcache.config.settings import ConfigurationError, Settings, load_settings


class TestDefaults:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("LLM_MODEL", raising=False)
        s = Settings(_env_file=None)
        assert s.llm_provider == "ollama"
        assert s.ranking_top_k == 5
        assert s.ranking_min_score == pytest.approx(0.1)
        assert s.direct_answer_threshold == pytest.approx(0.7)
        assert s.direct_answer_min_paragraph_chars == 50
        assert s.table_row_limit == 100
        assert s.response_cache_backend == "memory"
        assert s.response_single_flight is False
        assert s.request_budget_s == 0.0

    def test_extensions_list(self):
        s = Settings(_env_file=None, document_extensions="PDF, .txt,,md ")
        assert s.document_extensions_list == [".pdf", ".txt", ".md"]


class TestValidation:
    def test_redis_requires_url(self):
        with pytest.raises(ConfigurationError, match="RESPONSE_CACHE_REDIS_URL"):
            Settings(_env_file=None, response_cache_backend="redis")

    def test_negative_threshold(self):
        with pytest.raises(ConfigurationError, match="DIRECT_ANSWER_THRESHOLD"):
            Settings(_env_file=None, direct_answer_threshold=-0.1)

    def test_errors_are_collected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            Settings(_env_file=None, llm_timeout_s=0, request_budget_s=-1)
        assert "LLM_TIMEOUT_S" in str(exc_info.value)
        assert "REQUEST_BUDGET_S" in str(exc_info.value)

    def test_non_positive_row_limit(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, table_row_limit=0)

    def test_negative_cache_bound(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, response_cache_max_entries=-1)

    def test_zero_cache_bound_allowed(self):
        assert Settings(_env_file=None, response_cache_ttl_s=0).response_cache_ttl_s == 0

    def test_unknown_backend_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, response_cache_backend="memcached")


class TestLoading:
    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("LLM_MODEL", "mistral")
        monkeypatch.setenv("RANKING_TOP_K", "3")
        s = Settings(_env_file=None)
        assert s.llm_model == "mistral"
        assert s.ranking_top_k == 3

    def test_env_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("DOCUMENTS_PATH", raising=False)
        env = tmp_path / ".env"
        env.write_text("DOCUMENTS_PATH=/srv/docs\nLOG_FORMAT=text\nUNRELATED=1\n")
        s = Settings(_env_file=env)
        assert s.documents_path == Path("/srv/docs")
        assert s.log_format == "text"

    def test_load_settings_overrides(self):
        s = load_settings(_env_file=None, table_row_limit=10)
        assert s.table_row_limit == 10
