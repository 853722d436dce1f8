# tests/unit/test_unit_main.py - v1
"""Tests for the ragcache CLI (main.py)."""

from __future__ import annotations

import json
import logging
from unittest.mock import AsyncMock, patch

import pytest

from ragcache.core.errors import LLMUnreachableError
from ragcache.logging.logger import ROOT_LOGGER_NAME
from ragcache.main import _build_parser, main
from ragcache.sources.documents import DocumentRepository


@pytest.fixture
def cli_env(monkeypatch, tmp_path, docs_dir, sample_db):
    """Environment pointing the CLI at the sample sources, quiet logging."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DOCUMENTS_PATH", str(docs_dir))
    monkeypatch.setenv("DATABASE_PATH", str(sample_db))
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    monkeypatch.setenv("LOG_FORMAT", "text")
    root = logging.getLogger(ROOT_LOGGER_NAME)
    saved_handlers, saved_level = list(root.handlers), root.level
    yield
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


class TestParser:
    def test_ask_arguments(self):
        args = _build_parser().parse_args(
            ["ask", "What", "is", "NIS2?", "-d", "a.pdf", "-d", "b.md", "-t", "orders", "--json"]
        )
        assert args.prompt == ["What", "is", "NIS2?"]
        assert args.documents == ["a.pdf", "b.md"]
        assert args.tables == ["orders"]
        assert args.json is True
        assert args.simple is False

    def test_no_command(self, cli_env):
        assert main([]) == 1


class TestCommands:
    def test_normalize(self, cli_env, capsys):
        assert main(["normalize", "What", "is", "the", "capital", "of", "France?"]) == 0
        assert capsys.readouterr().out.strip().splitlines()[-1] == "capital france what"

    def test_sources(self, cli_env, capsys):
        assert main(["sources"]) == 0
        out = capsys.readouterr().out
        assert "Documents (2):" in out
        assert "flumox_faq.txt" in out
        assert "Tables (2):" in out
        assert "customers" in out

    def test_schema(self, cli_env, capsys):
        assert main(["sources", "--schema", "customers"]) == 0
        out = capsys.readouterr().out
        assert "id" in out and "PK" in out

    def test_warm(self, cli_env, capsys):
        assert main(["warm"]) == 0
        out = capsys.readouterr().out
        assert "Documents: 2/2" in out
        assert "Tables:    2/2" in out

    def test_invalid_configuration(self, cli_env, monkeypatch, capsys):
        monkeypatch.setenv("RANKING_TOP_K", "0")
        assert main(["normalize", "x"]) == 2
        assert "Invalid configuration" in capsys.readouterr().err


class TestAsk:
    def _patch_service(self, orch):
        return patch("ragcache.api.facade.create_service", AsyncMock(return_value=orch))

    def test_direct_answer_printed(self, cli_env, capsys, make_orchestrator, stub_llm, docs_dir):
        orch = make_orchestrator(stub_llm, documents=DocumentRepository(docs_dir))
        with self._patch_service(orch):
            assert main(["ask", "What is Flumox?"]) == 0
        out = capsys.readouterr().out
        assert 'Based on the information from "flumox_faq.txt"' in out
        assert "Answered via: direct" in out

    def test_json_output(self, cli_env, capsys, make_orchestrator, stub_llm):
        with self._patch_service(make_orchestrator(stub_llm)):
            assert main(["ask", "Describe the rollout", "--json", "--temperature", "0.2"]) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["response"] == "stub answer"
        assert payload["answer_path"] == "generative"
        assert stub_llm.calls[0]["temperature"] == 0.2

    def test_degraded_exit_code(self, cli_env, capsys, make_orchestrator, llm_factory):
        llm = llm_factory(error=LLMUnreachableError("down"))
        with self._patch_service(make_orchestrator(llm)):
            assert main(["ask", "Describe the rollout"]) == 3
        assert "Error generating response: down" in capsys.readouterr().out

    def test_simple(self, cli_env, capsys, make_orchestrator, llm_factory):
        llm = llm_factory(reply="plain answer")
        with self._patch_service(make_orchestrator(llm)):
            assert main(["ask", "--simple", "Say", "hello"]) == 0
        assert capsys.readouterr().out.strip() == "plain answer"
        assert llm.calls[0]["prompt"] == "Say hello"
