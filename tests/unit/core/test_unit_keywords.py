# tests/unit/core/test_unit_keywords.py - v1
"""Tests for core/keywords.py - tokenization and keyword filtering."""

from __future__ import annotations

from ragcache.core.keywords import (
    STOP_WORDS,
    contains_hangul,
    extract_keywords,
    is_significant,
    tokenize,
)


class TestTokenize:
    def test_lowercases_and_splits_on_punctuation(self):
        assert tokenize("Hello, World! It's 2024.") == ["hello", "world", "it", "s", "2024"]

    def test_empty_and_none(self):
        assert tokenize("") == []
        assert tokenize(None) == []

    def test_hangul_runs_kept_together(self):
        assert tokenize("안녕 세계!") == ["안녕", "세계"]

    def test_mixed_script_token(self):
        assert tokenize("IPv6와 rollout") == ["ipv6와", "rollout"]


class TestContainsHangul:
    def test_detects_hangul(self):
        assert contains_hangul("세계")
        assert contains_hangul("abc안")

    def test_latin_only(self):
        assert not contains_hangul("world")


class TestExtractKeywords:
    def test_drops_stop_words_and_short_tokens(self):
        assert extract_keywords("What is the capital of France?") == ["what", "capital", "france"]

    def test_first_seen_order_without_duplicates(self):
        assert extract_keywords("Data data DATA pipeline data") == ["data", "pipeline"]

    def test_hangul_kept_regardless_of_length(self):
        assert extract_keywords("Hello 세계 a 안") == ["hello", "세계", "안"]

    def test_two_char_tokens_dropped(self):
        assert extract_keywords("xy 42 ab") == []

    def test_only_stop_words(self):
        assert extract_keywords("The a to in should") == []

    def test_no_stemming(self):
        assert extract_keywords("documents document") == ["documents", "document"]

    def test_none(self):
        assert extract_keywords(None) == []


class TestStopWords:
    def test_fixed_list_size(self):
        assert len(STOP_WORDS) == 62

    def test_long_stop_word_is_not_significant(self):
        assert "between" in STOP_WORDS
        assert not is_significant("between")

    def test_three_char_token_is_significant(self):
        assert is_significant("fox")
