# tests/unit/core/test_unit_fuzzy.py - v1
"""Tests for core/fuzzy.py - edit distance and near-miss word matching."""

from __future__ import annotations

from ragcache.core.fuzzy import edit_distance, find_fuzzy_matches


class TestEditDistance:
    def test_identical(self):
        assert edit_distance("abc", "abc") == 0

    def test_classic_example(self):
        assert edit_distance("kitten", "sitting") == 3

    def test_empty(self):
        assert edit_distance("", "abc") == 3
        assert edit_distance("abc", "") == 3

    def test_symmetric(self):
        assert edit_distance("flaw", "lawn") == edit_distance("lawn", "flaw") == 2


class TestFindFuzzyMatches:
    def test_single_substitution_matches(self):
        assert find_fuzzy_matches("the documant was filed", "document") == ["documant"]

    def test_two_substitutions_do_not_match(self):
        assert find_fuzzy_matches("the docxmant was filed", "document") == []

    def test_insertion_matches(self):
        assert find_fuzzy_matches("several documents here", "document") == ["documents"]

    def test_exact_match_excluded(self):
        assert find_fuzzy_matches("document document", "document") == []

    def test_short_keyword_never_matches(self):
        assert find_fuzzy_matches("dog dot cog", "doc") == []

    def test_length_gap_skipped(self):
        assert find_fuzzy_matches("documentation", "document") == []

    def test_distinct_words_only(self):
        assert find_fuzzy_matches("Documant documant DOCUMANT", "document") == ["documant"]

    def test_punctuation_stays_attached(self):
        # "documant." is two edits away from "document"
        assert find_fuzzy_matches("a documant.", "document") == []
