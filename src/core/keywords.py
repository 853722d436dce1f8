# src/core/keywords.py - v1
"""Keyword extraction: lowercase tokenization, stop-word and length filtering.

Tokens are maximal runs of ASCII letters, digits and Hangul syllables.
Hangul-bearing tokens are always kept; other tokens need at least three
characters and must not be English stop-words. No stemming is applied.
"""

from __future__ import annotations

import re

_TOKEN_SPLIT = re.compile(r"[^a-z0-9가-힣]+")
_HANGUL = re.compile(r"[가-힣]")

STOP_WORDS: frozenset[str] = frozenset({
    "the", "a", "an", "and", "or", "but", "is", "are", "was", "were",
    "in", "on", "at", "to", "for", "with", "by", "about", "like", "through",
    "over", "before", "after", "between", "under", "during", "of", "from",
    "up", "down", "into", "out", "as", "if", "when", "why", "how", "all",
    "any", "both", "each", "few", "more", "most", "other", "some", "such",
    "no", "nor", "not", "only", "own", "same", "so", "than", "too", "very",
    "can", "will", "just", "should", "now",
})

MIN_TOKEN_LENGTH = 3


def contains_hangul(token: str) -> bool:
    """True if the token holds at least one Hangul syllable."""
    return _HANGUL.search(token) is not None


def tokenize(text: str | None) -> list[str]:
    """Lowercase and split on non-alphanumeric, non-Hangul characters."""
    if not text:
        return []
    return [t for t in _TOKEN_SPLIT.split(text.lower()) if t]


def is_significant(token: str) -> bool:
    """Filter shared by keyword extraction and prompt normalization."""
    if contains_hangul(token):
        return True
    return len(token) >= MIN_TOKEN_LENGTH and token not in STOP_WORDS


def extract_keywords(text: str | None) -> list[str]:
    """Return distinct significant tokens in first-seen order."""
    seen: dict[str, None] = {}
    for token in tokenize(text):
        if is_significant(token):
            seen.setdefault(token, None)
    return list(seen)
