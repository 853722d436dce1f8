# src/core/fuzzy.py - v1
"""Near-miss word matching by Levenshtein distance of at most one."""

from __future__ import annotations

MIN_KEYWORD_LENGTH = 4
MAX_DISTANCE = 1


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance with a single rolling DP row."""
    if len(a) < len(b):
        a, b = b, a
    row = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        prev_diag, row[0] = row[0], i
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            prev_diag, row[j] = row[j], min(
                row[j] + 1,        # deletion
                row[j - 1] + 1,    # insertion
                prev_diag + cost,  # substitution
            )
    return row[-1]


def find_fuzzy_matches(content: str, keyword: str) -> list[str]:
    """Distinct words of content within distance 1 of keyword, exact matches excluded.

    Words are whitespace-delimited pieces of the lowercased content, so
    punctuation stays attached. Keywords shorter than four characters never
    match.
    """
    keyword = keyword.lower()
    if len(keyword) < MIN_KEYWORD_LENGTH:
        return []
    matches: dict[str, None] = {}
    for word in content.lower().split():
        if word == keyword or word in matches:
            continue
        if abs(len(word) - len(keyword)) > MAX_DISTANCE:
            continue
        if edit_distance(word, keyword) <= MAX_DISTANCE:
            matches[word] = None
    return list(matches)
