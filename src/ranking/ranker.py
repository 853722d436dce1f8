# src/ranking/ranker.py - v1
"""Lexical relevance scoring of documents and tables against a query.

Score components, accumulated per source:
  - name match: +0.3 when any keyword is a substring of the lowercase name
  - keyword frequency: min(0.2, 0.05 * occurrences) per keyword
  - fuzzy frequency: min(0.1, 0.02 * near-miss words) per keyword
  - exact query: +0.5 when the whole lowercase query appears in the content
  - phrases: +0.3 per consecutive three-word window of the query found verbatim

Sources scoring at or below the floor are discarded; the rest are returned
in descending score order (stable for ties), truncated to top_k.
"""

from __future__ import annotations

import logging
from typing import Iterable

from ragcache.core.fuzzy import find_fuzzy_matches
from ragcache.core.keywords import extract_keywords
from ragcache.core.models import RelevanceScore, Source

logger = logging.getLogger(__name__)

NAME_MATCH_BONUS = 0.3
KEYWORD_WEIGHT = 0.05
KEYWORD_CAP = 0.2
FUZZY_WEIGHT = 0.02
FUZZY_CAP = 0.1
EXACT_QUERY_BONUS = 0.5
PHRASE_BONUS = 0.3
PHRASE_WORDS = 3

DEFAULT_TOP_K = 5
DEFAULT_MIN_SCORE = 0.1


def count_occurrences(text: str, needle: str) -> int:
    """Non-overlapping substring occurrences of needle in text."""
    if not needle:
        return 0
    return text.count(needle)


def query_phrases(raw_query: str) -> list[str]:
    """Consecutive three-word windows of the lowercased query."""
    words = raw_query.lower().split()
    if len(words) < PHRASE_WORDS:
        return []
    return [
        " ".join(words[i:i + PHRASE_WORDS])
        for i in range(len(words) - PHRASE_WORDS + 1)
    ]


def score_content(
    raw_query: str,
    name: str,
    content: str,
    keywords: list[str] | None = None,
) -> RelevanceScore:
    """Score one named piece of content against the query.

    Args:
        raw_query: Query text as typed.
        name: Source identity (filename or table name).
        content: Extracted text of the source.
        keywords: Precomputed keywords of raw_query, extracted when None.

    Returns:
        RelevanceScore whose matched_fragment is the strongest evidence found.
    """
    if keywords is None:
        keywords = extract_keywords(raw_query)

    lowered_name = name.lower()
    lowered = content.lower()
    lowered_query = raw_query.lower().strip()
    score = 0.0
    fragment: str | None = None

    if any(kw in lowered_name for kw in keywords):
        score += NAME_MATCH_BONUS

    for kw in keywords:
        occurrences = count_occurrences(lowered, kw)
        if occurrences:
            score += min(KEYWORD_CAP, KEYWORD_WEIGHT * occurrences)
            fragment = fragment or kw
        fuzzy = find_fuzzy_matches(lowered, kw)
        if fuzzy:
            score += min(FUZZY_CAP, FUZZY_WEIGHT * len(fuzzy))

    for phrase in query_phrases(raw_query):
        if phrase in lowered:
            score += PHRASE_BONUS
            fragment = phrase

    if lowered_query and lowered_query in lowered:
        score += EXACT_QUERY_BONUS
        fragment = lowered_query

    return RelevanceScore(source_id=name, score=score, matched_fragment=fragment)


def rank_sources(
    raw_query: str,
    sources: Iterable[Source],
    top_k: int = DEFAULT_TOP_K,
    min_score: float = DEFAULT_MIN_SCORE,
) -> list[RelevanceScore]:
    """Rank sources by relevance, keeping those above min_score.

    Returns an empty list when the query yields no keywords.
    """
    keywords = extract_keywords(raw_query)
    if not keywords:
        logger.warning("No meaningful keywords in query, nothing to rank")
        return []

    scored: list[RelevanceScore] = []
    for source in sources:
        result = score_content(raw_query, source.id, source.text, keywords)
        if result.score > min_score:
            scored.append(result)
        else:
            logger.debug("Dropped %s (score %.3f)", source.id, result.score)

    scored.sort(key=lambda r: r.score, reverse=True)
    return scored[:top_k]
