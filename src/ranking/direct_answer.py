# src/ranking/direct_answer.py - v1
"""Answer a query verbatim from source content when one passage clearly matches.

Documents are split into blank-line-delimited paragraphs (short ones are
skipped); tables contribute one unit per row. The best-scoring unit across
all candidates wins when it reaches the confidence threshold, and is quoted
with its source attribution.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable

from ragcache.core.keywords import extract_keywords
from ragcache.core.models import DocumentContent, Source, TableContent

logger = logging.getLogger(__name__)

_PARAGRAPH_SPLIT = re.compile(r"\n\s*\n")
_COPULAS = (" is", " are", " means", " refers to")

FULL_QUERY_BONUS = 0.6
KEYWORD_SHARE_WEIGHT = 0.3
DEFINITION_BONUS = 0.2

DEFAULT_THRESHOLD = 0.7
DEFAULT_MIN_PARAGRAPH_CHARS = 50


@dataclass
class AnswerUnit:
    """A paragraph or row eligible for quoting."""

    source: Source
    text: str
    row_number: int | None = None


@dataclass
class DirectAnswer:
    """Best unit found and its rendered answer."""

    source_id: str
    unit: str
    score: float
    answer: str


def split_units(source: Source, min_paragraph_chars: int = DEFAULT_MIN_PARAGRAPH_CHARS) -> list[AnswerUnit]:
    """Split a source into candidate units."""
    content = source.content
    if isinstance(content, TableContent):
        return [
            AnswerUnit(source=source, text=row, row_number=i)
            for i, row in enumerate(content.row_texts(), start=1)
        ]
    return [
        AnswerUnit(source=source, text=paragraph)
        for paragraph in _PARAGRAPH_SPLIT.split(content.content or "")
        if len(paragraph.strip()) >= min_paragraph_chars
    ]


def score_unit(unit_text: str, lowered_query: str, keywords: list[str]) -> float:
    """Confidence that unit_text answers the query."""
    lowered = unit_text.lower()
    score = 0.0
    if lowered_query and lowered_query in lowered:
        score += FULL_QUERY_BONUS
    if keywords:
        present = sum(1 for kw in keywords if kw in lowered)
        score += KEYWORD_SHARE_WEIGHT * present / len(keywords)
    if any(f"{kw}{cop}" in lowered for kw in keywords for cop in _COPULAS):
        score += DEFINITION_BONUS
    return score


def format_answer(unit: AnswerUnit) -> str:
    """Render the quoted answer with its attribution line."""
    name = unit.source.id
    attribution = f"(Source: {name}"
    if unit.row_number is not None:
        attribution += f", Row: {unit.row_number}"
    elif isinstance(unit.source.content, DocumentContent) and unit.source.locator is not None:
        attribution += f", Page/Slide: {unit.source.locator}"
    attribution += ")"
    return f'Based on the information from "{name}":\n\n{unit.text.strip()}\n\n{attribution}'


def find_direct_answer(
    raw_query: str,
    sources: Iterable[Source],
    threshold: float = DEFAULT_THRESHOLD,
    min_paragraph_chars: int = DEFAULT_MIN_PARAGRAPH_CHARS,
) -> DirectAnswer | None:
    """Return the best quoted answer, or None when no unit reaches threshold."""
    lowered_query = raw_query.lower().strip()
    keywords = extract_keywords(raw_query)

    best: AnswerUnit | None = None
    best_score = 0.0
    for source in sources:
        for unit in split_units(source, min_paragraph_chars):
            unit_score = score_unit(unit.text, lowered_query, keywords)
            if unit_score > best_score:
                best, best_score = unit, unit_score

    if best is None or best_score < threshold:
        logger.info("No direct answer (best score %.3f)", best_score)
        return None

    logger.info("Direct answer from %s (score %.3f)", best.source.id, best_score)
    return DirectAnswer(
        source_id=best.source.id,
        unit=best.text.strip(),
        score=best_score,
        answer=format_answer(best),
    )
