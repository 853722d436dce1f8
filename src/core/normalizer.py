# src/core/normalizer.py - v1
"""Prompt normalization into order-, case- and stop-word-insensitive cache keys."""

from __future__ import annotations

import logging

from ragcache.core.keywords import is_significant, tokenize

logger = logging.getLogger(__name__)


def normalize_prompt(prompt: str | None) -> str:
    """Canonical cache key: significant tokens sorted and space-joined.

    Empty, blank or fully filtered prompts map to "". The function is
    idempotent: normalize_prompt(normalize_prompt(p)) == normalize_prompt(p).
    """
    if prompt is None or not prompt.strip():
        return ""
    tokens = sorted(t for t in tokenize(prompt) if is_significant(t))
    key = " ".join(tokens)
    logger.debug("Normalized prompt to key %r", key)
    return key
