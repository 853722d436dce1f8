# src/pipeline/prompt_builder.py - v1
"""Grounded prompt assembly for the generative fallback."""

from __future__ import annotations

import logging

from ragcache.core.models import DocumentContent, Source, TableContent

logger = logging.getLogger(__name__)

NO_INFORMATION_ANSWER = (
    "I don't have enough information in the referenced materials to answer this question."
)

_PREAMBLE = (
    "You are an AI assistant that provides helpful and accurate information. "
    "Use the following context to answer the user's question:\n\n"
)

_INSTRUCTIONS = (
    "IMPORTANT INSTRUCTIONS:\n"
    "1. Answer the user's question based ONLY on the provided context above.\n"
    "2. If the information needed to answer the question is not in the context, "
    f"explicitly state: \"{NO_INFORMATION_ANSWER}\"\n"
    "3. Do not make up or infer information that is not explicitly stated in the context.\n"
    "4. If you're unsure about any part of your answer, indicate your uncertainty.\n"
    "5. Always cite the specific document or database source for your information.\n"
)


def _document_block(source: Source) -> str:
    content = source.content
    doc_type = content.document_type if isinstance(content, DocumentContent) else "unknown"
    return f"Document: {source.id}\nType: {doc_type}\nContent:\n{source.text}\n\n"


def _table_block(source: Source) -> str:
    content = source.content
    if not isinstance(content, TableContent):
        return ""
    if content.error:
        data = f"error: {content.error}"
    else:
        rows = "\n".join(content.row_texts())
        data = f"{content.row_count} rows\n{rows}"
    return f"Table: {source.id}\nDescription: {content.description}\nData: {data}\n\n"


def build_system_prompt(documents: list[Source], tables: list[Source]) -> str:
    """Context sections followed by the grounding instructions."""
    parts = [_PREAMBLE]
    if documents:
        parts.append("DOCUMENT CONTEXT:\n")
        parts.extend(_document_block(doc) for doc in documents)
    if tables:
        parts.append("DATABASE CONTEXT:\n")
        parts.extend(_table_block(table) for table in tables)
    parts.append(_INSTRUCTIONS)
    prompt = "".join(parts)
    logger.debug(
        "System prompt: %d documents, %d tables, %d chars",
        len(documents), len(tables), len(prompt),
    )
    return prompt


def build_full_prompt(system_prompt: str, user_prompt: str) -> str:
    return f"{system_prompt}\n\nUser: {user_prompt}"
