"""
Retrieval: pick the documents handed to the generator as context.

Responsibility: Literal, case-insensitive keyword match over title/content with
a recency fallback. Read-only; the store is passed in by the caller.
"""

import logging
import re
from typing import Protocol

from app.core.config import CONTEXT_LIMIT
from app.core.db import Document

logger = logging.getLogger(__name__)


class DocumentSource(Protocol):
    """What retrieval needs from a document store."""

    def search(self, pattern: re.Pattern[str], limit: int) -> list[Document]: ...

    def recent(self, limit: int | None) -> list[Document]: ...


def literal_pattern(question: str) -> re.Pattern[str]:
    """Case-insensitive pattern matching question as plain text (metacharacters escaped)."""
    return re.compile(re.escape(question), re.IGNORECASE)


def select_context(question: str, store: DocumentSource, limit: int = CONTEXT_LIMIT) -> list[Document]:
    """
    Return up to `limit` documents for the question.

    Documents whose title or content literally contain the question come first,
    in the store's natural order. When nothing matches, the most recent
    documents are used instead (newest first).
    """
    logger.info("[retrieval:select_context] IN  question=%r limit=%d", question, limit)
    documents = store.search(literal_pattern(question), limit)[:limit]
    if documents:
        logger.info("[retrieval:select_context] OUT literal matches=%d", len(documents))
        return documents
    documents = store.recent(limit)[:limit]
    logger.info("[retrieval:select_context] OUT no match, recent fallback=%d", len(documents))
    return documents
