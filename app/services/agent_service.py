"""
Agent: orchestrate retrieval, prompt assembly, and answer generation.

Responsibility: Validate the question, select context documents, call the
generator once, and shape its output for the API. The document store and the
generator are injected so the flow can run against fakes. No HTTP here.
"""

import logging
from dataclasses import dataclass, field

from app.agent.llm import Generator
from app.agent.prompt import build_prompt
from app.core.config import CONTEXT_LIMIT
from app.core.db import Document
from app.core.errors import AppError, ConfigurationError, UpstreamError, ValidationError
from app.services.retrieval_service import DocumentSource, select_context

logger = logging.getLogger(__name__)

EMPTY_QUESTION_MESSAGE = "Vui lòng nhập câu hỏi"
MISSING_PROVIDER_MESSAGE = "Thiếu cấu hình dịch vụ AI"
NOT_FOUND_ANSWER = "Tôi chưa tìm thấy thông tin phù hợp trong dữ liệu hiện có."


@dataclass
class Reference:
    """A context document as shown to the user (no internal timestamps)."""

    id: str
    title: str
    content: str
    file_type: str
    html_content: str | None
    image_count: int
    date: str

    @classmethod
    def from_document(cls, doc: Document) -> "Reference":
        return cls(
            id=doc.id,
            title=doc.title,
            content=doc.content,
            file_type=doc.file_type,
            html_content=doc.html_content,
            image_count=doc.image_count,
            date=doc.date,
        )


@dataclass
class AnswerResult:
    """Answer text plus the documents it was grounded on."""

    answer: str
    references: list[Reference] = field(default_factory=list)


def shape_response(raw_text: str | None, documents: list[Document]) -> AnswerResult:
    """Never hand back a blank answer; references keep the context order."""
    answer = raw_text if raw_text and raw_text.strip() else NOT_FOUND_ANSWER
    return AnswerResult(answer=answer, references=[Reference.from_document(d) for d in documents])


class AnswerService:
    """Question answering over stored chat data."""

    def __init__(self, store: DocumentSource, generate: Generator | None, limit: int = CONTEXT_LIMIT) -> None:
        self.store = store
        self.generate = generate
        self.limit = limit

    def ask(self, question: str | None) -> AnswerResult:
        """
        Answer a free-text question.

        Raises:
            ConfigurationError: No generation provider is configured.
            ValidationError: The question is empty after trimming.
            UpstreamError: The store or the generation call failed.
        """
        if self.generate is None:
            raise ConfigurationError(MISSING_PROVIDER_MESSAGE)
        question = (question or "").strip()
        if not question:
            raise ValidationError(EMPTY_QUESTION_MESSAGE)

        logger.info("[agent:ask] IN  question=%r", question)
        documents = select_context(question, self.store, self.limit)
        prompt = build_prompt(question, documents)
        try:
            raw = self.generate(prompt)
        except AppError:
            raise
        except Exception as e:
            logger.exception("[agent:ask] generation failed")
            raise UpstreamError() from e
        result = shape_response(raw, documents)
        logger.info(
            "[agent:ask] OUT answer_len=%d references=%d", len(result.answer), len(result.references)
        )
        return result
