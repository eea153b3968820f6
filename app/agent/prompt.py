# Prompt template for question answering over stored chat data.
# Vietnamese throughout: the site and its users are Vietnamese.

from app.core.db import Document

PERSONA = "Bạn là trợ lý AI hỗ trợ bầu cử Phường Hoài Nhơn Bắc."
RULES = (
    "Luôn trả lời bằng tiếng Việt, chỉ sử dụng thông tin trong dữ liệu được cung cấp.",
    "Nếu dữ liệu không đủ, hãy nói rõ và gợi ý người dùng kiểm tra lại sau.",
)
DATA_HEADER = "Dữ liệu:"
NO_DATA = "Không có dữ liệu"
ANSWER_CUE = "Câu trả lời chi tiết cho câu hỏi sau:"


def render_document(index: int, doc: Document) -> str:
    """One numbered context block. index is 1-based."""
    lines = [
        f"Mục {index}: {doc.title}",
        f"Ngày lưu: {doc.date}",
        f"Nội dung: {doc.content}",
    ]
    if doc.file_type == "word" and doc.image_count > 0:
        lines.append(f"(Tài liệu Word có {doc.image_count} hình ảnh minh họa)")
    return "\n".join(lines)


def build_context(documents: list[Document]) -> str:
    if not documents:
        return NO_DATA
    return "\n\n".join(render_document(i, doc) for i, doc in enumerate(documents, start=1))


def build_prompt(question: str, documents: list[Document]) -> str:
    """
    Assemble the full prompt: persona and rules, numbered data blocks, the
    detailed-answer cue, then the question itself as the last line.
    Deterministic for identical inputs.
    """
    sections = [
        PERSONA,
        *RULES,
        DATA_HEADER,
        build_context(documents),
        ANSWER_CUE,
        f"Câu hỏi: {question}",
    ]
    return "\n\n".join(sections)
