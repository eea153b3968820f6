"""Schemas for the ask endpoint."""

from pydantic import BaseModel, Field

from app.schemas.data import DocumentOut


class AskRequest(BaseModel):
    """Request body for POST /api/ask. Emptiness is checked after trimming (400, not 422)."""

    question: str | None = Field(None, description="User question.")


class AskResponse(BaseModel):
    """Response for POST /api/ask."""

    answer: str = Field(..., description="Generated answer, or a fixed not-found message.")
    references: list[DocumentOut] = Field(default_factory=list, description="Documents used as context.")
