"""Schemas for the chat data endpoints."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.core.db import Document
from app.services.agent_service import Reference


class DataCreateRequest(BaseModel):
    """Request body for POST /api/data. title/content are checked after trimming by the route."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str | None = Field(None, description="Entry title.")
    content: str | None = Field(None, description="Plain text content; required for Word entries too.")
    file_type: Literal["text", "word"] = Field("text", description="Origin of the entry.")
    html_content: str | None = Field(None, description="Rendered markup of a Word document.")
    # Trusted as sent: not recounted against html_content
    image_count: int = Field(0, ge=0, description="Number of images embedded in the Word document.")


class DocumentOut(BaseModel):
    """A document as exposed by the API (internal createdAt omitted)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    content: str
    file_type: str = "text"
    html_content: str | None = None
    image_count: int = 0
    date: str = ""

    @classmethod
    def from_document(cls, doc: Document | Reference) -> "DocumentOut":
        return cls(
            id=doc.id,
            title=doc.title,
            content=doc.content,
            file_type=doc.file_type,
            html_content=doc.html_content,
            image_count=doc.image_count,
            date=doc.date,
        )


class MessageResponse(BaseModel):
    """Plain acknowledgement, e.g. after a delete."""

    message: str
