"""Schemas for the carousel endpoints."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.core.db import CarouselImage


class CarouselCreateRequest(BaseModel):
    """Request body for POST /api/carousel. Missing title/alt/order fall back to defaults."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str | None = None
    image_url: str | None = None
    alt: str | None = None
    order: int | None = None


class Base64UploadRequest(BaseModel):
    """Request body for POST /api/carousel/upload-base64."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str | None = None
    image_data: str | None = Field(None, description="Base64 image, optionally as a data: URL.")
    alt: str | None = None
    order: int | None = None


class CarouselImageOut(BaseModel):
    """A carousel image as exposed by the API."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    image_url: str
    alt: str = ""
    order: int = 0
    created_at: str = ""

    @classmethod
    def from_image(cls, image: CarouselImage) -> "CarouselImageOut":
        return cls(
            id=image.id,
            title=image.title,
            image_url=image.image_url,
            alt=image.alt,
            order=image.order,
            created_at=image.created_at,
        )


class UploadResponse(BaseModel):
    """Response after an image has been stored and registered."""

    success: bool = True
    message: str = "Image uploaded successfully"
    data: CarouselImageOut

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "success": True,
                    "message": "Image uploaded successfully",
                    "data": {
                        "id": "3f2b9c0e5d7a4e1f8a6b2c4d9e0f1a2b",
                        "title": "Ngày bầu cử",
                        "imageUrl": "/uploads/1760700000000-123456789.png",
                        "alt": "",
                        "order": 0,
                        "createdAt": "2026-10-17T07:00:00.000000Z",
                    },
                }
            ]
        }
    }
