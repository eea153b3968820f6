"""
API route aggregator: register endpoints; no logic — only delegate to stores, services, handlers.
"""

import logging
from pathlib import Path

from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.agent.llm import Generator
from app.api.deps import get_carousel_store, get_document_store, get_generator, get_upload_dir
from app.api.handlers import DEFAULT_TITLE, handle_base64_upload, handle_upload
from app.core.db import CarouselStore, DocumentStore
from app.core.errors import ValidationError
from app.schemas.carousel import (
    Base64UploadRequest,
    CarouselCreateRequest,
    CarouselImageOut,
    UploadResponse,
)
from app.schemas.data import DataCreateRequest, DocumentOut, MessageResponse
from app.schemas.query import AskRequest, AskResponse
from app.services.agent_service import AnswerService
from app.services.upload_service import remove_local_file

logger = logging.getLogger(__name__)
router = APIRouter()

DELETED_MESSAGE = "Deleted successfully"


# --- System ---

@router.get("/", tags=["system"])
def root():
    return {"status": "Municipal info backend running"}


@router.get("/health", tags=["system"])
def health():
    return {"ok": True}


# --- Chat data ---

@router.get(
    "/api/data",
    response_model=list[DocumentOut],
    tags=["data"],
    summary="List chat data, newest first",
)
def list_data(store: DocumentStore = Depends(get_document_store)) -> list[DocumentOut]:
    return [DocumentOut.from_document(d) for d in store.list_all()]


@router.post(
    "/api/data",
    response_model=DocumentOut,
    tags=["data"],
    summary="Add a text or Word-derived entry",
    description="400 when title or content is missing. htmlContent is dropped for text entries.",
)
def create_data(
    body: DataCreateRequest,
    store: DocumentStore = Depends(get_document_store),
) -> DocumentOut:
    title = (body.title or "").strip()
    content = (body.content or "").strip()
    if not title or not content:
        raise ValidationError("Vui lòng nhập tiêu đề và nội dung")
    doc = store.create(
        title=body.title,
        content=body.content,
        file_type=body.file_type,
        html_content=body.html_content,
        image_count=body.image_count,
    )
    return DocumentOut.from_document(doc)


@router.delete(
    "/api/data/{doc_id}",
    response_model=MessageResponse,
    tags=["data"],
    summary="Delete an entry (succeeds for unknown ids too)",
)
def delete_data(doc_id: str, store: DocumentStore = Depends(get_document_store)) -> MessageResponse:
    store.delete(doc_id)
    return MessageResponse(message=DELETED_MESSAGE)


# --- Question answering ---

@router.post(
    "/api/ask",
    response_model=AskResponse,
    tags=["ask"],
    summary="Answer a question from stored chat data",
    description="400 on empty question; 500 when no AI provider is configured or generation fails.",
)
def ask(
    body: AskRequest,
    store: DocumentStore = Depends(get_document_store),
    generate: Generator | None = Depends(get_generator),
) -> AskResponse:
    result = AnswerService(store, generate).ask(body.question)
    return AskResponse(
        answer=result.answer,
        references=[DocumentOut.from_document(d) for d in result.references],
    )


# --- Carousel ---

@router.get(
    "/api/carousel",
    response_model=list[CarouselImageOut],
    tags=["carousel"],
    summary="List carousel images by order",
)
def list_carousel(store: CarouselStore = Depends(get_carousel_store)) -> list[CarouselImageOut]:
    return [CarouselImageOut.from_image(i) for i in store.list_ordered()]


@router.post(
    "/api/carousel",
    response_model=CarouselImageOut,
    tags=["carousel"],
    summary="Register an image by URL",
)
def create_carousel(
    body: CarouselCreateRequest,
    store: CarouselStore = Depends(get_carousel_store),
) -> CarouselImageOut:
    image_url = (body.image_url or "").strip()
    if not image_url:
        raise ValidationError("Vui lòng nhập đường dẫn hình ảnh")
    image = store.create(
        title=body.title or DEFAULT_TITLE,
        image_url=image_url,
        alt=body.alt or "",
        order=body.order or 0,
    )
    return CarouselImageOut.from_image(image)


@router.post(
    "/api/carousel/upload",
    response_model=UploadResponse,
    tags=["carousel"],
    summary="Upload an image file (multipart field 'image')",
    description="Accepts jpeg, png, gif, webp. The file is stored under a generated unique name.",
)
def upload_carousel(
    image: UploadFile | None = File(None, description="Image file (jpeg, png, gif, webp)."),
    title: str | None = Form(None),
    alt: str | None = Form(None),
    order: int | None = Form(None),
    store: CarouselStore = Depends(get_carousel_store),
    upload_dir: Path = Depends(get_upload_dir),
) -> UploadResponse:
    created = handle_upload(image, title, alt, order, store, upload_dir)
    return UploadResponse(data=CarouselImageOut.from_image(created))


@router.post(
    "/api/carousel/upload-base64",
    response_model=UploadResponse,
    tags=["carousel"],
    summary="Upload an image as base64 (stored as .png)",
)
def upload_carousel_base64(
    body: Base64UploadRequest,
    store: CarouselStore = Depends(get_carousel_store),
    upload_dir: Path = Depends(get_upload_dir),
) -> UploadResponse:
    created = handle_base64_upload(body.image_data, body.title, body.alt, body.order, store, upload_dir)
    return UploadResponse(data=CarouselImageOut.from_image(created))


@router.delete(
    "/api/carousel/{image_id}",
    response_model=MessageResponse,
    tags=["carousel"],
    summary="Delete a carousel image and its uploaded file",
)
def delete_carousel(
    image_id: str,
    store: CarouselStore = Depends(get_carousel_store),
    upload_dir: Path = Depends(get_upload_dir),
) -> MessageResponse:
    removed = store.delete(image_id)
    if removed is not None:
        remove_local_file(upload_dir, removed.image_url)
    return MessageResponse(message=DELETED_MESSAGE)
