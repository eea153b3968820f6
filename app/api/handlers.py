"""
API handlers: read request data (e.g. UploadFile), call services, register the result.

Responsibility: Bridge HTTP types and services for the carousel uploads. A file
written to disk is removed again if registering it in the store fails.
"""

import logging
from pathlib import Path

from fastapi import UploadFile

from app.core.db import CarouselImage, CarouselStore
from app.core.errors import AppError, UpstreamError, ValidationError
from app.services.upload_service import (
    decode_base64_image,
    generate_unique_filename,
    is_allowed_image,
    public_url,
    remove_file,
    save_image_bytes,
)

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled"


def _store_and_register(
    store: CarouselStore,
    upload_dir: Path,
    filename: str,
    content: bytes,
    title: str | None,
    alt: str | None,
    order: int | None,
) -> CarouselImage:
    try:
        path = save_image_bytes(upload_dir, filename, content)
    except OSError as e:
        logger.exception("[handlers] failed to write %s", filename)
        raise UpstreamError() from e
    try:
        return store.create(
            title=title or DEFAULT_TITLE,
            image_url=public_url(path.name),
            alt=alt or "",
            order=order or 0,
        )
    except AppError:
        remove_file(path)
        raise


def handle_upload(
    image: UploadFile | None,
    title: str | None,
    alt: str | None,
    order: int | None,
    store: CarouselStore,
    upload_dir: Path,
) -> CarouselImage:
    """Validate a multipart image, persist it under a unique name, register its URL."""
    if image is None or not image.filename:
        raise ValidationError("Chưa chọn tệp hình ảnh")
    if not is_allowed_image(image.content_type):
        raise ValidationError("Chỉ chấp nhận tệp hình ảnh (jpeg, png, gif, webp)")
    content = image.file.read()
    filename = generate_unique_filename(Path(image.filename).suffix)
    logger.info("[handlers:handle_upload] IN  original=%s stored_as=%s", image.filename, filename)
    return _store_and_register(store, upload_dir, filename, content, title, alt, order)


def handle_base64_upload(
    image_data: str | None,
    title: str | None,
    alt: str | None,
    order: int | None,
    store: CarouselStore,
    upload_dir: Path,
) -> CarouselImage:
    """Decode a base64 image, persist it as PNG under a unique name, register its URL."""
    if not image_data or not image_data.strip():
        raise ValidationError("Chưa có dữ liệu hình ảnh")
    content = decode_base64_image(image_data)
    filename = generate_unique_filename(".png", prefix="base64-")
    logger.info("[handlers:handle_base64_upload] IN  bytes=%d stored_as=%s", len(content), filename)
    return _store_and_register(store, upload_dir, filename, content, title, alt, order)
