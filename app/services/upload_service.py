"""
Image uploads: name, decode, persist, and clean up carousel image files.

Responsibility: Everything that touches the upload directory. Called by the API
layer; no HTTP or FastAPI here.
"""

import base64
import binascii
import logging
import random
import re
import time
from pathlib import Path
from typing import Callable

from app.core.config import ALLOWED_IMAGE_MIMES, UPLOAD_URL_PREFIX
from app.core.errors import ValidationError

logger = logging.getLogger(__name__)

_DATA_URL_PREFIX = re.compile(r"^data:image/\w+;base64,")


def generate_unique_filename(
    original_ext: str,
    prefix: str = "",
    clock: Callable[[], float] = time.time,
    rand: Callable[[], float] = random.random,
) -> str:
    """
    '<prefix><epoch millis>-<random 0..1e9><ext>', e.g. '1760700000000-123456789.png'.
    clock returns seconds, rand returns a float in [0, 1).
    """
    ext = original_ext if not original_ext or original_ext.startswith(".") else f".{original_ext}"
    return f"{prefix}{int(clock() * 1000)}-{round(rand() * 1e9)}{ext.lower()}"


def is_allowed_image(content_type: str | None) -> bool:
    return (content_type or "").lower() in ALLOWED_IMAGE_MIMES


def decode_base64_image(image_data: str) -> bytes:
    """Decode a base64 payload, with or without a data:image/...;base64, prefix."""
    payload = _DATA_URL_PREFIX.sub("", image_data.strip())
    try:
        raw = base64.b64decode(payload)
    except (binascii.Error, ValueError) as e:
        raise ValidationError("Dữ liệu hình ảnh không hợp lệ") from e
    if not raw:
        raise ValidationError("Dữ liệu hình ảnh không hợp lệ")
    return raw


def save_image_bytes(upload_dir: Path, filename: str, content: bytes) -> Path:
    """Write content under upload_dir/filename. Raises OSError on failure."""
    upload_dir.mkdir(parents=True, exist_ok=True)
    dest = upload_dir / Path(filename).name
    dest.write_bytes(content)
    logger.info("[uploads] saved %s (%d bytes)", dest.name, len(content))
    return dest


def public_url(filename: str) -> str:
    return f"{UPLOAD_URL_PREFIX}{filename}"


def remove_file(path: Path) -> bool:
    """Best-effort delete. Failures are logged, never raised."""
    try:
        path.unlink()
    except FileNotFoundError:
        logger.warning("[uploads] file already gone: %s", path)
        return False
    except OSError as e:
        logger.warning("[uploads] failed to remove %s: %s", path, e)
        return False
    logger.info("[uploads] removed %s", path.name)
    return True


def remove_local_file(upload_dir: Path, image_url: str | None) -> bool:
    """Delete the file behind an /uploads/... URL. Other URLs are left alone."""
    if not image_url or not image_url.startswith(UPLOAD_URL_PREFIX):
        return False
    # basename only: the URL must not reach outside upload_dir
    name = Path(image_url[len(UPLOAD_URL_PREFIX):]).name
    if not name:
        return False
    return remove_file(upload_dir / name)
