"""
FastAPI dependencies: build the stores, the generator, and the upload dir from config.

Tests swap any of these through app.dependency_overrides.
"""

from pathlib import Path

from app.agent.llm import Generator, get_generator as _configured_generator
from app.core.config import DATABASE_PATH, UPLOAD_DIR, resolve_path
from app.core.db import CarouselStore, DocumentStore


def get_document_store() -> DocumentStore:
    return DocumentStore(resolve_path(DATABASE_PATH))


def get_carousel_store() -> CarouselStore:
    return CarouselStore(resolve_path(DATABASE_PATH))


def get_generator() -> Generator | None:
    return _configured_generator()


def get_upload_dir() -> Path:
    return resolve_path(UPLOAD_DIR)
