"""
SQLite persistence for chat data documents and carousel images.

Creates the database file on first use (data/app.db relative to project root by
default). Tables: documents, carousel_images. Every call opens a short-lived
connection; sqlite3 errors are logged and surfaced as UpstreamError.
"""

import logging
import re
import sqlite3
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterator
from zoneinfo import ZoneInfo

from app.core.config import DISPLAY_TIMEZONE
from app.core.errors import UpstreamError

logger = logging.getLogger(__name__)

FILE_TYPES: tuple[str, ...] = ("text", "word")

_DOCUMENT_COLUMNS = "id, title, content, file_type, html_content, image_count, date, created_at"
_CAROUSEL_COLUMNS = "id, title, image_url, alt, sort_order, created_at"


@dataclass
class Document:
    """A stored text or Word-derived entry."""

    id: str
    title: str
    content: str
    file_type: str = "text"
    html_content: str | None = None
    image_count: int = 0
    date: str = ""
    created_at: str = ""


@dataclass
class CarouselImage:
    """A carousel slide pointing at a hosted or uploaded image."""

    id: str
    title: str
    image_url: str
    alt: str = ""
    order: int = 0
    created_at: str = ""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_display_date(moment: datetime, tz_name: str = DISPLAY_TIMEZONE) -> str:
    """vi-VN style timestamp, e.g. '14:05:09 17/10/2026'."""
    return moment.astimezone(ZoneInfo(tz_name)).strftime("%H:%M:%S %d/%m/%Y")


def format_instant(moment: datetime) -> str:
    # Fixed width so lexical order == chronological order
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


class _SQLiteStore:
    """Shared connection handling. Subclasses create their own tables."""

    _schema: str = ""

    def __init__(self, db_path: str | Path, clock: Callable[[], datetime] | None = None) -> None:
        self.db_path = Path(db_path)
        self._clock = clock or _utcnow
        self.init_db()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn: sqlite3.Connection | None = None
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.db_path))
            conn.row_factory = sqlite3.Row
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            logger.exception("[db] operation failed on %s", self.db_path)
            raise UpstreamError() from e
        finally:
            if conn is not None:
                conn.close()

    def init_db(self) -> None:
        """Create the table if it does not exist."""
        with self._connect() as conn:
            conn.execute(self._schema)


class DocumentStore(_SQLiteStore):
    """Chat data documents. Natural order is insertion order (rowid)."""

    _schema = """
        CREATE TABLE IF NOT EXISTS documents (
            id TEXT PRIMARY KEY,
            title TEXT NOT NULL,
            content TEXT NOT NULL,
            file_type TEXT NOT NULL DEFAULT 'text' CHECK (file_type IN ('text', 'word')),
            html_content TEXT DEFAULT NULL,
            image_count INTEGER NOT NULL DEFAULT 0,
            date TEXT NOT NULL,
            created_at TEXT NOT NULL
        )
    """

    @staticmethod
    def _row_to_document(row: sqlite3.Row) -> Document:
        return Document(
            id=row["id"],
            title=row["title"],
            content=row["content"],
            file_type=row["file_type"],
            html_content=row["html_content"],
            image_count=row["image_count"],
            date=row["date"],
            created_at=row["created_at"],
        )

    def create(
        self,
        title: str,
        content: str,
        file_type: str = "text",
        html_content: str | None = None,
        image_count: int = 0,
    ) -> Document:
        """Insert a document. Text documents never keep htmlContent."""
        if file_type not in FILE_TYPES:
            raise ValueError(f"unknown file_type {file_type!r}")
        now = self._clock()
        doc = Document(
            id=uuid.uuid4().hex,
            title=title,
            content=content,
            file_type=file_type,
            html_content=html_content if file_type == "word" else None,
            image_count=image_count,
            date=format_display_date(now),
            created_at=format_instant(now),
        )
        with self._connect() as conn:
            conn.execute(
                f"INSERT INTO documents ({_DOCUMENT_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    doc.id,
                    doc.title,
                    doc.content,
                    doc.file_type,
                    doc.html_content,
                    doc.image_count,
                    doc.date,
                    doc.created_at,
                ),
            )
        logger.info("[db:documents] created id=%s file_type=%s", doc.id, doc.file_type)
        return doc

    def list_all(self) -> list[Document]:
        """All documents, newest first."""
        return self.recent(limit=None)

    def recent(self, limit: int | None) -> list[Document]:
        """Most recently created documents, newest first. limit=None returns all."""
        sql = f"SELECT {_DOCUMENT_COLUMNS} FROM documents ORDER BY created_at DESC, rowid DESC"
        params: tuple = ()
        if limit is not None:
            sql += " LIMIT ?"
            params = (limit,)
        with self._connect() as conn:
            rows = conn.execute(sql, params).fetchall()
        return [self._row_to_document(r) for r in rows]

    def search(self, pattern: re.Pattern[str], limit: int) -> list[Document]:
        """Documents whose title or content matches pattern, in natural order."""

        def matches(value: str | None) -> bool:
            return value is not None and pattern.search(value) is not None

        with self._connect() as conn:
            conn.create_function("matches", 1, matches, deterministic=True)
            rows = conn.execute(
                f"SELECT {_DOCUMENT_COLUMNS} FROM documents "
                "WHERE matches(title) OR matches(content) ORDER BY rowid ASC LIMIT ?",
                (limit,),
            ).fetchall()
        return [self._row_to_document(r) for r in rows]

    def delete(self, doc_id: str) -> bool:
        """Delete by id. Returns whether a row existed; callers treat both as success."""
        with self._connect() as conn:
            cur = conn.execute("DELETE FROM documents WHERE id = ?", (doc_id,))
            deleted = cur.rowcount > 0
        logger.info("[db:documents] delete id=%s existed=%s", doc_id, deleted)
        return deleted

    def clear(self) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM documents")
        logger.info("[db:documents] cleared all rows")


class CarouselStore(_SQLiteStore):
    """Carousel images, listed by their sort key."""

    _schema = """
        CREATE TABLE IF NOT EXISTS carousel_images (
            id TEXT PRIMARY KEY,
            title TEXT NOT NULL,
            image_url TEXT NOT NULL,
            alt TEXT NOT NULL DEFAULT '',
            sort_order INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL
        )
    """

    @staticmethod
    def _row_to_image(row: sqlite3.Row) -> CarouselImage:
        return CarouselImage(
            id=row["id"],
            title=row["title"],
            image_url=row["image_url"],
            alt=row["alt"],
            order=row["sort_order"],
            created_at=row["created_at"],
        )

    def create(self, title: str, image_url: str, alt: str = "", order: int = 0) -> CarouselImage:
        image = CarouselImage(
            id=uuid.uuid4().hex,
            title=title,
            image_url=image_url,
            alt=alt,
            order=order,
            created_at=format_instant(self._clock()),
        )
        with self._connect() as conn:
            conn.execute(
                f"INSERT INTO carousel_images ({_CAROUSEL_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)",
                (image.id, image.title, image.image_url, image.alt, image.order, image.created_at),
            )
        logger.info("[db:carousel] created id=%s url=%s", image.id, image.image_url)
        return image

    def list_ordered(self) -> list[CarouselImage]:
        """All images by ascending order, ties in insertion order."""
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT {_CAROUSEL_COLUMNS} FROM carousel_images ORDER BY sort_order ASC, rowid ASC"
            ).fetchall()
        return [self._row_to_image(r) for r in rows]

    def get(self, image_id: str) -> CarouselImage | None:
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT {_CAROUSEL_COLUMNS} FROM carousel_images WHERE id = ?", (image_id,)
            ).fetchone()
        return self._row_to_image(row) if row else None

    def delete(self, image_id: str) -> CarouselImage | None:
        """Delete by id and return the removed record (None if it did not exist)."""
        image = self.get(image_id)
        if image is None:
            logger.info("[db:carousel] delete id=%s existed=False", image_id)
            return None
        with self._connect() as conn:
            conn.execute("DELETE FROM carousel_images WHERE id = ?", (image_id,))
        logger.info("[db:carousel] delete id=%s existed=True", image_id)
        return image

    def clear(self) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM carousel_images")
        logger.info("[db:carousel] cleared all rows")
