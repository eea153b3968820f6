#!/usr/bin/env python3
"""
Seed the application database for demos or tests.

Creates the SQLite database (DATABASE_PATH, default data/app.db) if missing,
ensures the tables exist, and inserts a few chat data entries and carousel
images. Use --reset to clear existing rows first.

Run from project root:

    python scripts/seed_data.py
    python scripts/seed_data.py --reset

Edit SEED_DOCUMENTS / SEED_CAROUSEL below to change the demo content.
"""

import argparse
import sys
from pathlib import Path

# Project root on path so "app" resolves
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from app.core.config import DATABASE_PATH, resolve_path
from app.core.db import CarouselStore, DocumentStore

SEED_DOCUMENTS = [
    {
        "title": "Lịch họp tổ bầu cử",
        "content": "Tổ bầu cử họp vào thứ 2 hằng tuần tại hội trường UBND phường.",
    },
    {
        "title": "Thời gian bỏ phiếu",
        "content": "Các khu vực bỏ phiếu mở cửa từ 7 giờ đến 19 giờ ngày bầu cử.",
    },
    {
        "title": "Hướng dẫn kiểm tra danh sách cử tri",
        "content": "Cử tri kiểm tra tên mình trong danh sách niêm yết tại nhà văn hóa khu phố.",
        "file_type": "word",
        "html_content": "<p>Cử tri kiểm tra tên mình trong danh sách niêm yết.</p><img src=\"data:image/png;base64,\">",
        "image_count": 1,
    },
]

SEED_CAROUSEL = [
    {"title": "Ngày hội toàn dân", "image_url": "/uploads/banner-1.png", "alt": "Banner bầu cử", "order": 1},
    {"title": "Cử tri đi bầu", "image_url": "/uploads/banner-2.png", "alt": "", "order": 2},
]


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed chat data and carousel images for demos/tests.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Clear all existing rows before inserting seed data.",
    )
    args = parser.parse_args()

    db_path = resolve_path(DATABASE_PATH)
    documents = DocumentStore(db_path)
    carousel = CarouselStore(db_path)
    if args.reset:
        documents.clear()
        carousel.clear()
        print("Cleared existing documents and carousel images.")

    for entry in SEED_DOCUMENTS:
        doc = documents.create(**entry)
        print(f"  document: {doc.title} ({doc.file_type})")
    for entry in SEED_CAROUSEL:
        image = carousel.create(**entry)
        print(f"  carousel: {image.title} -> {image.image_url}")

    print(f"Done. Seeded {len(SEED_DOCUMENTS)} documents and {len(SEED_CAROUSEL)} carousel images into {db_path}.")


if __name__ == "__main__":
    main()
