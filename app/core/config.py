"""
Application configuration (env, settings, constants).

Responsibility: Centralize config loading, environment variables, and app-wide
constants. Keeps the rest of the app decoupled from how config is sourced.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Project root (where .env, data/ and uploads/ live)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent.parent

# SQLite database holding chat data and carousel images
DATABASE_PATH: str = os.getenv("DATABASE_PATH", "data/app.db").strip() or "data/app.db"

# Upload storage; served back under /uploads
UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", "uploads").strip() or "uploads"
UPLOAD_URL_PREFIX: str = "/uploads/"

# Only these image types are accepted by the multipart upload endpoint
ALLOWED_IMAGE_MIMES: frozenset[str] = frozenset(
    {"image/jpeg", "image/png", "image/gif", "image/webp"}
)

# Retrieval: max documents handed to the prompt
CONTEXT_LIMIT: int = 6

# Display timestamps follow vi-VN conventions in local time
DISPLAY_TIMEZONE: str = os.getenv("DISPLAY_TIMEZONE", "Asia/Ho_Chi_Minh").strip() or "Asia/Ho_Chi_Minh"

# OpenAI (primary generator)
OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "").strip()
OPENAI_LLM_MODEL: str = (
    os.getenv("OPENAI_LLM_MODEL", "gpt-4o-mini").strip() or "gpt-4o-mini"
)

# Hugging Face router chat completions (used when OPENAI_API_KEY is not set)
HF_API_KEY: str = os.getenv("HF_API_KEY", "").strip()
HF_LLM_MODEL: str = (
    os.getenv("HF_LLM_MODEL", "meta-llama/Llama-3.2-3B-Instruct").strip()
    or "meta-llama/Llama-3.2-3B-Instruct"
)
HF_CHAT_URL: str = "https://router.huggingface.co/v1/chat/completions"

# Generation limits (seconds / tokens)
LLM_API_TIMEOUT: float = float(os.getenv("LLM_API_TIMEOUT", "60") or 60)
LLM_MAX_TOKENS: int = int(os.getenv("LLM_MAX_TOKENS", "1024") or 1024)


def resolve_path(path: str) -> Path:
    """Relative paths are anchored at the project root; absolute ones are kept."""
    p = Path(path)
    return p if p.is_absolute() else PROJECT_ROOT / p
