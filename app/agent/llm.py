"""
Text generation: OpenAI (primary) or Hugging Face (fallback).
When OPENAI_API_KEY is set, uses OpenAI chat completions; otherwise uses HF router.
The prompt goes in as a single user message; the completion comes back as plain text.
"""

import logging
from typing import Callable

import httpx
from openai import OpenAI, OpenAIError

from app.core.config import (
    HF_API_KEY,
    HF_CHAT_URL,
    HF_LLM_MODEL,
    LLM_API_TIMEOUT,
    LLM_MAX_TOKENS,
    OPENAI_API_KEY,
    OPENAI_LLM_MODEL,
)
from app.core.errors import UpstreamError

logger = logging.getLogger(__name__)

# prompt -> generated text
Generator = Callable[[str], str]


def _call_openai(prompt: str, max_new_tokens: int) -> str:
    """Call OpenAI chat completions. Returns generated text."""
    client = OpenAI(api_key=OPENAI_API_KEY, timeout=LLM_API_TIMEOUT)
    try:
        response = client.chat.completions.create(
            model=OPENAI_LLM_MODEL,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=max_new_tokens,
        )
    except OpenAIError as e:
        logger.exception("[llm:openai] request failed")
        raise UpstreamError() from e
    choices = getattr(response, "choices", None) or []
    msg = getattr(choices[0], "message", None) if choices else None
    content = getattr(msg, "content", None)
    if not isinstance(content, str):
        return ""
    out = content.strip()
    logger.info("[llm:openai] OUT response_len=%d", len(out))
    return out


def _call_hf(prompt: str, max_new_tokens: int) -> str:
    """Call Hugging Face router chat completions. Returns generated text."""
    headers = {"Authorization": f"Bearer {HF_API_KEY}", "Content-Type": "application/json"}
    payload = {
        "model": HF_LLM_MODEL,
        "messages": [{"role": "user", "content": prompt}],
        "max_tokens": max_new_tokens,
    }
    try:
        with httpx.Client(timeout=LLM_API_TIMEOUT) as client:
            response = client.post(HF_CHAT_URL, json=payload, headers=headers)
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.exception("[llm:hf] request failed")
        raise UpstreamError() from e
    if not isinstance(data, dict):
        logger.error("[llm:hf] unexpected response body type=%s", type(data).__name__)
        raise UpstreamError()
    choices = data.get("choices") or []
    if isinstance(choices, list) and choices and isinstance(choices[0], dict):
        msg = choices[0].get("message") or {}
        content = msg.get("content") if isinstance(msg, dict) else None
        out = content.strip() if isinstance(content, str) else ""
        logger.info("[llm:hf] OUT response_len=%d", len(out))
        return out
    return ""


def generate(prompt: str, max_new_tokens: int = LLM_MAX_TOKENS) -> str:
    """
    Generate a completion for prompt. Uses OpenAI when OPENAI_API_KEY is set, else Hugging Face.
    If OpenAI answers with empty text and HF_API_KEY is set, asks HF instead.

    Raises:
        UpstreamError: If the provider call fails.
    """
    logger.info("[llm] IN  prompt_len=%d max_new_tokens=%d", len(prompt), max_new_tokens)
    logger.debug("[llm] prompt_sample=%r", prompt[:500] if len(prompt) > 500 else prompt)
    if OPENAI_API_KEY:
        out = _call_openai(prompt, max_new_tokens)
        if out or not HF_API_KEY:
            return out
        logger.info("[llm] OpenAI returned empty; falling back to Hugging Face")
    return _call_hf(prompt, max_new_tokens)


def get_generator() -> Generator | None:
    """The configured generator, or None when no provider key is set."""
    if not OPENAI_API_KEY and not HF_API_KEY:
        logger.warning("[llm] no OPENAI_API_KEY or HF_API_KEY configured")
        return None
    return generate
