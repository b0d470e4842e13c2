"""
Text generation: Gemini (primary) or OpenAI (fallback).
When GEMINI_API_KEY is set, uses the Gemini generateContent REST API; otherwise OpenAI chat completions.
Every call is bounded by GENERATION_TIMEOUT; a timeout raises GenerationTimeoutError.
"""

import logging

import httpx
from openai import APITimeoutError, OpenAI, OpenAIError

from people_finder.core.config import (
    GEMINI_API_KEY,
    GEMINI_API_KEY_PLACEHOLDER,
    GEMINI_API_URL,
    GEMINI_MODEL,
    GENERATION_MAX_TOKENS,
    GENERATION_TIMEOUT,
    OPENAI_API_KEY,
    OPENAI_LLM_MODEL,
)
from people_finder.core.errors import GenerationTimeoutError, GenerationUnavailableError

logger = logging.getLogger(__name__)


def is_gemini_configured() -> bool:
    return bool(GEMINI_API_KEY) and GEMINI_API_KEY != GEMINI_API_KEY_PLACEHOLDER


def is_openai_configured() -> bool:
    return bool(OPENAI_API_KEY)


def generation_status() -> dict:
    """Describe which generator would be used, for /health and the UI."""
    if is_gemini_configured():
        return {"available": True, "backend": "gemini", "model": GEMINI_MODEL, "message": "Gemini API key is configured"}
    if is_openai_configured():
        return {"available": True, "backend": "openai", "model": OPENAI_LLM_MODEL, "message": "OpenAI API key is configured"}
    if GEMINI_API_KEY == GEMINI_API_KEY_PLACEHOLDER:
        message = "GEMINI_API_KEY still holds the placeholder value"
    else:
        message = "No generation API key is configured"
    return {"available": False, "backend": None, "model": None, "message": message}


def _call_gemini(prompt: str, max_tokens: int, timeout: float) -> str:
    """Call Gemini generateContent. Returns generated text."""
    url = f"{GEMINI_API_URL}/{GEMINI_MODEL}:generateContent"
    headers = {"x-goog-api-key": GEMINI_API_KEY, "Content-Type": "application/json"}
    payload = {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": {"maxOutputTokens": max_tokens},
    }
    try:
        with httpx.Client(timeout=timeout) as client:
            response = client.post(url, json=payload, headers=headers)
    except httpx.TimeoutException as e:
        logger.warning("[llm:gemini] timed out after %.1fs", timeout)
        raise GenerationTimeoutError(f"Gemini did not respond within {timeout:.0f}s") from e
    except httpx.HTTPError as e:
        logger.warning("[llm:gemini] request failed: %s", e)
        raise GenerationUnavailableError(f"Gemini request failed: {e}") from e
    if response.status_code != 200:
        logger.warning("[llm:gemini] Gemini error %s: %s", response.status_code, response.text[:200])
        raise GenerationUnavailableError(f"Gemini returned HTTP {response.status_code}")
    try:
        data = response.json()
        candidates = data.get("candidates") or []
        parts = ((candidates[0].get("content") or {}).get("parts") or []) if candidates else []
        out = "".join(p.get("text", "") for p in parts if isinstance(p, dict)).strip()
    except (ValueError, AttributeError, TypeError, IndexError) as e:
        logger.warning("[llm:gemini] unreadable response body: %s", e)
        raise GenerationUnavailableError("Gemini returned an unreadable response") from e
    logger.info("[llm:gemini] OUT response_len=%d", len(out))
    return out


def _call_openai(prompt: str, max_tokens: int, timeout: float) -> str:
    """Call OpenAI chat completions. Returns generated text."""
    client = OpenAI(api_key=OPENAI_API_KEY, timeout=timeout)
    try:
        response = client.chat.completions.create(
            model=OPENAI_LLM_MODEL,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=max_tokens,
        )
    except APITimeoutError as e:
        logger.warning("[llm:openai] timed out after %.1fs", timeout)
        raise GenerationTimeoutError(f"OpenAI did not respond within {timeout:.0f}s") from e
    except OpenAIError as e:
        logger.warning("[llm:openai] request failed: %s", e)
        raise GenerationUnavailableError(f"OpenAI request failed: {e}") from e
    msg = response.choices[0].message if response.choices else None
    out = ((msg.content if msg else None) or "").strip()
    logger.info("[llm:openai] OUT response_len=%d", len(out))
    return out


def generate(prompt: str, max_tokens: int = GENERATION_MAX_TOKENS, timeout: float = GENERATION_TIMEOUT) -> str:
    """
    Generate text for a prompt. Tries Gemini, then OpenAI, among the configured backends.

    A backend that fails or returns nothing hands over to the next one; a
    timeout is raised immediately so the overall call stays bounded.
    Raises GenerationUnavailableError when no backend produced text.
    """
    logger.info("[llm] IN  prompt_len=%d max_tokens=%d timeout=%.1f", len(prompt), max_tokens, timeout)
    logger.debug("[llm] prompt_sample=%r", prompt[:500])
    backends = []
    if is_gemini_configured():
        backends.append(("gemini", _call_gemini))
    if is_openai_configured():
        backends.append(("openai", _call_openai))
    if not backends:
        raise GenerationUnavailableError("No generation backend is configured")

    last_error: GenerationUnavailableError | None = None
    for name, call in backends:
        try:
            out = call(prompt, max_tokens, timeout)
        except GenerationUnavailableError as e:
            last_error = e
            continue
        if out:
            return out
        logger.info("[llm] %s returned empty; trying next backend", name)
    raise last_error or GenerationUnavailableError("Generation returned no text")
