"""
Application configuration (env, settings, constants).

Responsibility: Centralize config loading, environment variables, and app-wide
constants. Keeps the rest of the app decoupled from how config is sourced.
"""

import os

from dotenv import load_dotenv

load_dotenv()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


# Record defaults (applied before a record reaches the engine)
DEFAULT_NAME_PREFIX: str = "Unnamed"
DEFAULT_DEPARTMENT: str = "Unassigned"

# Search (tuning these affects ranking quality)
SEARCH_RESULT_LIMIT: int = 5
COSINE_THRESHOLD: float = 0.05
EXACT_MATCH_SCORE: float = 1.0
PARTIAL_MATCH_SCORE: float = 0.8
TOP_PERFORMER_LIMIT: int = 3

# Conversational heuristic increments (hand-tuned; override via env)
CONVERSATIONAL_SENIOR_HIGH: float = _env_float("CONVERSATIONAL_SENIOR_HIGH", 0.3)
CONVERSATIONAL_SENIOR_MID: float = _env_float("CONVERSATIONAL_SENIOR_MID", 0.2)
CONVERSATIONAL_JUNIOR_HIGH: float = _env_float("CONVERSATIONAL_JUNIOR_HIGH", 0.3)
CONVERSATIONAL_JUNIOR_MID: float = _env_float("CONVERSATIONAL_JUNIOR_MID", 0.2)
CONVERSATIONAL_MULTI_SKILL: float = _env_float("CONVERSATIONAL_MULTI_SKILL", 0.2)
CONVERSATIONAL_CERTIFIED: float = _env_float("CONVERSATIONAL_CERTIFIED", 0.2)
CONVERSATIONAL_DEPARTMENT: float = _env_float("CONVERSATIONAL_DEPARTMENT", 0.3)

# Gemini (primary generator, from env)
GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "").strip()
GEMINI_API_KEY_PLACEHOLDER: str = "your_gemini_api_key_here"
GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-1.5-flash").strip() or "gemini-1.5-flash"
GEMINI_API_URL: str = "https://generativelanguage.googleapis.com/v1beta/models"

# OpenAI (used when GEMINI_API_KEY is not configured)
OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "").strip()
OPENAI_LLM_MODEL: str = (
    os.getenv("OPENAI_LLM_MODEL", "gpt-4o-mini").strip() or "gpt-4o-mini"
)

# Generation limits (seconds / tokens)
GENERATION_TIMEOUT: float = _env_float("GENERATION_TIMEOUT", 30.0)
GENERATION_MAX_TOKENS: int = 512

# Conversation history folded into prompts
HISTORY_MAX_MESSAGES: int = 6
