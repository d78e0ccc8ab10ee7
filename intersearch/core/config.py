"""
Application configuration (env, settings, constants).

Responsibility: Centralize config loading, environment variables, and app-wide
constants. Keeps the rest of the app decoupled from how config is sourced.
Missing credentials are not an error here; adapters report them at call time.
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _env_str(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip()


def _env_int(name: str, default: int) -> int:
    raw = _env_str(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("[config] %s=%r is not an integer; using %d", name, raw, default)
        return default


def _env_float(name: str, default: float) -> float:
    raw = _env_str(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("[config] %s=%r is not a number; using %s", name, raw, default)
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    raw = _env_str(name).lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


# Server
HOST: str = _env_str("HOST", "0.0.0.0") or "0.0.0.0"
PORT: int = _env_int("PORT", 3000)
LOG_LEVEL: str = (_env_str("LOG_LEVEL", "INFO") or "INFO").upper()

# Google Programmable Search (web fallback)
GOOGLE_API_KEY: str = _env_str("GOOGLE_API_KEY")
GOOGLE_CX: str = _env_str("GOOGLE_CX")
GOOGLE_SEARCH_URL: str = (
    _env_str("GOOGLE_SEARCH_URL") or "https://www.googleapis.com/customsearch/v1"
)
WEB_SEARCH_MAX_RESULTS: int = _env_int("WEB_SEARCH_MAX_RESULTS", 5)
WEB_SEARCH_TIMEOUT: float = _env_float("WEB_SEARCH_TIMEOUT", 15.0)

# OpenAI (generative fallback and /ai)
OPENAI_API_KEY: str = _env_str("OPENAI_API_KEY")
OPENAI_LLM_MODEL: str = _env_str("OPENAI_LLM_MODEL", "gpt-4o-mini") or "gpt-4o-mini"
OPENAI_TEMPERATURE: float = _env_float("OPENAI_TEMPERATURE", 0.3)
OPENAI_MAX_RETRIES: int = _env_int("OPENAI_MAX_RETRIES", 2)
ANSWER_MAX_TOKENS: int = _env_int("ANSWER_MAX_TOKENS", 800)
ASSISTANT_MAX_TOKENS: int = _env_int("ASSISTANT_MAX_TOKENS", 1000)
LLM_API_TIMEOUT: float = _env_float("LLM_API_TIMEOUT", 60.0)

# Result cache
CACHE_MAX_ENTRIES: int = _env_int("CACHE_MAX_ENTRIES", 500)
CACHE_TTL_SECONDS: float = _env_float("CACHE_TTL_SECONDS", 300.0)

# Primary (local) index. Empty path means the index has no documents.
PRIMARY_INDEX_PATH: str = _env_str("PRIMARY_INDEX_PATH")
PRIMARY_INDEX_MAX_RESULTS: int = _env_int("PRIMARY_INDEX_MAX_RESULTS", 5)

# Share one upstream resolution between concurrent identical queries
COALESCE_INFLIGHT: bool = _env_bool("COALESCE_INFLIGHT", False)
