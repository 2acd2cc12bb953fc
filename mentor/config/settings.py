# mentor/config/settings.py
from __future__ import annotations
import os
from dataclasses import dataclass, field
from typing import List


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


# ---------- Providers / Keys ----------
TAVILY_API_KEY = os.getenv("TAVILY_API_KEY") or ""
ENABLE_DDG = _env_bool("ENABLE_DDG", "1")

# ---------- Generative model ----------
OLLAMA_URL = os.getenv("OLLAMA_URL", "http://ollama:11434")
LLM_MODEL = os.getenv("LLM_MODEL", "mistral")
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.7"))
LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "4096"))
LLM_TIMEOUT_S = float(os.getenv("LLM_TIMEOUT_S", "45"))

# ---------- HTTP / Networking ----------
REQUEST_TIMEOUT_S = float(os.getenv("REQUEST_TIMEOUT_S", "12"))
REQUEST_DEADLINE_S = float(os.getenv("REQUEST_DEADLINE_S", "60"))

# ---------- Cache ----------
CACHE_TTL_S = float(os.getenv("CACHE_TTL_S", str(30 * 60)))
CACHE_MAX_ENTRIES = int(os.getenv("CACHE_MAX_ENTRIES", "512"))

# ---------- Ranking / prompt limits ----------
TOP_K = int(os.getenv("TOP_K", "5"))
MIN_CONTENT_CHARS = int(os.getenv("MIN_CONTENT_CHARS", "100"))
EXCERPT_CHARS = int(os.getenv("EXCERPT_CHARS", "300"))

# ---------- Search preferences ----------
DEFAULT_REGION = os.getenv("SEARCH_REGION", "us-en")
DEFAULT_SAFESEARCH = os.getenv("SEARCH_SAFESEARCH", "moderate")

# ---------- API ----------
JWT_SECRET = os.getenv("JWT_SECRET", "key")
JWT_ALGORITHM = "HS256"
AUTH_REQUIRED = _env_bool("AUTH_REQUIRED", "1")
CORS_ORIGINS = "http://localhost:3000"

# ---------- Rate limiting ----------
RATE_LIMIT_WINDOW_S = float(os.getenv("RATE_LIMIT_WINDOW_S", str(15 * 60)))
RATE_LIMIT_MAX = int(os.getenv("RATE_LIMIT_MAX", "100"))  # per caller per window, 0 disables


@dataclass
class Settings:
    # keys / providers
    tavily_api_key: str = TAVILY_API_KEY
    enable_ddg: bool = ENABLE_DDG

    # generative model
    ollama_url: str = OLLAMA_URL
    llm_model: str = LLM_MODEL
    llm_temperature: float = LLM_TEMPERATURE
    llm_max_tokens: int = LLM_MAX_TOKENS
    llm_timeout_s: float = LLM_TIMEOUT_S

    # http
    request_timeout_s: float = REQUEST_TIMEOUT_S
    request_deadline_s: float = REQUEST_DEADLINE_S

    # cache
    cache_ttl_s: float = CACHE_TTL_S
    cache_max_entries: int = CACHE_MAX_ENTRIES

    # ranking / prompts
    top_k: int = TOP_K
    min_content_chars: int = MIN_CONTENT_CHARS
    excerpt_chars: int = EXCERPT_CHARS

    # search
    search_region: str = DEFAULT_REGION
    safesearch: str = DEFAULT_SAFESEARCH

    # api
    jwt_secret: str = JWT_SECRET
    jwt_algorithm: str = JWT_ALGORITHM
    auth_required: bool = AUTH_REQUIRED
    cors_origins: List[str] = field(default_factory=lambda: _env_list("CORS_ORIGINS", CORS_ORIGINS))

    # rate limiting
    rate_limit_window_s: float = RATE_LIMIT_WINDOW_S
    rate_limit_max: int = RATE_LIMIT_MAX


def get_settings() -> Settings:
    """
    Factory so callers can do:
        from mentor.config.settings import get_settings
        cfg = get_settings()
    """
    return Settings()
