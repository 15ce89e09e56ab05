from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv


def _load_env() -> None:
    # Centralized dotenv loading; safe if .env missing
    load_dotenv()


def _as_bool(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    # Inference (OpenAI)
    openai_api_key: str | None = None
    openai_model: str | None = "gpt-4o-mini"
    openai_model_mapping: str | None = None
    openai_model_extraction: str | None = None

    # Profile lookup (SerpAPI, optionally behind a relay)
    serpapi_api_key: str | None = None
    serp_search_url: str = "https://serpapi.com/search.json"
    serp_engine: str = "google"
    lookup_relay_url: str | None = None
    lookup_max_attempts: int = 3
    lookup_backoff_ms: int = 800
    linkedin_url_patterns: tuple[str, ...] = field(
        default_factory=lambda: ("linkedin.com/in/", "linkedin.com/pub/")
    )

    # Content extraction (Tavily)
    tavily_api_key: str | None = None
    tavily_extract_url: str = "https://api.tavily.com/extract"
    tavily_extract_depth: str = "basic"

    # Limits/Timeouts
    max_content_chars: int = 200_000
    request_timeout_seconds: int = 30
    http_timeout_seconds: int = 60

    # Logging/tracing
    log_level: str = "INFO"
    llm_trace: bool = False
    llm_log_path: str = "logs/llm_calls.jsonl"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    _load_env()
    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        openai_model_mapping=os.getenv("OPENAI_MODEL_MAPPING") or None,
        openai_model_extraction=os.getenv("OPENAI_MODEL_EXTRACTION") or None,
        serpapi_api_key=os.getenv("SERPAPI_API_KEY"),
        serp_search_url=os.getenv("SERP_SEARCH_URL", "https://serpapi.com/search.json"),
        serp_engine=os.getenv("SERP_ENGINE", "google"),
        lookup_relay_url=os.getenv("LOOKUP_RELAY_URL") or None,
        lookup_max_attempts=int(os.getenv("LOOKUP_MAX_ATTEMPTS", "3")),
        lookup_backoff_ms=int(os.getenv("LOOKUP_BACKOFF_MS", "800")),
        tavily_api_key=os.getenv("TAVILY_API_KEY"),
        tavily_extract_url=os.getenv("TAVILY_EXTRACT_URL", "https://api.tavily.com/extract"),
        tavily_extract_depth=os.getenv("TAVILY_EXTRACT_DEPTH", "basic"),
        max_content_chars=int(os.getenv("MAX_CONTENT_CHARS", "200000")),
        request_timeout_seconds=int(os.getenv("REQUEST_TIMEOUT", "30")),
        http_timeout_seconds=int(os.getenv("HTTP_TIMEOUT_SECONDS", "60")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        llm_trace=_as_bool(os.getenv("LLM_TRACE", "false")),
        llm_log_path=os.getenv("LLM_LOG_PATH", "logs/llm_calls.jsonl"),
    )
