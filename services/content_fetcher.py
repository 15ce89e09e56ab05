"""
Tavily extract integration: turns a URL into rendered page text.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Literal, Optional

import requests

from config.settings import Settings, get_settings


logger = logging.getLogger(__name__)

FetchErrorKind = Literal["credential", "transport", "empty", "malformed"]


class FetchError(RuntimeError):
    def __init__(self, message: str, kind: FetchErrorKind = "transport") -> None:
        super().__init__(message)
        self.kind = kind


def select_page_text(result: Dict[str, Any]) -> Optional[str]:
    """Map one provider result onto page text, preferring unprocessed content."""
    for key in ("raw_content", "content"):
        value = result.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


class ContentFetcher:
    def __init__(self, settings: Optional[Settings] = None, session: Any = None):
        self.settings = settings or get_settings()
        self.http = session or requests

    def fetch_page_text(self, url: str) -> str:
        api_key = self.settings.tavily_api_key
        if not api_key:
            raise FetchError("TAVILY_API_KEY missing", kind="credential")

        body = {
            "urls": [url],
            "api_key": api_key,
            "include_images": False,
            "extract_depth": self.settings.tavily_extract_depth,
        }
        try:
            resp = self.http.post(
                self.settings.tavily_extract_url,
                json=body,
                timeout=self.settings.http_timeout_seconds,
            )
        except requests.exceptions.RequestException as e:
            raise FetchError(f"Content extraction request failed: {e}") from e

        if not 200 <= resp.status_code < 300:
            reason = getattr(resp, "reason", "") or ""
            raise FetchError(f"Content extraction API error: {resp.status_code} {reason}".strip())

        try:
            data = resp.json()
        except ValueError as e:
            raise FetchError("Content extraction response was not JSON", kind="malformed") from e
        if not isinstance(data, dict) or not isinstance(data.get("results", []), list):
            raise FetchError("Unexpected content extraction response shape", kind="malformed")

        results = data.get("results") or []
        if not results:
            failed = data.get("failed_results") or []
            if not isinstance(failed, list):
                raise FetchError("Unexpected content extraction response shape", kind="malformed")
            detail = failed[0].get("error") if failed and isinstance(failed[0], dict) else None
            message = "No content extracted from the page."
            if detail:
                message = f"{message} ({detail})"
            raise FetchError(message, kind="empty")

        first = results[0]
        if not isinstance(first, dict):
            raise FetchError("Unexpected content extraction result shape", kind="malformed")
        text = select_page_text(first)
        if text is None:
            raise FetchError("No content extracted from the page.", kind="empty")

        logger.info(
            f"Fetched {len(text)} chars from {url}",
            extra={"op": "fetch_page", "status": "ok", "provider": "tavily"},
        )
        return text


def fetch_page_text(url: str, *, settings: Optional[Settings] = None) -> str:
    return ContentFetcher(settings=settings).fetch_page_text(url)
