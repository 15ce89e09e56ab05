"""
SerpAPI Google search integration for resolving a person's LinkedIn profile URL.
"""
from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional
from urllib.parse import urlencode

import requests

from config.settings import Settings, get_settings
from models import LookupResult
from services.domain_utils import is_profile_link, strip_query


logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "No profile found"


class SearchError(RuntimeError):
    """Transient search failure: transport error, bad status, bad body or provider error."""


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    base_delay_seconds: float = 0.8
    backoff: Optional[Callable[[int], float]] = None
    sleep: Callable[[float], None] = field(default=time.sleep)

    def delay_for(self, attempt: int) -> float:
        """Delay after failed ``attempt`` (1-based); linear ``base * attempt`` by default."""
        if self.backoff is not None:
            return self.backoff(attempt)
        return self.base_delay_seconds * attempt

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryPolicy":
        return cls(
            max_attempts=max(1, settings.lookup_max_attempts),
            base_delay_seconds=settings.lookup_backoff_ms / 1000.0,
        )


class ProfileLookup:
    """Resolves a single canonical LinkedIn profile URL for a name + company."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Any = None,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        self.settings = settings or get_settings()
        self.http = session or requests
        self.retry = retry_policy or RetryPolicy.from_settings(self.settings)

    def format_query(self, name: str, company: str) -> str:
        query = f'site:linkedin.com/in "{name.strip()}"'
        if company and company.strip():
            query += f" {company.strip()}"
        return query

    def _request_args(self, query: str, attempt: int) -> Dict[str, Any]:
        params = {
            "engine": self.settings.serp_engine,
            "q": query,
            "api_key": self.settings.serpapi_api_key,
            # Fresh per attempt so intermediate caches never collapse retries
            "_ts": uuid.uuid4().hex,
            "_at": attempt,
        }
        relay = self.settings.lookup_relay_url
        if relay:
            target = f"{self.settings.serp_search_url}?{urlencode(params)}"
            return {"url": relay, "params": {"url": target}}
        return {"url": self.settings.serp_search_url, "params": params}

    def search_once(self, query: str, attempt: int) -> Dict[str, Any]:
        """Execute one search request; raises SearchError on any transient failure."""
        args = self._request_args(query, attempt)
        try:
            response = self.http.get(args["url"], params=args["params"], timeout=self.settings.request_timeout_seconds)
        except requests.exceptions.RequestException as e:
            raise SearchError(f"Request error: {e}") from e

        if not 200 <= response.status_code < 300:
            raise SearchError(f"Search error: {response.status_code}")
        try:
            data = response.json()
        except ValueError as e:
            raise SearchError("Search response was not JSON") from e
        if not isinstance(data, dict):
            raise SearchError("Unexpected search response shape")
        if data.get("error"):
            raise SearchError(str(data["error"]))
        return data

    def pick_profile(self, data: Dict[str, Any]) -> Optional[str]:
        results = data.get("organic_results")
        if not isinstance(results, list):
            return None
        for item in results:
            link = item.get("link") if isinstance(item, dict) else None
            if is_profile_link(link, self.settings.linkedin_url_patterns):
                return strip_query(link)
        return None

    def resolve_profile(self, name: str, company: str) -> LookupResult:
        if not name or not name.strip():
            return LookupResult(success=False, message="Name is required")
        if not self.settings.serpapi_api_key:
            logger.warning(
                "Profile lookup skipped: SERPAPI_API_KEY missing",
                extra={"op": "profile_lookup", "status": "error", "provider": "serpapi", "error": "credential"},
            )
            return LookupResult(success=False, message="SERPAPI_API_KEY missing")

        query = self.format_query(name, company)
        last_error = "Search failed after multiple attempts"
        for attempt in range(1, self.retry.max_attempts + 1):
            try:
                data = self.search_once(query, attempt)
            except SearchError as e:
                last_error = str(e) or last_error
                logger.warning(
                    f"LinkedIn search attempt {attempt} failed: {last_error}",
                    extra={"op": "profile_lookup", "attempt": attempt, "status": "retry", "provider": "serpapi", "error": last_error},
                )
                if attempt < self.retry.max_attempts:
                    self.retry.sleep(self.retry.delay_for(attempt))
                continue

            url = self.pick_profile(data)
            if url:
                logger.info(
                    "LinkedIn profile found",
                    extra={"op": "profile_lookup", "attempt": attempt, "status": "ok", "provider": "serpapi"},
                )
                return LookupResult(success=True, url=url, attempts=attempt)
            # Valid negative result; not retried
            return LookupResult(success=False, message=NOT_FOUND_MESSAGE, attempts=attempt)

        logger.error(
            "LinkedIn search exhausted retries",
            extra={"op": "profile_lookup", "attempt": self.retry.max_attempts, "status": "failed", "provider": "serpapi", "error": last_error},
        )
        return LookupResult(success=False, message=last_error, attempts=self.retry.max_attempts)


def find_linkedin_url(name: str, company: str, *, settings: Optional[Settings] = None) -> LookupResult:
    return ProfileLookup(settings=settings).resolve_profile(name, company)
