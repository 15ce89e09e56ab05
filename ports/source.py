from __future__ import annotations

from typing import Protocol


class PageFetcherPort(Protocol):
    """Returns page text or raises services.content_fetcher.FetchError."""

    def fetch_page_text(self, url: str) -> str:
        ...
