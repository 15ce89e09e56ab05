from __future__ import annotations

import logging

from pipelines.runner import RunContext
from ports import PageFetcherPort
from services.content_fetcher import FetchError


logger = logging.getLogger(__name__)


class FetchPage:
    def __init__(self, fetcher: PageFetcherPort) -> None:
        self.fetcher = fetcher

    def run(self, ctx: RunContext) -> RunContext:
        if not ctx.source_url:
            return ctx
        try:
            ctx.text = self.fetcher.fetch_page_text(ctx.source_url)
        except FetchError as e:
            logger.error(
                f"Fetching {ctx.source_url} failed: {e}",
                extra={"op": "fetch_page", "status": "error", "error": e.kind},
            )
            ctx.error = str(e) or "Failed to fetch page"
            ctx.meta["fetch_error_kind"] = e.kind
        return ctx
