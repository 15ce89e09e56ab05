from __future__ import annotations

import logging
from typing import Optional

from config.settings import Settings, get_settings
from models import ExtractionOutcome
from pipelines.runner import Pipeline, RunContext
from pipelines.steps import ExtractPeople, FetchPage, TruncateText, ValidatePeople
from ports import LLMClientPort, PageFetcherPort
from services.domain_utils import looks_like_url


logger = logging.getLogger(__name__)


class PeopleExtractor:
    """Fetch-then-extract pipeline producing speaker/attendee records from an event page."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        fetcher: Optional[PageFetcherPort] = None,
        llm: Optional[LLMClientPort] = None,
    ) -> None:
        self.settings = settings or get_settings()
        if fetcher is None:
            from services.content_fetcher import ContentFetcher

            fetcher = ContentFetcher(settings=self.settings)
        if llm is None:
            from services.llm_client import LLMClient

            llm = LLMClient(settings=self.settings)
        self.fetcher = fetcher
        self.llm = llm

    def _pipeline(self, with_fetch: bool) -> Pipeline:
        steps = [
            TruncateText(self.settings.max_content_chars),
            ExtractPeople(self.llm),
            ValidatePeople(),
        ]
        if with_fetch:
            steps.insert(0, FetchPage(self.fetcher))
        return Pipeline(steps)

    def _outcome(self, ctx: RunContext) -> ExtractionOutcome:
        meta = ctx.meta
        if ctx.error:
            logger.warning(
                f"People extraction failed at {meta.get('failed_step')}: {ctx.error}",
                extra={
                    "op": "extract_people",
                    "status": "error",
                    "error": meta.get("fetch_error_kind") or ctx.error,
                    "failed_step": meta.get("failed_step"),
                },
            )
            return ExtractionOutcome(success=False, records=[], message=ctx.error)
        logger.info(
            f"Extracted {len(ctx.people)} people "
            f"(input_chars={meta.get('original_length')} truncated={meta.get('truncated')} dropped={meta.get('dropped_people')})",
            extra={
                "op": "extract_people",
                "status": "ok",
                "truncated": meta.get("truncated"),
                "dropped_people": meta.get("dropped_people"),
            },
        )
        return ExtractionOutcome(success=True, records=list(ctx.people))

    def from_url(self, url: str) -> ExtractionOutcome:
        ctx = self._pipeline(with_fetch=True).run(RunContext(source_url=url.strip()))
        return self._outcome(ctx)

    def from_text(self, raw_text: str) -> ExtractionOutcome:
        ctx = self._pipeline(with_fetch=False).run(RunContext(text=raw_text))
        return self._outcome(ctx)

    def extract(self, source: str) -> ExtractionOutcome:
        if looks_like_url(source):
            return self.from_url(source)
        return self.from_text(source)


def extract_people(source: str, *, settings: Optional[Settings] = None) -> ExtractionOutcome:
    """Extract people from a URL (fetched first) or from already-fetched page text."""
    return PeopleExtractor(settings=settings).extract(source)
