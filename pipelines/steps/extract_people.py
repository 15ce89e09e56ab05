from __future__ import annotations

from models import ExtractedPeople
from pipelines.runner import RunContext
from ports import LLMClientPort
from services.prompts import PEOPLE_EXTRACTION_PROMPT, PEOPLE_EXTRACTION_PROMPT_NAME


class ExtractPeople:
    def __init__(self, llm: LLMClientPort) -> None:
        self.llm = llm

    def run(self, ctx: RunContext) -> RunContext:
        if not (ctx.text or "").strip():
            ctx.error = "No page content to extract people from"
            return ctx
        result = self.llm.infer(
            use_case="people_extraction",
            prompt_template=PEOPLE_EXTRACTION_PROMPT,
            variables={"content": ctx.text},
            output_schema=ExtractedPeople,
            prompt_name=PEOPLE_EXTRACTION_PROMPT_NAME,
        )
        if not result.success:
            ctx.error = result.error or "People extraction failed"
            ctx.people = []
            return ctx
        ctx.people = list(result.data.speakers)
        return ctx
