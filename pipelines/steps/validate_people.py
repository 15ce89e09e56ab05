from __future__ import annotations

from typing import List

from models import PersonRecord
from pipelines.runner import RunContext


class ValidatePeople:
    """Drop nameless records, tidy whitespace and remove repeated name+company pairs."""

    def run(self, ctx: RunContext) -> RunContext:
        seen = set()
        cleaned: List[PersonRecord] = []
        dropped = 0
        for p in ctx.people or []:
            name = " ".join((p.name or "").split())
            if not name:
                dropped += 1
                continue
            company = " ".join((p.company or "").split()) or "Unknown"
            role = " ".join((p.role or "").split()) or None
            key = (name.casefold(), company.casefold())
            if key in seen:
                dropped += 1
                continue
            seen.add(key)
            cleaned.append(PersonRecord(name=name, company=company, role=role))
        ctx.people = cleaned
        ctx.meta["dropped_people"] = dropped
        return ctx
