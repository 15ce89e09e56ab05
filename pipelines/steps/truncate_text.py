from __future__ import annotations

from pipelines.runner import RunContext


class TruncateText:
    """Keep only the leading ``max_chars`` characters so inference input stays within limits."""

    def __init__(self, max_chars: int) -> None:
        self.max_chars = max_chars

    def run(self, ctx: RunContext) -> RunContext:
        text = ctx.text or ""
        ctx.meta["original_length"] = len(text)
        ctx.meta["truncated"] = len(text) > self.max_chars
        ctx.text = text[: self.max_chars]
        return ctx
