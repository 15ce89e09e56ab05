from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator


class LookupResult(BaseModel):
    """Outcome of a profile lookup: a canonical URL on success, a reason otherwise."""

    success: bool
    url: str | None = None
    message: str | None = None
    attempts: int = 0

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _url_iff_success(self) -> "LookupResult":
        if self.success != bool(self.url):
            raise ValueError("url must be set exactly when success is true")
        return self
