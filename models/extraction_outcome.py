from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .person_record import PersonRecord


class ExtractionOutcome(BaseModel):
    """Result of the fetch-then-extract pipeline.

    ``success=True`` with no records means the page had no people on it;
    ``success=False`` always carries an empty list and a message.
    """

    success: bool
    records: list[PersonRecord] = Field(default_factory=list)
    message: str | None = None

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _failure_has_no_records(self) -> "ExtractionOutcome":
        if not self.success and self.records:
            raise ValueError("a failed extraction cannot carry records")
        return self
