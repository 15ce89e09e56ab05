from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class PersonRecord(BaseModel):
    """A speaker/attendee extracted from an event page."""

    name: str
    company: str = "Unknown"
    role: str | None = None

    model_config = ConfigDict(extra="ignore")


class ExtractedPerson(BaseModel):
    """One entry of the LLM reply; nulls are tolerated and cleaned up by ValidatePeople."""

    name: str | None = None
    company: str | None = None
    role: str | None = None

    model_config = ConfigDict(extra="ignore")


class ExtractedPeople(BaseModel):
    """LLM structured output: shape expected from people extraction."""

    speakers: list[ExtractedPerson] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")
