from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class HeaderMapping(BaseModel):
    """Which spreadsheet columns hold the person's name, company and email."""

    name_header: str = Field(alias="nameHeader")
    company_header: str = Field(alias="companyHeader")
    email_header: str | None = Field(default=None, alias="emailHeader")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class MappingSuggestion(BaseModel):
    """LLM structured output for header mapping; values are not yet checked against the headers."""

    name_header: str | None = Field(default=None, alias="nameHeader")
    company_header: str | None = Field(default=None, alias="companyHeader")
    email_header: str | None = Field(default=None, alias="emailHeader")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)
