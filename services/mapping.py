from __future__ import annotations

import logging
from typing import Optional, Sequence

from models import HeaderMapping, MappingSuggestion
from ports import LLMClientPort
from services.prompts import HEADER_MAPPING_PROMPT, HEADER_MAPPING_PROMPT_NAME


logger = logging.getLogger(__name__)


def _key(header: str) -> str:
    return " ".join(str(header).split()).casefold()


def _match_header(candidate: Optional[str], headers: Sequence[str]) -> Optional[str]:
    """Return the supplied header the model meant, tolerating case and whitespace drift."""
    if not candidate:
        return None
    if candidate in headers:
        return candidate
    wanted = _key(candidate)
    for h in headers:
        if _key(h) == wanted:
            return h
    return None


def resolve_mapping(headers: Sequence[str], suggestion: Optional[MappingSuggestion]) -> HeaderMapping:
    """Apply positional defaults to an inference suggestion (which may be missing)."""
    headers = list(headers)
    if not headers:
        raise ValueError("At least one header is required")

    name = _match_header(suggestion.name_header if suggestion else None, headers) or headers[0]
    company = _match_header(suggestion.company_header if suggestion else None, headers)
    if company is None:
        company = headers[1] if len(headers) > 1 else headers[0]
    if company == name and len(headers) > 1:
        company = next((h for h in headers if h != name), name)

    email = _match_header(suggestion.email_header if suggestion else None, headers)
    if email in (name, company):
        email = None

    return HeaderMapping(name_header=name, company_header=company, email_header=email)


def suggest_mappings(headers: Sequence[str], *, llm: Optional[LLMClientPort] = None) -> HeaderMapping:
    """Guess the name/company/email columns of a spreadsheet from its headers.

    Falls back to the first and second header when inference is unavailable or unusable.
    """
    headers = list(headers)
    if not headers:
        raise ValueError("At least one header is required")

    if llm is None:
        from services.llm_client import LLMClient

        llm = LLMClient()

    result = llm.infer(
        use_case="header_mapping",
        prompt_template=HEADER_MAPPING_PROMPT,
        variables={"headers": ", ".join(headers)},
        output_schema=MappingSuggestion,
        prompt_name=HEADER_MAPPING_PROMPT_NAME,
    )
    if not result.success:
        logger.warning(
            "Header mapping inference failed; using positional defaults",
            extra={"op": "header_mapping", "status": "fallback", "error": result.error},
        )
    return resolve_mapping(headers, result.data if result.success else None)
