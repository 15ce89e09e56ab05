from __future__ import annotations

from typing import Any, Dict

from config.settings import Settings


# Central routing for inference use-cases. Edit here to change per-operation defaults.
# Per-route models come from Settings (OPENAI_MODEL_MAPPING / OPENAI_MODEL_EXTRACTION)
# and fall back to the global OPENAI_MODEL.
#
# Keys are use_case identifiers consumed by services/llm_client.py
ROUTES: dict[str, dict] = {
    # Spreadsheet header -> name/company/email column mapping
    "header_mapping": {
        "provider": "openai",
        "model_setting": "openai_model_mapping",
        "temperature": 0,
        "operation": "header_mapping",
        "schema_name": "header_mapping",
    },
    # Event page text -> speaker/attendee records
    "people_extraction": {
        "provider": "openai",
        "model_setting": "openai_model_extraction",
        "temperature": 0,
        "operation": "people_extraction",
        "schema_name": "event_people",
    },
}


def route_for(use_case: str, settings: Settings) -> Dict[str, Any]:
    """Route for ``use_case`` with its model resolved against the given settings."""
    route = dict(ROUTES.get(use_case, {}))
    override = getattr(settings, route.pop("model_setting", "") or "", None)
    route["model"] = override or settings.openai_model or "gpt-4o-mini"
    return route
