from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class InferenceResult(BaseModel):
    """Typed outcome of a schema-constrained inference call.

    ``data`` holds the validated instance of the requested output schema.
    """

    success: bool
    data: Any = None
    error: str | None = None

    model_config = ConfigDict(arbitrary_types_allowed=True)
