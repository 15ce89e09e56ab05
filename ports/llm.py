from __future__ import annotations

from typing import Mapping, Optional, Protocol, Type

from pydantic import BaseModel

from models import InferenceResult


class LLMClientPort(Protocol):
    def infer(
        self,
        *,
        use_case: str,
        prompt_template: str,
        variables: Mapping[str, str],
        output_schema: Type[BaseModel],
        prompt_name: Optional[str] = None,
    ) -> InferenceResult:
        ...
