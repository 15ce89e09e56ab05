from __future__ import annotations

import json
import logging
import re
import time
from typing import Any, Dict, List, Mapping, Optional, Type

from openai import OpenAI, OpenAIError
from pydantic import BaseModel, ValidationError

from config.llm_routes import route_for
from config.settings import Settings, get_settings
from models import InferenceResult
from services.prompts import SYSTEM_PROMPT
from utils.llm_logger import log_call, sha256_text


logger = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")
_FENCED_RE = re.compile(r"```(?:json)?\s*\n([\s\S]*?)\n```")


def render_prompt(template: str, variables: Mapping[str, Any]) -> str:
    """Fill ``{{name}}`` placeholders in a single pass; unknown placeholders stay as-is."""

    def _sub(m: re.Match) -> str:
        key = m.group(1)
        if key not in variables:
            return m.group(0)
        return str(variables[key])

    return _PLACEHOLDER_RE.sub(_sub, template)


def _extract_json(text: Optional[str]) -> Optional[Any]:
    if not text:
        return None
    # Try raw parse first
    try:
        return json.loads(text)
    except ValueError:
        pass
    # Try fenced code block
    m = _FENCED_RE.search(text)
    if m:
        try:
            return json.loads(m.group(1))
        except ValueError:
            pass
    # Try curly braces slice
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        try:
            return json.loads(text[start : end + 1])
        except ValueError:
            pass
    return None


def _usage_of(resp: Any) -> Optional[Dict[str, Any]]:
    usage = getattr(resp, "usage", None)
    if not usage:
        return None
    return {
        "prompt_tokens": getattr(usage, "prompt_tokens", None),
        "completion_tokens": getattr(usage, "completion_tokens", None),
        "total_tokens": getattr(usage, "total_tokens", None),
    }


def _response_text(resp: Any) -> Optional[str]:
    choices = getattr(resp, "choices", None) or []
    if not choices:
        return None
    message = getattr(choices[0], "message", None)
    return getattr(message, "content", None)


class LLMClient:
    """Wrapper that centralizes per-use-case routing, schema-constrained calls and tracing."""

    def __init__(self, settings: Optional[Settings] = None, openai_client: Any = None) -> None:
        self.settings = settings or get_settings()
        self._client = openai_client

    def _openai(self) -> Any:
        if self._client is None:
            self._client = OpenAI(
                api_key=self.settings.openai_api_key,
                timeout=self.settings.http_timeout_seconds,
            )
        return self._client

    def has_credentials(self) -> bool:
        return self._client is not None or bool(self.settings.openai_api_key)

    def chat(
        self,
        *,
        use_case: str,
        messages: List[Dict[str, str]],
        temperature: Optional[float] = None,
        response_format: Optional[Dict[str, Any]] = None,
        prompt_name: Optional[str] = None,
        prompt_text: Optional[str] = None,
    ) -> Any:
        """Raw chat completion routed by ``config.llm_routes``. Raises on provider errors."""
        route = route_for(use_case, self.settings)
        provider = route.get("provider", "openai")
        model = route["model"]
        op = route.get("operation", "chat")
        temp = temperature if temperature is not None else route.get("temperature")

        if provider != "openai":
            raise NotImplementedError(f"Provider not implemented: {provider}")

        kwargs: Dict[str, Any] = {"model": model, "messages": messages}
        # Only pass temperature if explicitly provided (some models only accept default)
        if temp is not None:
            kwargs["temperature"] = temp
        if response_format is not None:
            kwargs["response_format"] = response_format

        t0 = time.monotonic()
        try:
            resp = self._openai().chat.completions.create(**kwargs)
        except OpenAIError as e:
            log_call(
                self.settings,
                caller=f"llm_client.chat:{use_case}",
                provider=provider,
                model=model,
                operation=op,
                use_case=use_case,
                prompt_name=prompt_name,
                prompt_hash=sha256_text(prompt_text),
                duration_ms=int((time.monotonic() - t0) * 1000),
                status="error",
                error=str(e),
            )
            raise

        log_call(
            self.settings,
            caller=f"llm_client.chat:{use_case}",
            provider=provider,
            model=model,
            operation=op,
            use_case=use_case,
            prompt_name=prompt_name,
            prompt_hash=sha256_text(prompt_text),
            duration_ms=int((time.monotonic() - t0) * 1000),
            status="ok",
            usage=_usage_of(resp),
        )
        return resp

    def infer(
        self,
        *,
        use_case: str,
        prompt_template: str,
        variables: Mapping[str, Any],
        output_schema: Type[BaseModel],
        prompt_name: Optional[str] = None,
    ) -> InferenceResult:
        """Render the prompt, request a reply constrained to ``output_schema`` and validate it.

        Never raises: a missing credential, a provider error, an empty or unparsable reply and a
        schema mismatch all come back as ``InferenceResult(success=False, error=...)``.
        """
        if not self.has_credentials():
            logger.warning(
                "Inference skipped: OPENAI_API_KEY missing",
                extra={"op": use_case, "status": "error", "provider": "openai", "error": "credential"},
            )
            return InferenceResult(success=False, error="OPENAI_API_KEY missing")

        prompt = render_prompt(prompt_template, variables)
        route = route_for(use_case, self.settings)
        response_format = {
            "type": "json_schema",
            "json_schema": {
                "name": route.get("schema_name") or use_case,
                "schema": output_schema.model_json_schema(),
                "strict": False,
            },
        }

        t0 = time.monotonic()
        try:
            resp = self.chat(
                use_case=use_case,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                response_format=response_format,
                prompt_name=prompt_name,
                prompt_text=prompt,
            )
        except (OpenAIError, NotImplementedError) as e:
            logger.error(
                "Inference call failed: %s",
                e,
                extra={"op": use_case, "status": "error", "provider": "openai", "error": type(e).__name__},
            )
            return InferenceResult(success=False, error=str(e) or type(e).__name__)
        duration_ms = int((time.monotonic() - t0) * 1000)

        content = _response_text(resp)
        payload = _extract_json(content)
        if payload is None:
            logger.warning(
                "Inference reply was not valid JSON",
                extra={"op": use_case, "status": "error", "duration_ms": duration_ms, "error": "parse"},
            )
            return InferenceResult(success=False, error="Inference reply was not valid JSON")

        try:
            data = output_schema.model_validate(payload)
        except ValidationError as e:
            logger.warning(
                "Inference reply did not match %s: %s",
                output_schema.__name__,
                e.error_count(),
                extra={"op": use_case, "status": "error", "duration_ms": duration_ms, "error": "schema"},
            )
            return InferenceResult(success=False, error=f"Inference reply did not match {output_schema.__name__}")

        logger.info(
            "Inference ok",
            extra={"op": use_case, "status": "ok", "duration_ms": duration_ms, "provider": "openai"},
        )
        return InferenceResult(success=True, data=data)
