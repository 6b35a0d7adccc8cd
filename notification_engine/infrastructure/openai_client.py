"""Text-completion client backed by the OpenAI API."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from typing import Any

from openai import OpenAI, OpenAIError

from notification_engine.config import Settings, get_settings

logger = logging.getLogger(__name__)

_CODE_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*(?P<body>.*?)\s*```$", re.DOTALL | re.IGNORECASE)


def _strip_code_fences(text: str) -> str:
    """Remove Markdown code fences wrapping a JSON payload."""

    stripped = text.strip()
    match = _CODE_FENCE_PATTERN.match(stripped)
    if match:
        return match.group("body").strip()
    return stripped


def _remove_trailing_commas(text: str) -> str:
    return re.sub(r",(\s*[}\]])", r"\1", text)


def decode_json_object(text: str) -> dict[str, Any]:
    """Decode ``text`` into a JSON object tolerating code fences and trailing commas."""

    json_text = text
    try:
        payload = json.loads(json_text)
    except json.JSONDecodeError:
        json_text = _strip_code_fences(json_text)
        try:
            payload = json.loads(json_text)
        except json.JSONDecodeError:
            json_text = _remove_trailing_commas(json_text)
            try:
                payload = json.loads(json_text)
            except json.JSONDecodeError as exc:
                logger.error("Could not decode provider response: %s", json_text)
                raise OpenAIServiceError("Provider response is not valid JSON.") from exc

    if not isinstance(payload, dict):
        raise OpenAIServiceError("Provider response must be a JSON object.")
    return payload


class OpenAIConfigurationError(RuntimeError):
    """Raised when the provider credentials are missing."""


class OpenAIServiceError(RuntimeError):
    """Raised when the OpenAI API does not answer as expected."""


class ChatCompletionService:
    """Send a system instruction plus a user prompt and return the raw reply text."""

    def __init__(self, settings: Settings | None = None, *, client: Any | None = None) -> None:
        settings = settings or get_settings()

        api_key = (settings.openai_api_key or "").strip()
        if client is None and not api_key:
            raise OpenAIConfigurationError(
                "OPENAI_API_KEY is not defined in the environment.",
            )

        if client is None:
            client_kwargs: dict[str, Any] = {
                "api_key": api_key,
                # Classification must never stall a notification request.
                "timeout": settings.classifier_timeout_seconds,
                "max_retries": 0,
            }
            base_url = (settings.openai_base_url or "").strip()
            if base_url:
                client_kwargs["base_url"] = base_url
            client = OpenAI(**client_kwargs)

        self._client = client
        self._model = (settings.openai_model or "gpt-4o-mini").strip() or "gpt-4o-mini"
        self._temperature = float(settings.openai_temperature)

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        json_schema: Mapping[str, Any] | None = None,
        schema_name: str = "response",
    ) -> str:
        """Return the text produced for ``user_prompt`` under ``system_prompt``."""

        messages = [
            {"role": "system", "content": [{"type": "input_text", "text": system_prompt}]},
            {"role": "user", "content": [{"type": "input_text", "text": user_prompt}]},
        ]

        request_kwargs: dict[str, Any] = {
            "model": self._model,
            "input": messages,
            "temperature": self._temperature,
        }
        if json_schema is not None:
            request_kwargs["text"] = {
                "format": {
                    "type": "json_schema",
                    "name": schema_name,
                    "strict": True,
                    "schema": dict(json_schema),
                }
            }

        try:
            resp = self._client.responses.create(**request_kwargs)
        except OpenAIError as exc:
            raise OpenAIServiceError("The request to OpenAI failed.") from exc

        text = getattr(resp, "output_text", None)
        if not text:
            try:
                text = resp.output[0].content[0].text
            except (AttributeError, IndexError, TypeError) as exc:
                raise OpenAIServiceError("The OpenAI response contains no usable text.") from exc

        logger.debug("Raw model response: %s", text)
        return text


__all__ = [
    "ChatCompletionService",
    "OpenAIConfigurationError",
    "OpenAIServiceError",
    "decode_json_object",
]
