"""Priority classification for candidate notifications.

Two implementations share the :class:`PriorityClassifier` capability:

* :class:`ProviderPriorityClassifier` asks a text-completion provider for a
  strict JSON assessment and falls back to a fixed medium priority whenever the
  provider fails or answers with anything else.
* :class:`RuleBasedPriorityClassifier` scores notifications with keyword rules
  and never touches the network.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Any, Protocol

from notification_engine.config import Settings, get_settings
from notification_engine.domain.entities import (
    NOTIFICATION_PRIORITIES,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
    PRIORITY_URGENT,
    NotificationRequest,
    PriorityAssessment,
    default_priority_for,
)
from notification_engine.infrastructure.openai_client import (
    ChatCompletionService,
    decode_json_object,
)
from notification_engine.schemas import load_priority_assessment_schema

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a notification prioritization AI. "
    "Analyze notifications and determine urgency accurately."
)

_EXPECTED_FIELDS = frozenset({"score", "reason", "priority"})

_SCORE_BY_PRIORITY: dict[str, float] = {
    PRIORITY_LOW: 0.2,
    PRIORITY_MEDIUM: 0.5,
    PRIORITY_HIGH: 0.75,
    PRIORITY_URGENT: 0.95,
}

_URGENT_KEYWORDS: tuple[str, ...] = (
    "urgent",
    "asap",
    "immediately",
    "overdue",
    "critical",
    "outage",
    "security alert",
    "final notice",
)
_HIGH_KEYWORDS: tuple[str, ...] = (
    "deadline",
    "due today",
    "due soon",
    "due tomorrow",
    "action required",
    "important",
    "expires",
    "starts in",
)
_LOW_KEYWORDS: tuple[str, ...] = (
    "fyi",
    "newsletter",
    "no action needed",
    "tip",
    "suggestion",
)


class PriorityClassifier(Protocol):
    """Capability that assigns an urgency level to a notification request."""

    def classify(self, request: NotificationRequest) -> PriorityAssessment:
        ...


class TextCompletionProvider(Protocol):
    """Black-box completion call returning the raw reply text."""

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        json_schema: Mapping[str, Any] | None = None,
        schema_name: str = "response",
    ) -> str:
        ...


class PriorityParseError(ValueError):
    """Raised when a provider reply is not a valid priority assessment."""


def build_priority_prompt(request: NotificationRequest) -> str:
    """Return the user prompt describing ``request`` to the provider."""

    return (
        "Analyze this notification and determine its urgency:\n\n"
        f"Type: {request.type}\n"
        f"Title: {request.title}\n"
        f"Message: {request.message}\n\n"
        "Consider:\n"
        "1. Time sensitivity (is there a deadline?)\n"
        "2. Impact (how important is this to the user?)\n"
        "3. Context (related to ongoing work?)\n"
        "4. Actionability (requires immediate action?)\n\n"
        "Respond with a JSON object containing exactly these fields:\n"
        "{\n"
        '  "score": 0.0-1.0,\n'
        '  "reason": "Brief explanation",\n'
        '  "priority": "low|medium|high|urgent"\n'
        "}"
    )


def parse_priority_assessment(text: str) -> PriorityAssessment:
    """Parse a provider reply, clamping the score and normalising the level."""

    try:
        payload = decode_json_object(text)
    except RuntimeError as exc:
        raise PriorityParseError(str(exc)) from exc

    fields = set(payload)
    if fields != _EXPECTED_FIELDS:
        raise PriorityParseError(
            f"Expected fields {sorted(_EXPECTED_FIELDS)}, received {sorted(fields)}"
        )

    score = payload["score"]
    if isinstance(score, bool) or not isinstance(score, (int, float)) or math.isnan(score):
        raise PriorityParseError("'score' must be a number")

    reason = payload["reason"]
    if not isinstance(reason, str) or not reason.strip():
        raise PriorityParseError("'reason' must be a non-empty string")

    priority = payload["priority"]
    if not isinstance(priority, str):
        raise PriorityParseError("'priority' must be a string")
    priority = priority.strip().lower()
    if priority not in NOTIFICATION_PRIORITIES:
        raise PriorityParseError(f"Unknown priority {payload['priority']!r}")

    return PriorityAssessment(
        score=max(0.0, min(1.0, float(score))),
        reason=reason.strip(),
        priority=priority,
    )


class ProviderPriorityClassifier:
    """Classify notifications through a text-completion provider."""

    def __init__(self, provider: TextCompletionProvider) -> None:
        self._provider = provider

    def classify(self, request: NotificationRequest) -> PriorityAssessment:
        try:
            reply = self._provider.complete(
                SYSTEM_PROMPT,
                build_priority_prompt(request),
                json_schema=load_priority_assessment_schema(),
                schema_name="priority_assessment",
            )
            return parse_priority_assessment(reply)
        except Exception as exc:
            # Delivery must never depend on the provider being available.
            logger.warning(
                "AI prioritization failed for %s notification; using default priority: %s",
                request.type,
                exc,
            )
            return PriorityAssessment.fallback()


class RuleBasedPriorityClassifier:
    """Deterministic keyword classifier used without a configured provider."""

    def classify(self, request: NotificationRequest) -> PriorityAssessment:
        text = f"{request.title} {request.message}".lower()

        keyword = _first_match(text, _URGENT_KEYWORDS)
        if keyword:
            return _assessment(PRIORITY_URGENT, f"Mentions '{keyword}'")

        keyword = _first_match(text, _HIGH_KEYWORDS)
        if keyword:
            return _assessment(PRIORITY_HIGH, f"Mentions '{keyword}'")

        if request.priority in NOTIFICATION_PRIORITIES:
            return _assessment(request.priority, "Priority provided by the producer")

        keyword = _first_match(text, _LOW_KEYWORDS)
        if keyword:
            return _assessment(PRIORITY_LOW, f"Mentions '{keyword}'")

        priority = default_priority_for(request.type)
        return _assessment(priority, f"Default priority for {request.type} notifications")


def _first_match(text: str, keywords: tuple[str, ...]) -> str | None:
    for keyword in keywords:
        if keyword in text:
            return keyword
    return None


def _assessment(priority: str, reason: str) -> PriorityAssessment:
    return PriorityAssessment(
        score=_SCORE_BY_PRIORITY[priority], reason=reason, priority=priority
    )


def build_priority_classifier(settings: Settings | None = None) -> PriorityClassifier:
    """Return the provider-backed classifier when credentials exist."""

    settings = settings or get_settings()
    if (settings.openai_api_key or "").strip():
        return ProviderPriorityClassifier(ChatCompletionService(settings))
    logger.info("OPENAI_API_KEY not configured; using rule-based prioritization")
    return RuleBasedPriorityClassifier()


__all__ = [
    "PriorityClassifier",
    "PriorityParseError",
    "ProviderPriorityClassifier",
    "RuleBasedPriorityClassifier",
    "SYSTEM_PROMPT",
    "TextCompletionProvider",
    "build_priority_classifier",
    "build_priority_prompt",
    "parse_priority_assessment",
]
