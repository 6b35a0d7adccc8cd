"""Tests for the priority classifiers and the provider reply parser."""

from __future__ import annotations

import json
import types

import pytest

from notification_engine.application.services import (
    ProviderPriorityClassifier,
    RuleBasedPriorityClassifier,
    build_priority_classifier,
)
from notification_engine.application.services.priority_classifier import (
    PriorityParseError,
    build_priority_prompt,
    parse_priority_assessment,
)
from notification_engine.domain.entities import PriorityAssessment
from notification_engine.infrastructure.openai_client import OpenAIServiceError

from conftest import make_request


class StubProvider:
    def __init__(self, reply: str | None = None, error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[dict] = []

    def complete(self, system_prompt, user_prompt, *, json_schema=None, schema_name="response"):
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "json_schema": json_schema,
                "schema_name": schema_name,
            }
        )
        if self.error is not None:
            raise self.error
        return self.reply


def test_parse_valid_reply() -> None:
    reply = json.dumps({"score": 0.92, "reason": "Deadline in one hour", "priority": "urgent"})

    assessment = parse_priority_assessment(reply)

    assert assessment == PriorityAssessment(0.92, "Deadline in one hour", "urgent")


def test_parse_clamps_score_and_normalises_priority() -> None:
    reply = json.dumps({"score": 1.7, "reason": " Very late ", "priority": " HIGH "})

    assessment = parse_priority_assessment(reply)

    assert assessment.score == 1.0
    assert assessment.reason == "Very late"
    assert assessment.priority == "high"


def test_parse_accepts_code_fences_and_trailing_commas() -> None:
    reply = '```json\n{"score": -0.3, "reason": "Nothing to do", "priority": "low",}\n```'

    assessment = parse_priority_assessment(reply)

    assert assessment.score == 0.0
    assert assessment.priority == "low"


@pytest.mark.parametrize(
    "reply",
    [
        "not json at all",
        "[1, 2, 3]",
        json.dumps({"score": 0.5, "reason": "x"}),
        json.dumps({"score": 0.5, "reason": "x", "priority": "medium", "extra": 1}),
        json.dumps({"score": "0.5", "reason": "x", "priority": "medium"}),
        json.dumps({"score": True, "reason": "x", "priority": "medium"}),
        json.dumps({"score": 0.5, "reason": "  ", "priority": "medium"}),
        json.dumps({"score": 0.5, "reason": "x", "priority": "critical"}),
    ],
)
def test_parse_rejects_invalid_replies(reply: str) -> None:
    with pytest.raises(PriorityParseError):
        parse_priority_assessment(reply)


def test_prompt_describes_the_request() -> None:
    prompt = build_priority_prompt(make_request(title="Server down", message="Prod is offline"))

    assert "Type: task_assigned" in prompt
    assert "Title: Server down" in prompt
    assert "Message: Prod is offline" in prompt


def test_provider_classifier_requests_strict_schema() -> None:
    provider = StubProvider(json.dumps({"score": 0.3, "reason": "FYI", "priority": "low"}))

    assessment = ProviderPriorityClassifier(provider).classify(make_request())

    assert assessment.priority == "low"
    call = provider.calls[0]
    assert call["schema_name"] == "priority_assessment"
    assert call["json_schema"]["required"] == ["score", "reason", "priority"]
    assert call["json_schema"]["additionalProperties"] is False


@pytest.mark.parametrize(
    "provider",
    [
        StubProvider(error=OpenAIServiceError("timeout")),
        StubProvider(error=ConnectionError("network down")),
        StubProvider(reply="I think this is important"),
        StubProvider(reply=json.dumps({"score": 0.9, "reason": "x", "priority": "extreme"})),
    ],
)
def test_provider_failures_fall_back_deterministically(provider: StubProvider, caplog) -> None:
    classifier = ProviderPriorityClassifier(provider)

    with caplog.at_level("WARNING"):
        first = classifier.classify(make_request())
        second = classifier.classify(make_request())

    assert first == second == PriorityAssessment(0.5, "Default priority", "medium")
    assert "AI prioritization failed" in caplog.text


@pytest.mark.parametrize(
    ("overrides", "expected"),
    [
        ({"title": "URGENT: payment failed"}, "urgent"),
        ({"message": "The report deadline is today"}, "high"),
        ({"priority": "urgent"}, "urgent"),
        ({"message": "FYI the office is closed"}, "low"),
        ({"type": "document_shared"}, "low"),
        ({"type": "system_alert"}, "high"),
        ({}, "medium"),
    ],
)
def test_rule_based_classifier(overrides: dict, expected: str) -> None:
    assessment = RuleBasedPriorityClassifier().classify(make_request(**overrides))

    assert assessment.priority == expected
    assert 0.0 <= assessment.score <= 1.0
    assert assessment.reason


def test_build_classifier_without_api_key_is_rule_based() -> None:
    settings = types.SimpleNamespace(openai_api_key=None)

    assert isinstance(build_priority_classifier(settings), RuleBasedPriorityClassifier)


def test_build_classifier_with_api_key_uses_provider() -> None:
    settings = types.SimpleNamespace(
        openai_api_key="sk-test",
        openai_base_url=None,
        openai_model="gpt-4o-mini",
        openai_temperature=0.0,
        classifier_timeout_seconds=2.0,
    )

    assert isinstance(build_priority_classifier(settings), ProviderPriorityClassifier)
