"""Shared fixtures for the notification engine test-suite."""

from __future__ import annotations

import os
from concurrent.futures import Executor, Future
from datetime import datetime, time, timezone

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["APP_TIMEZONE"] = "UTC"
for _name in ("OPENAI_API_KEY", "SENDGRID_API_KEY", "SENDGRID_SENDER"):
    os.environ.pop(_name, None)

import pytest

from notification_engine.application.services import ChannelDispatcher, PreferenceCache
from notification_engine.domain.entities import (
    NotificationPreference,
    NotificationRequest,
    PriorityAssessment,
)
from notification_engine.infrastructure.database import (
    build_engine,
    build_session_factory,
    initialize_database,
)
from notification_engine.infrastructure.email import EmailSendResult
from notification_engine.infrastructure.repositories import NotificationPreferenceRepository


def at(hour: int, minute: int = 0, *, day: int = 15) -> datetime:
    """Return an aware UTC instant on a fixed January 2024 day."""

    return datetime(2024, 1, day, hour, minute, tzinfo=timezone.utc)


class FakeClassifier:
    def __init__(self, priority: str = "medium", *, score: float = 0.5) -> None:
        self.assessment = PriorityAssessment(score=score, reason="Fake", priority=priority)
        self.calls: list[NotificationRequest] = []

    def classify(self, request: NotificationRequest) -> PriorityAssessment:
        self.calls.append(request)
        return self.assessment


class RecordingTransport:
    def __init__(self, result: EmailSendResult | None = None, error: Exception | None = None):
        self.result = result or EmailSendResult(success=True)
        self.error = error
        self.sent: list[tuple[str, str, str]] = []

    def send(self, to: str, subject: str, html_content: str) -> EmailSendResult:
        self.sent.append((to, subject, html_content))
        if self.error is not None:
            raise self.error
        return self.result


class ImmediateExecutor(Executor):
    """Run submitted jobs inline so email side effects are observable."""

    def submit(self, fn, /, *args, **kwargs):
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except BaseException as exc:
            future.set_exception(exc)
        return future


@pytest.fixture()
def engine():
    engine = build_engine("sqlite://")
    initialize_database(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture()
def session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture()
def recipients() -> dict[str, str]:
    return {"user-1": "user1@example.com"}


@pytest.fixture()
def dispatcher(transport: RecordingTransport, recipients: dict[str, str]) -> ChannelDispatcher:
    return ChannelDispatcher(
        email_transport=transport,
        recipient_lookup=recipients.get,
        executor=ImmediateExecutor(),
        brand="Test Center",
    )


@pytest.fixture()
def preference_cache() -> PreferenceCache:
    return PreferenceCache(ttl_seconds=60)


@pytest.fixture()
def save_preferences(session):
    """Persist preferences for ``user_id`` overriding the given fields."""

    def _save(user_id: str = "user-1", **overrides) -> NotificationPreference:
        preference = NotificationPreference.defaults_for(user_id)
        for name, value in overrides.items():
            setattr(preference, name, value)
        return NotificationPreferenceRepository(session).save(preference)

    return _save


@pytest.fixture()
def night_quiet_hours(save_preferences):
    return save_preferences(quiet_hours_start=time(22, 0), quiet_hours_end=time(8, 0))


def make_request(**overrides) -> NotificationRequest:
    values = {
        "user_id": "user-1",
        "organization_id": "org-1",
        "type": "task_assigned",
        "title": "New task",
        "message": "You have been assigned a task",
    }
    values.update(overrides)
    return NotificationRequest(**values)
