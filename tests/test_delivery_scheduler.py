"""Tests for the delivery scheduler and the channel dispatcher."""

from __future__ import annotations

from datetime import time

import pytest
from sqlalchemy.exc import OperationalError

from notification_engine.application.services import ChannelDispatcher, PreferenceCache
from notification_engine.application.use_cases.notifications import (
    NotificationPersistenceError,
    create_notification,
)
from notification_engine.domain.entities import (
    Delivered,
    Notification,
    NotificationPreference,
    Snoozed,
    Suppressed,
)
from notification_engine.infrastructure.email import EmailSendResult
from notification_engine.infrastructure.models import NotificationModel
from notification_engine.infrastructure.repositories import NotificationRepository

from conftest import FakeClassifier, ImmediateExecutor, RecordingTransport, at, make_request


def _schedule(session, dispatcher, classifier, *, now, cache=None, **request):
    return create_notification(
        session,
        make_request(**request),
        classifier=classifier,
        dispatcher=dispatcher,
        preference_cache=cache,
        clock=lambda: now,
    )


def _stored(session) -> list[NotificationModel]:
    return session.query(NotificationModel).all()


def test_disabled_type_is_suppressed_without_classifying(
    session, dispatcher, transport, save_preferences
) -> None:
    save_preferences(
        type_toggles={"task_assigned": False},
        quiet_hours_start=time(22, 0),
        quiet_hours_end=time(8, 0),
    )
    classifier = FakeClassifier("urgent")

    outcome = _schedule(session, dispatcher, classifier, now=at(23))

    assert outcome == Suppressed("disabled")
    assert classifier.calls == []
    assert _stored(session) == []
    assert transport.sent == []


def test_urgent_notification_bypasses_quiet_hours_and_emails(
    session, dispatcher, transport, night_quiet_hours
) -> None:
    outcome = _schedule(
        session,
        dispatcher,
        FakeClassifier("urgent", score=0.95),
        now=at(23),
        title="Task overdue",
    )

    assert isinstance(outcome, Delivered)
    assert outcome.notification.priority == "urgent"
    assert outcome.notification.delivered_at == at(23)
    assert outcome.notification.snoozed_until is None
    assert outcome.notification.ai_priority_score == 0.95
    assert outcome.notification.ai_urgency_reason == "Fake"
    assert [(to, subject) for to, subject, _ in transport.sent] == [
        ("user1@example.com", "Task overdue")
    ]


def test_non_urgent_notification_is_deferred_during_quiet_hours(
    session, dispatcher, transport, night_quiet_hours
) -> None:
    outcome = _schedule(session, dispatcher, FakeClassifier("high"), now=at(23))

    assert isinstance(outcome, Snoozed)
    assert outcome.until == at(8, 0, day=16)
    assert outcome.notification.delivered_at is None
    assert outcome.notification.snoozed_until == at(8, 0, day=16)
    assert transport.sent == []


def test_after_midnight_deferral_ends_the_same_day(
    session, dispatcher, night_quiet_hours
) -> None:
    outcome = _schedule(session, dispatcher, FakeClassifier("low"), now=at(2, 30))

    assert isinstance(outcome, Snoozed)
    assert outcome.until == at(8, 0)


def test_outside_quiet_hours_is_delivered_in_app_only(
    session, dispatcher, transport, night_quiet_hours
) -> None:
    outcome = _schedule(session, dispatcher, FakeClassifier("high"), now=at(12))

    assert isinstance(outcome, Delivered)
    assert outcome.notification.id is not None
    assert transport.sent == []
    assert len(_stored(session)) == 1


def test_classifier_is_skipped_when_ai_prioritization_is_off(
    session, dispatcher, save_preferences
) -> None:
    save_preferences(enable_ai_prioritization=False)
    classifier = FakeClassifier("urgent")

    hinted = _schedule(session, dispatcher, classifier, now=at(12), priority="high")
    default = _schedule(session, dispatcher, classifier, now=at(12), type="system_alert")
    unknown = _schedule(session, dispatcher, classifier, now=at(12), priority="bogus")

    assert classifier.calls == []
    assert hinted.notification.priority == "high"
    assert default.notification.priority == "high"
    assert unknown.notification.priority == "medium"
    assert hinted.notification.ai_priority_score is None


def test_classifier_priority_overrides_producer_hint(session, dispatcher) -> None:
    classifier = FakeClassifier("low", score=0.1)

    outcome = _schedule(session, dispatcher, classifier, now=at(12), priority="urgent")

    assert len(classifier.calls) == 1
    assert outcome.notification.priority == "low"


def test_missing_preferences_use_defaults(session, dispatcher, transport) -> None:
    outcome = _schedule(session, dispatcher, FakeClassifier("urgent"), now=at(3))

    assert isinstance(outcome, Delivered)
    assert len(transport.sent) == 1


def test_email_disabled_keeps_urgent_in_app(
    session, dispatcher, transport, save_preferences
) -> None:
    save_preferences(enable_email=False)

    outcome = _schedule(session, dispatcher, FakeClassifier("urgent"), now=at(12))

    assert isinstance(outcome, Delivered)
    assert transport.sent == []


def test_cached_preferences_are_used_until_invalidated(
    session, dispatcher, save_preferences
) -> None:
    cache = PreferenceCache(ttl_seconds=300)
    save_preferences()
    _schedule(session, dispatcher, FakeClassifier(), now=at(23), cache=cache)
    save_preferences(type_toggles={"task_assigned": False})

    stale = _schedule(session, dispatcher, FakeClassifier(), now=at(23), cache=cache)
    cache.invalidate("user-1")
    fresh = _schedule(session, dispatcher, FakeClassifier(), now=at(23), cache=cache)

    assert isinstance(stale, Delivered)
    assert fresh == Suppressed("disabled")


def test_persistence_failure_is_reported(session, dispatcher, transport, monkeypatch) -> None:
    def _boom(self, notification):
        raise OperationalError("INSERT", {}, Exception("database is down"))

    monkeypatch.setattr(NotificationRepository, "create", _boom)

    with pytest.raises(NotificationPersistenceError):
        _schedule(session, dispatcher, FakeClassifier("urgent"), now=at(12))
    assert transport.sent == []


def _notification(priority: str = "urgent") -> Notification:
    return Notification(
        id=7,
        user_id="user-1",
        organization_id="org-1",
        type="system_alert",
        priority=priority,
        title="Disk <full>",
        message="Storage at 99% & rising",
        action_url="/dashboard/settings",
    )


def test_dispatcher_logs_transport_failures(caplog) -> None:
    transport = RecordingTransport(error=ConnectionError("smtp unreachable"))
    dispatcher = ChannelDispatcher(
        email_transport=transport,
        recipient_lookup=lambda user_id: "user1@example.com",
        executor=ImmediateExecutor(),
        brand="Test",
    )

    with caplog.at_level("ERROR"):
        dispatcher.dispatch(_notification(), NotificationPreference.defaults_for("user-1"))

    assert len(transport.sent) == 1
    assert "Error sending email notification 7" in caplog.text


def test_dispatcher_logs_unsuccessful_results(caplog) -> None:
    transport = RecordingTransport(result=EmailSendResult(success=False, error="status 403"))
    dispatcher = ChannelDispatcher(
        email_transport=transport,
        recipient_lookup=lambda user_id: "user1@example.com",
        executor=ImmediateExecutor(),
        brand="Test",
    )

    with caplog.at_level("ERROR"):
        dispatcher.dispatch(_notification(), NotificationPreference.defaults_for("user-1"))

    assert "status 403" in caplog.text


def test_dispatcher_skips_users_without_email(caplog) -> None:
    transport = RecordingTransport()
    dispatcher = ChannelDispatcher(
        email_transport=transport,
        recipient_lookup=lambda user_id: None,
        executor=ImmediateExecutor(),
        brand="Test",
    )

    with caplog.at_level("WARNING"):
        dispatcher.dispatch(_notification(), NotificationPreference.defaults_for("user-1"))

    assert transport.sent == []
    assert "No email found for user: user-1" in caplog.text


def test_dispatcher_escapes_email_body() -> None:
    transport = RecordingTransport()
    dispatcher = ChannelDispatcher(
        email_transport=transport,
        recipient_lookup=lambda user_id: "user1@example.com",
        executor=ImmediateExecutor(),
        brand="Test",
    )

    dispatcher.dispatch(_notification(), NotificationPreference.defaults_for("user-1"))

    _, _, body = transport.sent[0]
    assert "Disk &lt;full&gt;" in body
    assert "99% &amp; rising" in body
    assert 'href="/dashboard/settings"' in body


def test_dispatcher_ignores_non_urgent() -> None:
    transport = RecordingTransport()
    dispatcher = ChannelDispatcher(
        email_transport=transport,
        recipient_lookup=lambda user_id: "user1@example.com",
        executor=ImmediateExecutor(),
        brand="Test",
    )

    dispatcher.dispatch(_notification("high"), NotificationPreference.defaults_for("user-1"))

    assert transport.sent == []
