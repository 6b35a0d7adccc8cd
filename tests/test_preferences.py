"""Tests for preference resolution, updates and the TTL cache."""

from __future__ import annotations

from datetime import time

import pytest
from sqlalchemy.exc import OperationalError

from notification_engine.application.services import PreferenceCache
from notification_engine.application.use_cases.preferences import (
    PreferenceResolver,
    create_default_preferences,
    get_preferences,
    update_preferences,
)
from notification_engine.domain.entities import (
    NotFound,
    NotificationPreference,
    Ok,
    TransientError,
)
from notification_engine.infrastructure.repositories import NotificationPreferenceRepository


class FakeClock:
    def __init__(self) -> None:
        self.value = 0.0

    def __call__(self) -> float:
        return self.value


def test_cache_expires_entries_after_ttl() -> None:
    clock = FakeClock()
    cache = PreferenceCache(ttl_seconds=30, clock=clock)
    cache.put(NotificationPreference.defaults_for("user-1"))

    clock.value = 29.9
    assert cache.get("user-1") is not None

    clock.value = 30.0
    assert cache.get("user-1") is None


def test_cache_returns_copies() -> None:
    cache = PreferenceCache()
    cache.put(NotificationPreference.defaults_for("user-1"))

    cached = cache.get("user-1")
    cached.type_toggles["task_due"] = False

    assert cache.get("user-1").type_toggles["task_due"] is True


def test_cache_is_bounded() -> None:
    clock = FakeClock()
    cache = PreferenceCache(ttl_seconds=30, max_entries=2, clock=clock)
    for index, user_id in enumerate(("a", "b", "c")):
        clock.value = float(index)
        cache.put(NotificationPreference.defaults_for(user_id))

    assert cache.get("a") is None
    assert cache.get("b") is not None
    assert cache.get("c") is not None


def test_cache_disabled_with_zero_ttl() -> None:
    cache = PreferenceCache(ttl_seconds=0)
    cache.put(NotificationPreference.defaults_for("user-1"))

    assert cache.get("user-1") is None


def test_resolve_reports_missing_preferences(session) -> None:
    assert isinstance(PreferenceResolver(session).resolve("nobody"), NotFound)


def test_resolve_or_default_returns_system_defaults(session) -> None:
    preference = get_preferences(session, "nobody")

    assert preference.user_id == "nobody"
    assert preference.enable_in_app is True
    assert preference.enable_email is True
    assert preference.enable_ai_prioritization is True
    assert preference.quiet_hours_start is None
    assert preference.digest_time == time(9, 0)
    assert all(preference.type_toggles.values())


def test_resolve_reports_transient_error(session, monkeypatch) -> None:
    def _boom(self, user_id):
        raise OperationalError("SELECT", {}, Exception("database is down"))

    monkeypatch.setattr(NotificationPreferenceRepository, "get", _boom)

    result = PreferenceResolver(session).resolve("user-1")

    assert isinstance(result, TransientError)
    assert get_preferences(session, "user-1") == NotificationPreference.defaults_for("user-1")


def test_resolve_uses_cache(session, save_preferences, monkeypatch) -> None:
    save_preferences(enable_email=False)
    cache = PreferenceCache()
    resolver = PreferenceResolver(session, cache)
    assert isinstance(resolver.resolve("user-1"), Ok)

    def _fail(self, user_id):
        raise AssertionError("repository should not be queried")

    monkeypatch.setattr(NotificationPreferenceRepository, "get", _fail)

    result = resolver.resolve("user-1")
    assert isinstance(result, Ok)
    assert result.value.enable_email is False


def test_create_default_preferences_is_idempotent(session) -> None:
    first = create_default_preferences(session, "user-1")
    update_preferences(session, "user-1", {"enable_email": False})
    second = create_default_preferences(session, "user-1")

    assert first.enable_email is True
    assert second.enable_email is False


def test_update_preferences_merges_toggles_and_parses_times(session) -> None:
    updated = update_preferences(
        session,
        "user-1",
        {
            "type_toggles": {"document_shared": False, "custom_type": False},
            "quiet_hours_start": "22:00",
            "quiet_hours_end": time(8, 0),
            "digest_frequency": "weekly",
        },
    )

    assert updated.type_toggles["document_shared"] is False
    assert updated.type_toggles["custom_type"] is False
    assert updated.type_toggles["task_due"] is True
    assert updated.quiet_hours_start == time(22, 0)
    assert updated.quiet_hours_end == time(8, 0)
    assert updated.digest_frequency == "weekly"
    assert get_preferences(session, "user-1") == updated


@pytest.mark.parametrize(
    "changes",
    [
        {"unknown": True},
        {"enable_email": "yes"},
        {"quiet_hours_start": "25:99"},
        {"digest_frequency": "hourly"},
        {"digest_time": None},
        {"type_toggles": {"task_due": "off"}},
        {"type_toggles": ["task_due"]},
    ],
)
def test_update_preferences_rejects_invalid_changes(session, changes) -> None:
    with pytest.raises(ValueError):
        update_preferences(session, "user-1", changes)


def test_update_preferences_invalidates_cache(session) -> None:
    cache = PreferenceCache(ttl_seconds=300)
    resolver = PreferenceResolver(session, cache)
    create_default_preferences(session, "user-1")
    assert resolver.resolve_or_default("user-1").quiet_hours_start is None

    update_preferences(
        session,
        "user-1",
        {"quiet_hours_start": "22:00", "quiet_hours_end": "08:00"},
        cache=cache,
    )

    assert resolver.resolve_or_default("user-1").quiet_hours_start == time(22, 0)


def test_write_during_read_does_not_repopulate_cache(
    session, save_preferences, monkeypatch
) -> None:
    save_preferences()
    cache = PreferenceCache(ttl_seconds=300)
    original_get = NotificationPreferenceRepository.get
    interleaved: list[bool] = []

    def _get_then_concurrent_write(self, user_id):
        loaded = original_get(self, user_id)
        if not interleaved:
            interleaved.append(True)
            update_preferences(
                session, user_id, {"type_toggles": {"task_assigned": False}}, cache=cache
            )
        return loaded

    monkeypatch.setattr(NotificationPreferenceRepository, "get", _get_then_concurrent_write)

    stale = PreferenceResolver(session, cache).resolve("user-1")

    assert stale.value.type_toggles["task_assigned"] is True
    assert cache.get("user-1") is None
    monkeypatch.setattr(NotificationPreferenceRepository, "get", original_get)
    fresh = PreferenceResolver(session, cache).resolve_or_default("user-1")
    assert fresh.type_toggles["task_assigned"] is False


def test_put_ignores_stale_generation() -> None:
    cache = PreferenceCache()
    token = cache.generation("user-1")
    cache.invalidate("user-1")

    assert cache.put(NotificationPreference.defaults_for("user-1"), generation=token) is False
    assert cache.get("user-1") is None

    token = cache.generation("user-1")
    assert cache.put(NotificationPreference.defaults_for("user-1"), generation=token) is True


def test_clear_invalidates_outstanding_generations() -> None:
    cache = PreferenceCache()
    token = cache.generation("user-1")
    cache.clear()

    assert cache.put(NotificationPreference.defaults_for("user-1"), generation=token) is False


def test_resolved_value_does_not_alias_cache_entry(session, save_preferences) -> None:
    save_preferences()
    cache = PreferenceCache()

    resolved = PreferenceResolver(session, cache).resolve("user-1").value
    resolved.type_toggles["task_due"] = False
    resolved.enable_email = False

    cached = cache.get("user-1")
    assert cached.type_toggles["task_due"] is True
    assert cached.enable_email is True
