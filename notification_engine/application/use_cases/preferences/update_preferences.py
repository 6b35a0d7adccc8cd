"""Use cases for writing notification preferences."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from sqlalchemy.orm import Session

from notification_engine.application.services import PreferenceCache
from notification_engine.domain.entities import (
    DIGEST_FREQUENCIES,
    NotificationPreference,
)
from notification_engine.infrastructure.repositories import NotificationPreferenceRepository
from notification_engine.utils import parse_time_of_day

_BOOLEAN_FIELDS: frozenset[str] = frozenset(
    {
        "enable_in_app",
        "enable_email",
        "enable_realtime",
        "enable_ai_prioritization",
        "digest_enabled",
    }
)
_TIME_FIELDS: frozenset[str] = frozenset({"quiet_hours_start", "quiet_hours_end", "digest_time"})
_UPDATABLE_FIELDS: frozenset[str] = _BOOLEAN_FIELDS | _TIME_FIELDS | {
    "type_toggles",
    "digest_frequency",
}


def create_default_preferences(
    session: Session, user_id: str, *, cache: PreferenceCache | None = None
) -> NotificationPreference:
    """Persist the default preferences for a newly created user."""

    repository = NotificationPreferenceRepository(session)
    existing = repository.get(user_id)
    if existing is not None:
        return existing

    saved = repository.save(NotificationPreference.defaults_for(user_id))
    if cache is not None:
        cache.invalidate(user_id)
    return saved


def update_preferences(
    session: Session,
    user_id: str,
    changes: Mapping[str, Any],
    *,
    cache: PreferenceCache | None = None,
) -> NotificationPreference:
    """Apply a partial update and invalidate the cached copy synchronously."""

    unknown = set(changes) - _UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Unknown preference fields: {', '.join(sorted(unknown))}")

    repository = NotificationPreferenceRepository(session)
    current = repository.get(user_id) or NotificationPreference.defaults_for(user_id)

    values: dict[str, Any] = {}
    for name, value in changes.items():
        if name in _BOOLEAN_FIELDS:
            if not isinstance(value, bool):
                raise ValueError(f"'{name}' must be a boolean")
            values[name] = value
        elif name in _TIME_FIELDS:
            parsed = parse_time_of_day(value)
            if parsed is None and name == "digest_time":
                raise ValueError("'digest_time' cannot be empty")
            values[name] = parsed
        elif name == "digest_frequency":
            if value not in DIGEST_FREQUENCIES:
                raise ValueError(
                    f"'digest_frequency' must be one of: {', '.join(DIGEST_FREQUENCIES)}"
                )
            values[name] = value
        elif name == "type_toggles":
            values[name] = _merge_type_toggles(current.type_toggles, value)

    saved = repository.save(replace(current, **values))
    if cache is not None:
        cache.invalidate(user_id)
    return saved


def _merge_type_toggles(current: Mapping[str, bool], changes: Any) -> dict[str, bool]:
    if not isinstance(changes, Mapping):
        raise ValueError("'type_toggles' must be a mapping of notification type to boolean")
    merged = dict(current)
    for notification_type, enabled in changes.items():
        if not isinstance(enabled, bool):
            raise ValueError(f"Toggle for '{notification_type}' must be a boolean")
        merged[str(notification_type)] = enabled
    return merged


__all__ = ["create_default_preferences", "update_preferences"]
