"""Pydantic models describing notification preference payloads."""

from __future__ import annotations

from datetime import datetime, time
from typing import Literal

from pydantic import BaseModel, Field

from notification_engine.domain.entities import NotificationPreference


class PreferenceRead(BaseModel):
    """Effective preferences of the authenticated user."""

    user_id: str
    type_toggles: dict[str, bool] = Field(default_factory=dict)
    enable_in_app: bool
    enable_email: bool
    enable_realtime: bool
    enable_ai_prioritization: bool
    quiet_hours_start: time | None = None
    quiet_hours_end: time | None = None
    digest_enabled: bool
    digest_frequency: str
    digest_time: time
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, preference: NotificationPreference) -> "PreferenceRead":
        return cls(
            user_id=preference.user_id,
            type_toggles=dict(preference.type_toggles),
            enable_in_app=preference.enable_in_app,
            enable_email=preference.enable_email,
            enable_realtime=preference.enable_realtime,
            enable_ai_prioritization=preference.enable_ai_prioritization,
            quiet_hours_start=preference.quiet_hours_start,
            quiet_hours_end=preference.quiet_hours_end,
            digest_enabled=preference.digest_enabled,
            digest_frequency=preference.digest_frequency,
            digest_time=preference.digest_time,
            created_at=preference.created_at,
            updated_at=preference.updated_at,
        )


class PreferenceUpdate(BaseModel):
    """Partial update; only the fields sent by the client are applied."""

    type_toggles: dict[str, bool] | None = None
    enable_in_app: bool | None = None
    enable_email: bool | None = None
    enable_realtime: bool | None = None
    enable_ai_prioritization: bool | None = None
    quiet_hours_start: time | None = None
    quiet_hours_end: time | None = None
    digest_enabled: bool | None = None
    digest_frequency: Literal["daily", "weekly"] | None = None
    digest_time: time | None = None

    def changes(self) -> dict[str, object]:
        """Return the explicitly provided fields, dropping nulls except quiet hours."""

        provided = self.model_dump(exclude_unset=True)
        return {
            name: value
            for name, value in provided.items()
            if value is not None or name in {"quiet_hours_start", "quiet_hours_end"}
        }


__all__ = ["PreferenceRead", "PreferenceUpdate"]
