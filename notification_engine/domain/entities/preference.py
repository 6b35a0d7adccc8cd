"""Domain entity representing the notification settings of a user."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, time

from .notification import KNOWN_NOTIFICATION_TYPES

DIGEST_FREQUENCY_DAILY = "daily"
DIGEST_FREQUENCY_WEEKLY = "weekly"
DIGEST_FREQUENCIES: tuple[str, ...] = (DIGEST_FREQUENCY_DAILY, DIGEST_FREQUENCY_WEEKLY)

DEFAULT_DIGEST_TIME = time(hour=9, minute=0)


def default_type_toggles() -> dict[str, bool]:
    """Return a toggle map with every known notification type enabled."""

    return {notification_type: True for notification_type in KNOWN_NOTIFICATION_TYPES}


@dataclass
class NotificationPreference:
    """Per-type and per-channel delivery settings for a single user."""

    user_id: str
    type_toggles: dict[str, bool] = field(default_factory=default_type_toggles)
    enable_in_app: bool = True
    enable_email: bool = True
    enable_realtime: bool = False
    enable_ai_prioritization: bool = True
    quiet_hours_start: time | None = None
    quiet_hours_end: time | None = None
    digest_enabled: bool = False
    digest_frequency: str = DIGEST_FREQUENCY_DAILY
    digest_time: time = DEFAULT_DIGEST_TIME
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def defaults_for(cls, user_id: str) -> "NotificationPreference":
        """Return the system defaults applied when a user has no record."""

        return cls(user_id=user_id)

    def allows(self, notification_type: str) -> bool:
        """Return ``False`` only when ``notification_type`` is explicitly disabled.

        Types without a toggle are allowed so newly introduced producers are not
        silently dropped.
        """

        return self.type_toggles.get(notification_type) is not False

    @property
    def has_quiet_hours(self) -> bool:
        return self.quiet_hours_start is not None and self.quiet_hours_end is not None


__all__ = [
    "DEFAULT_DIGEST_TIME",
    "DIGEST_FREQUENCIES",
    "DIGEST_FREQUENCY_DAILY",
    "DIGEST_FREQUENCY_WEEKLY",
    "NotificationPreference",
    "default_type_toggles",
]
