"""Domain entities describing notification requests and persisted notifications."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

PRIORITY_LOW = "low"
PRIORITY_MEDIUM = "medium"
PRIORITY_HIGH = "high"
PRIORITY_URGENT = "urgent"

NOTIFICATION_PRIORITIES: tuple[str, ...] = (
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
    PRIORITY_HIGH,
    PRIORITY_URGENT,
)

NOTIFICATION_TYPE_TASK_DUE = "task_due"
NOTIFICATION_TYPE_TASK_ASSIGNED = "task_assigned"
NOTIFICATION_TYPE_EMAIL_IMPORTANT = "email_important"
NOTIFICATION_TYPE_EMAIL_MENTION = "email_mention"
NOTIFICATION_TYPE_CALENDAR_EVENT = "calendar_event"
NOTIFICATION_TYPE_CALENDAR_REMINDER = "calendar_reminder"
NOTIFICATION_TYPE_DOCUMENT_SHARED = "document_shared"
NOTIFICATION_TYPE_DOCUMENT_COMMENT = "document_comment"
NOTIFICATION_TYPE_WHATSAPP_MESSAGE = "whatsapp_message"
NOTIFICATION_TYPE_SYSTEM_ALERT = "system_alert"
NOTIFICATION_TYPE_AI_INSIGHT = "ai_insight"
NOTIFICATION_TYPE_USAGE_LIMIT = "usage_limit"

KNOWN_NOTIFICATION_TYPES: tuple[str, ...] = (
    NOTIFICATION_TYPE_TASK_DUE,
    NOTIFICATION_TYPE_TASK_ASSIGNED,
    NOTIFICATION_TYPE_EMAIL_IMPORTANT,
    NOTIFICATION_TYPE_EMAIL_MENTION,
    NOTIFICATION_TYPE_CALENDAR_EVENT,
    NOTIFICATION_TYPE_CALENDAR_REMINDER,
    NOTIFICATION_TYPE_DOCUMENT_SHARED,
    NOTIFICATION_TYPE_DOCUMENT_COMMENT,
    NOTIFICATION_TYPE_WHATSAPP_MESSAGE,
    NOTIFICATION_TYPE_SYSTEM_ALERT,
    NOTIFICATION_TYPE_AI_INSIGHT,
    NOTIFICATION_TYPE_USAGE_LIMIT,
)

# Priority applied when AI prioritization is off and the producer gave no hint.
DEFAULT_PRIORITY_BY_TYPE: dict[str, str] = {
    NOTIFICATION_TYPE_TASK_DUE: PRIORITY_HIGH,
    NOTIFICATION_TYPE_SYSTEM_ALERT: PRIORITY_HIGH,
    NOTIFICATION_TYPE_USAGE_LIMIT: PRIORITY_HIGH,
    NOTIFICATION_TYPE_DOCUMENT_SHARED: PRIORITY_LOW,
    NOTIFICATION_TYPE_DOCUMENT_COMMENT: PRIORITY_LOW,
    NOTIFICATION_TYPE_AI_INSIGHT: PRIORITY_LOW,
}


def default_priority_for(notification_type: str) -> str:
    """Return the static priority used for ``notification_type``."""

    return DEFAULT_PRIORITY_BY_TYPE.get(notification_type, PRIORITY_MEDIUM)


@dataclass
class NotificationRequest:
    """Event emitted by a producer asking for a user notification."""

    user_id: str
    organization_id: str
    type: str
    title: str
    message: str
    priority: str | None = None
    action_url: str | None = None
    action_label: str | None = None
    related_entity_type: str | None = None
    related_entity_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class Notification:
    """Durable record of a notification addressed to a user.

    A notification is *pending* while ``delivered_at`` is ``None`` and
    *delivered* once it is set. ``delivered_at`` is never cleared.
    """

    id: int | None
    user_id: str
    organization_id: str
    type: str
    priority: str
    title: str
    message: str
    action_url: str | None = None
    action_label: str | None = None
    related_entity_type: str | None = None
    related_entity_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    ai_priority_score: float | None = None
    ai_urgency_reason: str | None = None
    is_read: bool = False
    created_at: datetime | None = None
    delivered_at: datetime | None = None
    snoozed_until: datetime | None = None

    @property
    def is_delivered(self) -> bool:
        return self.delivered_at is not None

    @property
    def is_urgent(self) -> bool:
        return self.priority == PRIORITY_URGENT


__all__ = [
    "DEFAULT_PRIORITY_BY_TYPE",
    "KNOWN_NOTIFICATION_TYPES",
    "NOTIFICATION_PRIORITIES",
    "NOTIFICATION_TYPE_AI_INSIGHT",
    "NOTIFICATION_TYPE_CALENDAR_EVENT",
    "NOTIFICATION_TYPE_CALENDAR_REMINDER",
    "NOTIFICATION_TYPE_DOCUMENT_COMMENT",
    "NOTIFICATION_TYPE_DOCUMENT_SHARED",
    "NOTIFICATION_TYPE_EMAIL_IMPORTANT",
    "NOTIFICATION_TYPE_EMAIL_MENTION",
    "NOTIFICATION_TYPE_SYSTEM_ALERT",
    "NOTIFICATION_TYPE_TASK_ASSIGNED",
    "NOTIFICATION_TYPE_TASK_DUE",
    "NOTIFICATION_TYPE_USAGE_LIMIT",
    "NOTIFICATION_TYPE_WHATSAPP_MESSAGE",
    "PRIORITY_HIGH",
    "PRIORITY_LOW",
    "PRIORITY_MEDIUM",
    "PRIORITY_URGENT",
    "Notification",
    "NotificationRequest",
    "default_priority_for",
]
