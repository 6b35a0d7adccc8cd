"""Public helpers for creating and managing notifications."""

from .create_notification import (
    DeliveryScheduler,
    NotificationPersistenceError,
    build_default_dispatcher,
    create_notification,
)
from .inbox import (
    SNOOZE_DURATIONS,
    count_unread,
    list_unread,
    mark_all_read,
    mark_read,
    snooze,
)
from .producers import (
    format_due_date,
    notify_ai_insight,
    notify_calendar_event,
    notify_important_email,
    notify_task_due,
    notify_usage_limit,
)
from .redelivery import deliver_due_notifications

__all__ = [
    "DeliveryScheduler",
    "NotificationPersistenceError",
    "SNOOZE_DURATIONS",
    "build_default_dispatcher",
    "count_unread",
    "create_notification",
    "deliver_due_notifications",
    "format_due_date",
    "list_unread",
    "mark_all_read",
    "mark_read",
    "notify_ai_insight",
    "notify_calendar_event",
    "notify_important_email",
    "notify_task_due",
    "notify_usage_limit",
    "snooze",
]
