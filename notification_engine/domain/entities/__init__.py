"""Domain entities exposed by the application."""

from .notification import (
    DEFAULT_PRIORITY_BY_TYPE,
    KNOWN_NOTIFICATION_TYPES,
    NOTIFICATION_PRIORITIES,
    NOTIFICATION_TYPE_AI_INSIGHT,
    NOTIFICATION_TYPE_CALENDAR_EVENT,
    NOTIFICATION_TYPE_CALENDAR_REMINDER,
    NOTIFICATION_TYPE_DOCUMENT_COMMENT,
    NOTIFICATION_TYPE_DOCUMENT_SHARED,
    NOTIFICATION_TYPE_EMAIL_IMPORTANT,
    NOTIFICATION_TYPE_EMAIL_MENTION,
    NOTIFICATION_TYPE_SYSTEM_ALERT,
    NOTIFICATION_TYPE_TASK_ASSIGNED,
    NOTIFICATION_TYPE_TASK_DUE,
    NOTIFICATION_TYPE_USAGE_LIMIT,
    NOTIFICATION_TYPE_WHATSAPP_MESSAGE,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
    PRIORITY_URGENT,
    Notification,
    NotificationRequest,
    default_priority_for,
)
from .outcome import (
    SUPPRESSED_DISABLED,
    Delivered,
    DeliveryOutcome,
    NotFound,
    Ok,
    Snoozed,
    StoreResult,
    Suppressed,
    TransientError,
)
from .preference import (
    DEFAULT_DIGEST_TIME,
    DIGEST_FREQUENCIES,
    DIGEST_FREQUENCY_DAILY,
    DIGEST_FREQUENCY_WEEKLY,
    NotificationPreference,
    default_type_toggles,
)
from .priority import FALLBACK_REASON, PriorityAssessment
from .user_profile import UserProfile

__all__ = [
    "DEFAULT_DIGEST_TIME",
    "DEFAULT_PRIORITY_BY_TYPE",
    "DIGEST_FREQUENCIES",
    "DIGEST_FREQUENCY_DAILY",
    "DIGEST_FREQUENCY_WEEKLY",
    "FALLBACK_REASON",
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
    "SUPPRESSED_DISABLED",
    "Delivered",
    "DeliveryOutcome",
    "NotFound",
    "Notification",
    "NotificationPreference",
    "NotificationRequest",
    "Ok",
    "PriorityAssessment",
    "Snoozed",
    "StoreResult",
    "Suppressed",
    "TransientError",
    "UserProfile",
    "default_priority_for",
    "default_type_toggles",
]
