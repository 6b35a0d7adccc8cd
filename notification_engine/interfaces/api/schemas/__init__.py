from .notification import (
    DeliveryOutcomeRead,
    MarkAllReadResponse,
    NotificationCreate,
    NotificationRead,
    SnoozeRequest,
    SnoozeResponse,
    UnreadCount,
)
from .preference import PreferenceRead, PreferenceUpdate

__all__ = [
    "DeliveryOutcomeRead",
    "MarkAllReadResponse",
    "NotificationCreate",
    "NotificationRead",
    "PreferenceRead",
    "PreferenceUpdate",
    "SnoozeRequest",
    "SnoozeResponse",
    "UnreadCount",
]
