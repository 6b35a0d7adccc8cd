"""Repository implementations for infrastructure layer."""

from .notification_preference_repository import NotificationPreferenceRepository
from .notification_repository import NotificationRepository
from .user_profile_repository import UserProfileRepository

__all__ = [
    "NotificationPreferenceRepository",
    "NotificationRepository",
    "UserProfileRepository",
]
