"""ORM models used by the application infrastructure."""

from .notification import NotificationModel
from .notification_preference import NotificationPreferenceModel
from .user_profile import UserProfileModel

__all__ = [
    "NotificationModel",
    "NotificationPreferenceModel",
    "UserProfileModel",
]
