"""Aggregate application use cases."""

from .notifications import create_notification, deliver_due_notifications
from .preferences import get_preferences, update_preferences

__all__ = [
    "create_notification",
    "deliver_due_notifications",
    "get_preferences",
    "update_preferences",
]
