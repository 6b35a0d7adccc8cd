"""Domain entity representing a notification recipient."""

from dataclasses import dataclass


@dataclass
class UserProfile:
    """Contact details used to reach a user outside the application."""

    user_id: str
    organization_id: str
    email: str | None
    name: str | None = None


__all__ = ["UserProfile"]
