"""Persistence helpers for the recipient directory."""

from __future__ import annotations

from sqlalchemy.orm import Session

from notification_engine.domain.entities import UserProfile
from notification_engine.infrastructure.models import UserProfileModel


class UserProfileRepository:
    """Look up and register the contact details of notification recipients."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: str) -> UserProfile | None:
        model = self.session.get(UserProfileModel, user_id)
        if model is None:
            return None
        return self._to_entity(model)

    def save(self, profile: UserProfile) -> UserProfile:
        model = self.session.get(UserProfileModel, profile.user_id)
        if model is None:
            model = UserProfileModel(user_id=profile.user_id)
        model.organization_id = profile.organization_id
        model.email = profile.email
        model.name = profile.name
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: UserProfileModel) -> UserProfile:
        return UserProfile(
            user_id=model.user_id,
            organization_id=model.organization_id,
            email=model.email,
            name=model.name,
        )


__all__ = ["UserProfileRepository"]
