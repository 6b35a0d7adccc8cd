"""Persistence helpers for notification preferences."""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from notification_engine.domain.entities import (
    DEFAULT_DIGEST_TIME,
    NotificationPreference,
    default_type_toggles,
)
from notification_engine.infrastructure.models import NotificationPreferenceModel
from notification_engine.utils import ensure_app_timezone


class NotificationPreferenceRepository:
    """Provide read and upsert operations for :class:`NotificationPreference`."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: str) -> NotificationPreference | None:
        model = self.session.get(NotificationPreferenceModel, user_id)
        if model is None:
            return None
        return self._to_entity(model)

    def save(self, preference: NotificationPreference) -> NotificationPreference:
        """Insert or update the preference record of ``preference.user_id``."""

        model = self.session.get(NotificationPreferenceModel, preference.user_id)
        if model is None:
            model = NotificationPreferenceModel(user_id=preference.user_id)
        self._apply_entity_to_model(model, preference)
        self.session.add(model)
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationPreferenceModel, preference: NotificationPreference
    ) -> None:
        model.type_toggles = dict(preference.type_toggles)
        model.enable_in_app = preference.enable_in_app
        model.enable_email = preference.enable_email
        model.enable_realtime = preference.enable_realtime
        model.enable_ai_prioritization = preference.enable_ai_prioritization
        model.quiet_hours_start = preference.quiet_hours_start
        model.quiet_hours_end = preference.quiet_hours_end
        model.digest_enabled = preference.digest_enabled
        model.digest_frequency = preference.digest_frequency
        model.digest_time = preference.digest_time or DEFAULT_DIGEST_TIME

    @staticmethod
    def _to_entity(model: NotificationPreferenceModel) -> NotificationPreference:
        toggles = default_type_toggles()
        toggles.update({str(key): bool(value) for key, value in (model.type_toggles or {}).items()})
        return NotificationPreference(
            user_id=model.user_id,
            type_toggles=toggles,
            enable_in_app=bool(model.enable_in_app),
            enable_email=bool(model.enable_email),
            enable_realtime=bool(model.enable_realtime),
            enable_ai_prioritization=bool(model.enable_ai_prioritization),
            quiet_hours_start=model.quiet_hours_start,
            quiet_hours_end=model.quiet_hours_end,
            digest_enabled=bool(model.digest_enabled),
            digest_frequency=model.digest_frequency,
            digest_time=model.digest_time or DEFAULT_DIGEST_TIME,
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["NotificationPreferenceRepository"]
