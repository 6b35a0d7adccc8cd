"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import and_, func, or_, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from notification_engine.domain.entities import Notification
from notification_engine.infrastructure.models import NotificationModel
from notification_engine.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_for_user(self, notification_id: int, *, user_id: str) -> Notification | None:
        model = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id == notification_id)
            .filter(NotificationModel.user_id == user_id)
            .one_or_none()
        )
        return self._to_entity(model) if model is not None else None

    def list_unread_for_user(
        self, user_id: str, *, now: datetime, limit: int | None = 50
    ) -> Sequence[Notification]:
        query = self._unread_query(user_id, now=now).order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def count_unread_for_user(self, user_id: str, *, now: datetime) -> int:
        query = self._unread_query(user_id, now=now)
        return query.with_entities(func.count(NotificationModel.id)).scalar() or 0

    def list_due(self, *, now: datetime, limit: int | None = 500) -> Sequence[Notification]:
        """Return deferred notifications whose snooze has elapsed."""

        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.delivered_at.is_(None))
            .filter(NotificationModel.snoozed_until.is_not(None))
            .filter(NotificationModel.snoozed_until <= ensure_app_naive_datetime(now))
            .order_by(NotificationModel.snoozed_until.asc(), NotificationModel.id.asc())
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        self.session.refresh(model)
        return self._to_entity(model)

    def mark_as_read(self, notification_id: int, *, user_id: str) -> bool:
        statement = (
            update(NotificationModel)
            .where(NotificationModel.id == notification_id)
            .where(NotificationModel.user_id == user_id)
            .values(is_read=True)
        )
        return self._execute_update(statement) > 0

    def mark_all_as_read(self, user_id: str, *, snapshot: datetime) -> int:
        """Mark every notification visible at ``snapshot`` as read.

        Rows delivered after ``snapshot`` keep their unread state, so a
        notification created concurrently is either marked and counted or left
        untouched.
        """

        naive_snapshot = ensure_app_naive_datetime(snapshot)
        statement = (
            update(NotificationModel)
            .where(self._unread_clause(user_id, naive_snapshot))
            .where(NotificationModel.created_at <= naive_snapshot)
            .where(NotificationModel.delivered_at <= naive_snapshot)
            .values(is_read=True)
        )
        return self._execute_update(statement)

    def snooze(self, notification_id: int, *, user_id: str, until: datetime) -> bool:
        statement = (
            update(NotificationModel)
            .where(NotificationModel.id == notification_id)
            .where(NotificationModel.user_id == user_id)
            .values(snoozed_until=ensure_app_naive_datetime(until))
        )
        return self._execute_update(statement) > 0

    def mark_delivered(self, notification_id: int, *, delivered_at: datetime) -> Notification | None:
        """Set ``delivered_at`` unless another worker already delivered the row."""

        statement = (
            update(NotificationModel)
            .where(NotificationModel.id == notification_id)
            .where(NotificationModel.delivered_at.is_(None))
            .values(delivered_at=ensure_app_naive_datetime(delivered_at))
        )
        if self._execute_update(statement) == 0:
            return None
        model = self.session.get(NotificationModel, notification_id, populate_existing=True)
        return self._to_entity(model) if model is not None else None

    def _execute_update(self, statement) -> int:
        try:
            result = self.session.execute(
                statement.execution_options(synchronize_session=False)
            )
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        # Bulk updates bypass the identity map.
        self.session.expire_all()
        return result.rowcount or 0

    def _unread_query(self, user_id: str, *, now: datetime) -> Query:
        return self.session.query(NotificationModel).filter(
            self._unread_clause(user_id, ensure_app_naive_datetime(now))
        )

    @staticmethod
    def _unread_clause(user_id: str, naive_now: datetime | None):
        return and_(
            NotificationModel.user_id == user_id,
            NotificationModel.is_read.is_(False),
            NotificationModel.delivered_at.is_not(None),
            or_(
                NotificationModel.snoozed_until.is_(None),
                NotificationModel.snoozed_until <= naive_now,
            ),
        )

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, notification: Notification) -> None:
        model.created_at = (
            ensure_app_naive_datetime(notification.created_at)
            or ensure_app_naive_datetime(now_in_app_timezone())
        )
        model.user_id = notification.user_id
        model.organization_id = notification.organization_id
        model.type = notification.type
        model.priority = notification.priority
        model.title = notification.title
        model.message = notification.message
        model.action_url = notification.action_url
        model.action_label = notification.action_label
        model.related_entity_type = notification.related_entity_type
        model.related_entity_id = notification.related_entity_id
        model.metadata_ = notification.metadata or {}
        model.ai_priority_score = notification.ai_priority_score
        model.ai_urgency_reason = notification.ai_urgency_reason
        model.is_read = notification.is_read
        model.delivered_at = ensure_app_naive_datetime(notification.delivered_at)
        model.snoozed_until = ensure_app_naive_datetime(notification.snoozed_until)

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            organization_id=model.organization_id,
            type=model.type,
            priority=model.priority,
            title=model.title,
            message=model.message,
            action_url=model.action_url,
            action_label=model.action_label,
            related_entity_type=model.related_entity_type,
            related_entity_id=model.related_entity_id,
            metadata=dict(model.metadata_ or {}),
            ai_priority_score=model.ai_priority_score,
            ai_urgency_reason=model.ai_urgency_reason,
            is_read=bool(model.is_read),
            created_at=ensure_app_timezone(model.created_at),
            delivered_at=ensure_app_timezone(model.delivered_at),
            snoozed_until=ensure_app_timezone(model.snoozed_until),
        )


__all__ = ["NotificationRepository"]
