"""Inbox operations consumed by the presentation layer.

Every operation is scoped by user so a notification id never leaks across
accounts. Storage failures are reported as :class:`TransientError` instead of
being folded into empty results.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from notification_engine.domain.entities import (
    NotFound,
    Notification,
    Ok,
    StoreResult,
    TransientError,
)
from notification_engine.infrastructure.repositories import NotificationRepository
from notification_engine.utils import ensure_app_timezone, now_in_app_timezone

logger = logging.getLogger(__name__)

UNREAD_LIMIT = 50

SNOOZE_DURATIONS: dict[str, timedelta] = {
    "1h": timedelta(hours=1),
    "3h": timedelta(hours=3),
    "1d": timedelta(days=1),
    "3d": timedelta(days=3),
    "1w": timedelta(weeks=1),
}

_UNAVAILABLE = "Notifications are temporarily unavailable"
_NOT_FOUND = "Notification not found"


def _now(now: datetime | None) -> datetime:
    return ensure_app_timezone(now) if now is not None else now_in_app_timezone()


def list_unread(
    session: Session,
    user_id: str,
    *,
    limit: int = UNREAD_LIMIT,
    now: datetime | None = None,
) -> StoreResult[list[Notification]]:
    """Return the newest unread notifications visible to ``user_id``."""

    try:
        notifications = NotificationRepository(session).list_unread_for_user(
            user_id, now=_now(now), limit=limit
        )
    except SQLAlchemyError:
        logger.exception("Error fetching notifications for %s", user_id)
        return TransientError(_UNAVAILABLE)
    return Ok(list(notifications))


def count_unread(
    session: Session, user_id: str, *, now: datetime | None = None
) -> StoreResult[int]:
    try:
        count = NotificationRepository(session).count_unread_for_user(user_id, now=_now(now))
    except SQLAlchemyError:
        logger.exception("Error getting unread count for %s", user_id)
        return TransientError(_UNAVAILABLE)
    return Ok(count)


def mark_read(session: Session, notification_id: int, user_id: str) -> StoreResult[None]:
    try:
        updated = NotificationRepository(session).mark_as_read(notification_id, user_id=user_id)
    except SQLAlchemyError:
        logger.exception("Error marking notification %s as read", notification_id)
        return TransientError(_UNAVAILABLE)
    if not updated:
        logger.warning(
            "Notification %s not found for mark-as-read by %s", notification_id, user_id
        )
        return NotFound(_NOT_FOUND)
    return Ok(None)


def mark_all_read(
    session: Session, user_id: str, *, now: datetime | None = None
) -> StoreResult[int]:
    """Mark every notification visible right now as read and return how many."""

    snapshot = _now(now)
    try:
        count = NotificationRepository(session).mark_all_as_read(user_id, snapshot=snapshot)
    except SQLAlchemyError:
        logger.exception("Error marking all notifications as read for %s", user_id)
        return TransientError(_UNAVAILABLE)
    return Ok(count)


def snooze(
    session: Session,
    notification_id: int,
    user_id: str,
    duration: str,
    *,
    now: datetime | None = None,
) -> StoreResult[datetime]:
    """Hide a notification until ``now + duration`` and return that instant."""

    offset = SNOOZE_DURATIONS.get(duration)
    if offset is None:
        raise ValueError(
            f"Unsupported snooze duration '{duration}'. Use one of: {', '.join(SNOOZE_DURATIONS)}"
        )

    until = _now(now) + offset
    try:
        updated = NotificationRepository(session).snooze(
            notification_id, user_id=user_id, until=until
        )
    except SQLAlchemyError:
        logger.exception("Error snoozing notification %s", notification_id)
        return TransientError(_UNAVAILABLE)
    if not updated:
        return NotFound(_NOT_FOUND)
    return Ok(until)


__all__ = [
    "SNOOZE_DURATIONS",
    "UNREAD_LIMIT",
    "count_unread",
    "list_unread",
    "mark_all_read",
    "mark_read",
    "snooze",
]
