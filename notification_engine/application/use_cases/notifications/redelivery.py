"""Re-delivery of notifications deferred by quiet hours."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from notification_engine.application.services import ChannelDispatcher, PreferenceCache
from notification_engine.application.use_cases.preferences import PreferenceResolver
from notification_engine.domain.entities import Notification
from notification_engine.infrastructure.repositories import NotificationRepository
from notification_engine.utils import ensure_app_timezone, now_in_app_timezone

logger = logging.getLogger(__name__)


def deliver_due_notifications(
    session: Session,
    *,
    dispatcher: ChannelDispatcher,
    preference_cache: PreferenceCache | None = None,
    now: datetime | None = None,
    limit: int = 500,
) -> list[Notification]:
    """Deliver pending notifications whose ``snoozed_until`` has elapsed.

    Each row is claimed with a compare-and-set on ``delivered_at`` so two
    pollers running at once never deliver the same notification twice.
    """

    current = ensure_app_timezone(now) if now is not None else now_in_app_timezone()
    repository = NotificationRepository(session)
    resolver = PreferenceResolver(session, preference_cache)

    delivered: list[Notification] = []
    for pending in repository.list_due(now=current, limit=limit):
        claimed = repository.mark_delivered(pending.id, delivered_at=current)
        if claimed is None:
            logger.debug("Notification %s already delivered by another worker", pending.id)
            continue
        dispatcher.dispatch(claimed, resolver.resolve_or_default(claimed.user_id))
        delivered.append(claimed)

    if delivered:
        logger.info("Delivered %s deferred notifications", len(delivered))
    return delivered


__all__ = ["deliver_due_notifications"]
