"""Endpoints for submitting and reading in-app notifications."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from notification_engine.application.services import (
    ChannelDispatcher,
    PreferenceCache,
    PriorityClassifier,
)
from notification_engine.application.use_cases.notifications import (
    NotificationPersistenceError,
    count_unread,
    create_notification,
    list_unread,
    mark_all_read,
    mark_read,
    snooze,
)
from notification_engine.application.use_cases.notifications.inbox import UNREAD_LIMIT
from notification_engine.infrastructure.database import get_db
from notification_engine.interfaces.api.dependencies import (
    get_channel_dispatcher,
    get_current_user_id,
    get_preference_cache,
    get_priority_classifier,
)
from notification_engine.interfaces.api.routes_helpers import unwrap_result
from notification_engine.interfaces.api.schemas import (
    DeliveryOutcomeRead,
    MarkAllReadResponse,
    NotificationCreate,
    NotificationRead,
    SnoozeRequest,
    SnoozeResponse,
    UnreadCount,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.post("", response_model=DeliveryOutcomeRead, status_code=status.HTTP_201_CREATED)
def submit_notification(
    payload: NotificationCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    classifier: PriorityClassifier = Depends(get_priority_classifier),
    dispatcher: ChannelDispatcher = Depends(get_channel_dispatcher),
    cache: PreferenceCache = Depends(get_preference_cache),
) -> DeliveryOutcomeRead:
    """Schedule a notification for the authenticated user."""

    try:
        outcome = create_notification(
            db,
            payload.to_request(user_id),
            classifier=classifier,
            dispatcher=dispatcher,
            preference_cache=cache,
        )
    except NotificationPersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    return DeliveryOutcomeRead.from_outcome(outcome)


@router.get("/unread", response_model=list[NotificationRead])
def list_unread_notifications(
    limit: int = Query(UNREAD_LIMIT, ge=1, le=UNREAD_LIMIT),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> list[NotificationRead]:
    notifications = unwrap_result(list_unread(db, user_id, limit=limit))
    return [NotificationRead.from_entity(notification) for notification in notifications]


@router.get("/unread/count", response_model=UnreadCount)
def unread_count(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> UnreadCount:
    return UnreadCount(count=unwrap_result(count_unread(db, user_id)))


@router.post("/read-all", response_model=MarkAllReadResponse)
def mark_all_notifications_read(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> MarkAllReadResponse:
    """Mark every notification visible right now as read."""

    return MarkAllReadResponse(updated=unwrap_result(mark_all_read(db, user_id)))


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
def mark_notification_read(
    notification_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> None:
    unwrap_result(mark_read(db, notification_id, user_id))


@router.post("/{notification_id}/snooze", response_model=SnoozeResponse)
def snooze_notification(
    notification_id: int,
    payload: SnoozeRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> SnoozeResponse:
    """Hide a notification for one of the supported durations."""

    until = unwrap_result(snooze(db, notification_id, user_id, payload.duration))
    return SnoozeResponse(id=notification_id, snoozed_until=until)
