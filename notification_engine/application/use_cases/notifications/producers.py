"""Canonical notifications emitted by upstream producers."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from notification_engine.domain.entities import (
    NOTIFICATION_TYPE_AI_INSIGHT,
    NOTIFICATION_TYPE_CALENDAR_REMINDER,
    NOTIFICATION_TYPE_EMAIL_IMPORTANT,
    NOTIFICATION_TYPE_TASK_DUE,
    NOTIFICATION_TYPE_USAGE_LIMIT,
    PRIORITY_HIGH,
    PRIORITY_MEDIUM,
    PRIORITY_URGENT,
    DeliveryOutcome,
    NotificationRequest,
)
from notification_engine.utils import ensure_app_timezone, now_in_app_timezone

from .create_notification import create_notification


def format_due_date(due_date: datetime, *, now: datetime | None = None) -> str:
    """Describe how far away ``due_date`` is, e.g. ``"in 3 hours"``."""

    current = ensure_app_timezone(now) if now is not None else now_in_app_timezone()
    diff_hours = int((ensure_app_timezone(due_date) - current).total_seconds() // 3600)
    diff_days = diff_hours // 24

    if diff_hours < 1:
        return "in less than an hour"
    if diff_hours < 24:
        return f"in {diff_hours} hours"
    if diff_days == 1:
        return "tomorrow"
    return f"in {diff_days} days"


def notify_task_due(
    session: Session,
    *,
    user_id: str,
    organization_id: str,
    task: Mapping[str, Any],
    now: datetime | None = None,
    **options: Any,
) -> DeliveryOutcome:
    """Warn a user that ``task`` is approaching its deadline."""

    due_date = task["due_date"]
    if isinstance(due_date, str):
        due_date = datetime.fromisoformat(due_date)
    request = NotificationRequest(
        user_id=user_id,
        organization_id=organization_id,
        type=NOTIFICATION_TYPE_TASK_DUE,
        title="Task Due Soon",
        message=f"\"{task['title']}\" is due {format_due_date(due_date, now=now)}",
        priority=PRIORITY_HIGH,
        action_url=f"/dashboard/tasks?id={task['id']}",
        action_label="View Task",
        related_entity_type="task",
        related_entity_id=str(task["id"]),
    )
    return create_notification(session, request, **options)


def notify_important_email(
    session: Session,
    *,
    user_id: str,
    organization_id: str,
    email: Mapping[str, Any],
    **options: Any,
) -> DeliveryOutcome:
    request = NotificationRequest(
        user_id=user_id,
        organization_id=organization_id,
        type=NOTIFICATION_TYPE_EMAIL_IMPORTANT,
        title="Important Email",
        message=f"From: {email['from_address']} - {email['subject']}",
        action_url=f"/dashboard/email?id={email['id']}",
        action_label="Read Email",
        related_entity_type="email",
        related_entity_id=str(email["id"]),
    )
    return create_notification(session, request, **options)


def notify_calendar_event(
    session: Session,
    *,
    user_id: str,
    organization_id: str,
    event: Mapping[str, Any],
    minutes_before: int,
    **options: Any,
) -> DeliveryOutcome:
    """Remind a user of an upcoming event; high priority within 15 minutes."""

    request = NotificationRequest(
        user_id=user_id,
        organization_id=organization_id,
        type=NOTIFICATION_TYPE_CALENDAR_REMINDER,
        title="Upcoming Event",
        message=f"\"{event['title']}\" starts in {minutes_before} minutes",
        priority=PRIORITY_HIGH if minutes_before <= 15 else PRIORITY_MEDIUM,
        action_url=f"/dashboard/calendar?id={event['id']}",
        action_label="View Event",
        related_entity_type="calendar_event",
        related_entity_id=str(event["id"]),
    )
    return create_notification(session, request, **options)


def notify_ai_insight(
    session: Session,
    *,
    user_id: str,
    organization_id: str,
    insight: str,
    context: Any = None,
    **options: Any,
) -> DeliveryOutcome:
    request = NotificationRequest(
        user_id=user_id,
        organization_id=organization_id,
        type=NOTIFICATION_TYPE_AI_INSIGHT,
        title="AI Insight",
        message=insight,
        metadata={"context": context},
    )
    return create_notification(session, request, **options)


def notify_usage_limit(
    session: Session,
    *,
    user_id: str,
    organization_id: str,
    resource: str,
    used: int,
    limit: int,
    **options: Any,
) -> DeliveryOutcome:
    """Tell a user that their plan usage for ``resource`` is close to the cap."""

    percentage = int(used * 100 / limit) if limit else 100
    request = NotificationRequest(
        user_id=user_id,
        organization_id=organization_id,
        type=NOTIFICATION_TYPE_USAGE_LIMIT,
        title="Usage Limit Reached" if used >= limit else "Approaching Usage Limit",
        message=f"You have used {used} of {limit} {resource} ({percentage}%)",
        priority=PRIORITY_URGENT if used >= limit else PRIORITY_HIGH,
        action_url="/dashboard/settings/billing",
        action_label="Review Plan",
        metadata={"resource": resource, "used": used, "limit": limit},
    )
    return create_notification(session, request, **options)


__all__ = [
    "format_due_date",
    "notify_ai_insight",
    "notify_calendar_event",
    "notify_important_email",
    "notify_task_due",
    "notify_usage_limit",
]
