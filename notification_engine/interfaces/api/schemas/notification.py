"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from notification_engine.domain.entities import (
    Delivered,
    DeliveryOutcome,
    Notification,
    NotificationRequest,
    Snoozed,
)

PriorityLevel = Literal["low", "medium", "high", "urgent"]
SnoozeDuration = Literal["1h", "3h", "1d", "3d", "1w"]


class NotificationCreate(BaseModel):
    """Payload submitted by a producer for the authenticated user."""

    # Lengths mirror the ``notification`` table columns.
    organization_id: str = Field(..., min_length=1, max_length=64)
    type: str = Field(..., min_length=1, max_length=50)
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    priority: PriorityLevel | None = None
    action_url: str | None = Field(default=None, max_length=500)
    action_label: str | None = Field(default=None, max_length=80)
    related_entity_type: str | None = Field(default=None, max_length=50)
    related_entity_id: str | None = Field(default=None, max_length=64)
    metadata: dict[str, Any] = Field(default_factory=dict)

    def to_request(self, user_id: str) -> NotificationRequest:
        return NotificationRequest(user_id=user_id, **self.model_dump())


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: int
    user_id: str
    organization_id: str
    type: str
    priority: str
    title: str
    message: str
    action_url: str | None = None
    action_label: str | None = None
    related_entity_type: str | None = None
    related_entity_id: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    ai_priority_score: float | None = None
    ai_urgency_reason: str | None = None
    is_read: bool = False
    created_at: datetime | None = None
    delivered_at: datetime | None = None
    snoozed_until: datetime | None = None

    @classmethod
    def from_entity(cls, notification: Notification) -> "NotificationRead":
        return cls(
            id=notification.id or 0,
            user_id=notification.user_id,
            organization_id=notification.organization_id,
            type=notification.type,
            priority=notification.priority,
            title=notification.title,
            message=notification.message,
            action_url=notification.action_url,
            action_label=notification.action_label,
            related_entity_type=notification.related_entity_type,
            related_entity_id=notification.related_entity_id,
            metadata=notification.metadata or {},
            ai_priority_score=notification.ai_priority_score,
            ai_urgency_reason=notification.ai_urgency_reason,
            is_read=notification.is_read,
            created_at=notification.created_at,
            delivered_at=notification.delivered_at,
            snoozed_until=notification.snoozed_until,
        )


class DeliveryOutcomeRead(BaseModel):
    """Decision taken by the scheduler for a submitted notification."""

    status: Literal["delivered", "snoozed", "suppressed"]
    notification: NotificationRead | None = None
    until: datetime | None = None
    reason: str | None = None

    @classmethod
    def from_outcome(cls, outcome: DeliveryOutcome) -> "DeliveryOutcomeRead":
        if isinstance(outcome, Delivered):
            return cls(
                status=outcome.status,
                notification=NotificationRead.from_entity(outcome.notification),
            )
        if isinstance(outcome, Snoozed):
            return cls(
                status=outcome.status,
                notification=NotificationRead.from_entity(outcome.notification),
                until=outcome.until,
            )
        return cls(status=outcome.status, reason=outcome.reason)


class SnoozeRequest(BaseModel):
    duration: SnoozeDuration


class SnoozeResponse(BaseModel):
    id: int
    snoozed_until: datetime


class UnreadCount(BaseModel):
    count: int


class MarkAllReadResponse(BaseModel):
    updated: int


__all__ = [
    "DeliveryOutcomeRead",
    "MarkAllReadResponse",
    "NotificationCreate",
    "NotificationRead",
    "SnoozeRequest",
    "SnoozeResponse",
    "UnreadCount",
]
