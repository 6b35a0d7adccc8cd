"""Delivery scheduler: the single entry point for notification producers."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from notification_engine.application.services import (
    ChannelDispatcher,
    PreferenceCache,
    PriorityClassifier,
    ProfileEmailLookup,
    build_priority_classifier,
    is_quiet,
    next_window_end,
)
from notification_engine.application.use_cases.preferences import PreferenceResolver
from notification_engine.domain.entities import (
    NOTIFICATION_PRIORITIES,
    PRIORITY_URGENT,
    SUPPRESSED_DISABLED,
    Delivered,
    DeliveryOutcome,
    Notification,
    NotificationPreference,
    NotificationRequest,
    PriorityAssessment,
    Snoozed,
    Suppressed,
    default_priority_for,
)
from notification_engine.infrastructure.database import SessionLocal
from notification_engine.infrastructure.email import SendGridEmailTransport
from notification_engine.infrastructure.repositories import NotificationRepository
from notification_engine.utils import ensure_app_timezone, now_in_app_timezone

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class NotificationPersistenceError(RuntimeError):
    """Raised when the notification record could not be stored."""


def build_default_dispatcher() -> ChannelDispatcher:
    """Return a dispatcher wired to SendGrid and the profile directory."""

    return ChannelDispatcher(
        email_transport=SendGridEmailTransport(),
        recipient_lookup=ProfileEmailLookup(SessionLocal),
    )


class DeliveryScheduler:
    """Decide whether a request is delivered, deferred or suppressed.

    The decision is returned as a :data:`DeliveryOutcome`:

    * ``Suppressed("disabled")`` when the user turned the type off. Nothing is
      stored and the classifier is not called.
    * ``Snoozed(until)`` when quiet hours are active and the final priority is
      not urgent. The row is stored with ``snoozed_until`` and no
      ``delivered_at`` so the re-delivery poller can pick it up.
    * ``Delivered`` otherwise. The row is stored with ``delivered_at`` and the
      channel dispatcher fans it out.
    """

    def __init__(
        self,
        session: Session,
        *,
        classifier: PriorityClassifier,
        dispatcher: ChannelDispatcher,
        preference_cache: PreferenceCache | None = None,
        clock: Clock = now_in_app_timezone,
    ) -> None:
        self._repository = NotificationRepository(session)
        self._resolver = PreferenceResolver(session, preference_cache)
        self._classifier = classifier
        self._dispatcher = dispatcher
        self._clock = clock

    def schedule(self, request: NotificationRequest) -> DeliveryOutcome:
        preferences = self._resolver.resolve_or_default(request.user_id)

        if not preferences.allows(request.type):
            logger.info(
                "Notification type %s disabled for user %s", request.type, request.user_id
            )
            return Suppressed(SUPPRESSED_DISABLED)

        assessment = self._assess(request, preferences)
        final_priority = assessment.priority if assessment else _static_priority(request)

        now = ensure_app_timezone(self._clock())
        if final_priority != PRIORITY_URGENT and is_quiet(
            preferences.quiet_hours_start, preferences.quiet_hours_end, now
        ):
            until = next_window_end(preferences.quiet_hours_end, now)
            saved = self._persist(
                request, final_priority, assessment, created_at=now, snoozed_until=until
            )
            logger.info(
                "Notification %s deferred until %s by quiet hours", saved.id, until.isoformat()
            )
            return Snoozed(notification=saved, until=until)

        saved = self._persist(
            request, final_priority, assessment, created_at=now, delivered_at=now
        )
        self._dispatcher.dispatch(saved, preferences)
        return Delivered(notification=saved)

    def _assess(
        self, request: NotificationRequest, preferences: NotificationPreference
    ) -> PriorityAssessment | None:
        if not preferences.enable_ai_prioritization:
            return None
        return self._classifier.classify(request)

    def _persist(
        self,
        request: NotificationRequest,
        priority: str,
        assessment: PriorityAssessment | None,
        *,
        created_at: datetime,
        delivered_at: datetime | None = None,
        snoozed_until: datetime | None = None,
    ) -> Notification:
        notification = Notification(
            id=None,
            user_id=request.user_id,
            organization_id=request.organization_id,
            type=request.type,
            priority=priority,
            title=request.title,
            message=request.message,
            action_url=request.action_url,
            action_label=request.action_label,
            related_entity_type=request.related_entity_type,
            related_entity_id=request.related_entity_id,
            metadata=dict(request.metadata or {}),
            ai_priority_score=assessment.score if assessment else None,
            ai_urgency_reason=assessment.reason if assessment else None,
            created_at=created_at,
            delivered_at=delivered_at,
            snoozed_until=snoozed_until,
        )
        try:
            return self._repository.create(notification)
        except SQLAlchemyError as exc:
            logger.exception("Error creating notification for user %s", request.user_id)
            raise NotificationPersistenceError("The notification could not be stored") from exc


def _static_priority(request: NotificationRequest) -> str:
    if request.priority in NOTIFICATION_PRIORITIES:
        return request.priority
    return default_priority_for(request.type)


def create_notification(
    session: Session,
    request: NotificationRequest,
    *,
    classifier: PriorityClassifier | None = None,
    dispatcher: ChannelDispatcher | None = None,
    preference_cache: PreferenceCache | None = None,
    clock: Clock = now_in_app_timezone,
) -> DeliveryOutcome:
    """Schedule ``request`` for delivery and return the decision taken."""

    scheduler = DeliveryScheduler(
        session,
        classifier=classifier or build_priority_classifier(),
        dispatcher=dispatcher or build_default_dispatcher(),
        preference_cache=preference_cache,
        clock=clock,
    )
    return scheduler.schedule(request)


__all__ = [
    "DeliveryScheduler",
    "NotificationPersistenceError",
    "build_default_dispatcher",
    "create_notification",
]
