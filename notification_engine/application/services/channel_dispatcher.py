"""Fan-out of delivered notifications to secondary channels."""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import Executor, ThreadPoolExecutor
from functools import lru_cache
from typing import Protocol

from sqlalchemy.orm import Session, sessionmaker

from notification_engine.config import get_settings
from notification_engine.domain.entities import (
    PRIORITY_URGENT,
    Notification,
    NotificationPreference,
)
from notification_engine.infrastructure.email import (
    EmailSendResult,
    render_notification_email,
)
from notification_engine.infrastructure.repositories import UserProfileRepository

logger = logging.getLogger(__name__)

RecipientLookup = Callable[[str], "str | None"]


class EmailTransport(Protocol):
    """Outbound email channel."""

    def send(self, to: str, subject: str, html_content: str) -> EmailSendResult:
        ...


class ProfileEmailLookup:
    """Resolve recipient addresses from the user profile directory.

    A fresh session is opened per lookup because email jobs run on worker
    threads, outside the session of the request that produced them.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def __call__(self, user_id: str) -> str | None:
        session = self._session_factory()
        try:
            profile = UserProfileRepository(session).get(user_id)
        finally:
            session.close()
        if profile is None:
            return None
        return (profile.email or "").strip() or None


@lru_cache(maxsize=1)
def get_email_executor() -> ThreadPoolExecutor:
    """Return the shared worker pool used for fire-and-forget email jobs."""

    return ThreadPoolExecutor(
        max_workers=get_settings().email_workers,
        thread_name_prefix="notification-email",
    )


class ChannelDispatcher:
    """Deliver a persisted notification through the enabled channels.

    In-app delivery is the persisted row itself. Email is reserved for urgent
    notifications of users with the email channel enabled and runs on an
    executor so the producer never waits for the transport.
    """

    def __init__(
        self,
        *,
        email_transport: EmailTransport,
        recipient_lookup: RecipientLookup,
        executor: Executor | None = None,
        brand: str | None = None,
    ) -> None:
        self._email_transport = email_transport
        self._recipient_lookup = recipient_lookup
        self._executor = executor
        self._brand = brand or get_settings().notification_email_brand

    def dispatch(self, notification: Notification, preferences: NotificationPreference) -> None:
        if not self.should_email(notification, preferences):
            return

        executor = self._executor or get_email_executor()
        try:
            executor.submit(self._send_email, notification)
        except RuntimeError:
            logger.exception(
                "Could not schedule email for notification %s", notification.id
            )

    @staticmethod
    def should_email(notification: Notification, preferences: NotificationPreference) -> bool:
        return preferences.enable_email and notification.priority == PRIORITY_URGENT

    def _send_email(self, notification: Notification) -> None:
        try:
            recipient = self._recipient_lookup(notification.user_id)
            if not recipient:
                logger.warning("No email found for user: %s", notification.user_id)
                return

            html_content = render_notification_email(notification, brand=self._brand)
            result = self._email_transport.send(recipient, notification.title, html_content)
        except Exception:
            # Email failures never affect the already persisted notification.
            logger.exception(
                "Error sending email notification %s", notification.id
            )
            return

        if result.success:
            logger.info("Email notification sent: %s", notification.title)
        else:
            logger.error(
                "Email notification %s was not delivered: %s",
                notification.id,
                result.error,
            )


__all__ = [
    "ChannelDispatcher",
    "EmailTransport",
    "ProfileEmailLookup",
    "RecipientLookup",
    "get_email_executor",
]
