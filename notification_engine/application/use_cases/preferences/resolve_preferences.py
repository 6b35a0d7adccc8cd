"""Use case for reading the notification preferences of a user."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from notification_engine.application.services import PreferenceCache
from notification_engine.domain.entities import (
    NotFound,
    NotificationPreference,
    Ok,
    StoreResult,
    TransientError,
)
from notification_engine.infrastructure.repositories import NotificationPreferenceRepository

logger = logging.getLogger(__name__)


class PreferenceResolver:
    """Load preferences through an optional TTL cache. Never writes."""

    def __init__(self, session: Session, cache: PreferenceCache | None = None) -> None:
        self._repository = NotificationPreferenceRepository(session)
        self._cache = cache

    def resolve(self, user_id: str) -> StoreResult[NotificationPreference]:
        if self._cache is not None:
            cached = self._cache.get(user_id)
            if cached is not None:
                return Ok(cached)
            generation = self._cache.generation(user_id)

        try:
            preference = self._repository.get(user_id)
        except SQLAlchemyError:
            logger.exception("Error loading notification preferences for %s", user_id)
            return TransientError("Notification preferences are unavailable")

        if preference is None:
            return NotFound("Notification preferences not found")

        if self._cache is not None:
            self._cache.put(preference, generation=generation)
        return Ok(preference)

    def resolve_or_default(self, user_id: str) -> NotificationPreference:
        """Return the stored preferences or in-memory system defaults."""

        result = self.resolve(user_id)
        if isinstance(result, Ok):
            return result.value
        return NotificationPreference.defaults_for(user_id)


def get_preferences(
    session: Session, user_id: str, *, cache: PreferenceCache | None = None
) -> NotificationPreference:
    """Return the effective preferences of ``user_id``."""

    return PreferenceResolver(session, cache).resolve_or_default(user_id)


__all__ = ["PreferenceResolver", "get_preferences"]
