"""Short-lived cache for notification preferences."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import replace

from notification_engine.domain.entities import NotificationPreference

Generation = tuple[int, int]


def _copy(preference: NotificationPreference) -> NotificationPreference:
    return replace(preference, type_toggles=dict(preference.type_toggles))


class PreferenceCache:
    """Thread-safe TTL cache keyed by user id.

    Writers must call :meth:`invalidate` after persisting a change so quiet-hours
    decisions never run on stale settings. Readers take a :meth:`generation`
    token before loading from storage and hand it to :meth:`put`; the value is
    dropped when an invalidation happened in between.
    """

    def __init__(
        self,
        ttl_seconds: float = 30.0,
        *,
        max_entries: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, tuple[float, NotificationPreference]] = {}
        self._generations: dict[str, int] = {}
        self._epoch = 0
        self._lock = threading.Lock()

    def get(self, user_id: str) -> NotificationPreference | None:
        with self._lock:
            entry = self._entries.get(user_id)
            if entry is None:
                return None
            expires_at, preference = entry
            if self._clock() >= expires_at:
                del self._entries[user_id]
                return None
            return _copy(preference)

    def generation(self, user_id: str) -> Generation:
        with self._lock:
            return self._epoch, self._generations.get(user_id, 0)

    def put(
        self, preference: NotificationPreference, *, generation: Generation | None = None
    ) -> bool:
        """Store ``preference`` unless it was invalidated after ``generation``."""

        if self._ttl <= 0:
            return False
        with self._lock:
            current = (self._epoch, self._generations.get(preference.user_id, 0))
            if generation is not None and generation != current:
                return False
            if len(self._entries) >= self._max_entries:
                self._evict_expired()
            if len(self._entries) >= self._max_entries:
                # Drop the entry closest to expiry.
                oldest = min(self._entries, key=lambda key: self._entries[key][0])
                del self._entries[oldest]
            self._entries[preference.user_id] = (self._clock() + self._ttl, _copy(preference))
            return True

    def invalidate(self, user_id: str) -> None:
        with self._lock:
            self._entries.pop(user_id, None)
            self._generations[user_id] = self._generations.get(user_id, 0) + 1

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._generations.clear()
            self._epoch += 1

    def _evict_expired(self) -> None:
        now = self._clock()
        expired = [key for key, (expires_at, _) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]


__all__ = ["Generation", "PreferenceCache"]
