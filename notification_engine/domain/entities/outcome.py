"""Results returned by the delivery scheduler and the notification store."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Generic, Literal, TypeVar, Union

from .notification import Notification

T = TypeVar("T")

SUPPRESSED_DISABLED = "disabled"


@dataclass(frozen=True)
class Delivered:
    """The notification was persisted and handed to the delivery channels."""

    notification: Notification
    status: Literal["delivered"] = "delivered"


@dataclass(frozen=True)
class Snoozed:
    """The notification was persisted but deferred until ``until``."""

    notification: Notification
    until: datetime
    status: Literal["snoozed"] = "snoozed"


@dataclass(frozen=True)
class Suppressed:
    """The notification was dropped; no record was written."""

    reason: str
    status: Literal["suppressed"] = "suppressed"


DeliveryOutcome = Union[Delivered, Snoozed, Suppressed]


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful store operation."""

    value: T


@dataclass(frozen=True)
class NotFound:
    """The requested record does not exist for the requesting user."""

    detail: str = "Not found"


@dataclass(frozen=True)
class TransientError:
    """The store could not be reached; the caller may retry later."""

    detail: str = "Storage unavailable"


StoreResult = Union[Ok[T], NotFound, TransientError]


__all__ = [
    "Delivered",
    "DeliveryOutcome",
    "NotFound",
    "Ok",
    "SUPPRESSED_DISABLED",
    "Snoozed",
    "StoreResult",
    "Suppressed",
    "TransientError",
]
