"""Quiet-hours window evaluation."""

from __future__ import annotations

from datetime import datetime, time, timedelta


def _minutes_since_midnight(value: time | datetime) -> int:
    return value.hour * 60 + value.minute


def is_quiet(start: time | None, end: time | None, now: datetime) -> bool:
    """Return ``True`` when ``now`` falls inside the ``[start, end)`` window.

    A window whose ``start`` is not before ``end`` spans midnight (for example
    22:00-08:00). A missing bound disables quiet hours.
    """

    if start is None or end is None:
        return False

    current = _minutes_since_midnight(now)
    quiet_start = _minutes_since_midnight(start)
    quiet_end = _minutes_since_midnight(end)

    if quiet_start < quiet_end:
        return quiet_start <= current < quiet_end
    return current >= quiet_start or current < quiet_end


def next_window_end(end: time, now: datetime) -> datetime:
    """Return the next instant at which ``end`` occurs, in ``now``'s timezone.

    Today's occurrence is returned unless it already passed, in which case the
    occurrence of the following day is used.
    """

    end_of_day = time(end.hour, end.minute)
    candidate = datetime.combine(now.date(), end_of_day, tzinfo=now.tzinfo)
    if candidate < now:
        candidate = datetime.combine(
            now.date() + timedelta(days=1), end_of_day, tzinfo=now.tzinfo
        )
    return candidate


__all__ = ["is_quiet", "next_window_end"]
