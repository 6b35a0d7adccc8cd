"""Domain value describing the urgency assigned to a notification."""

from __future__ import annotations

from dataclasses import dataclass

from .notification import PRIORITY_MEDIUM

FALLBACK_REASON = "Default priority"


@dataclass(frozen=True)
class PriorityAssessment:
    """Urgency score in ``[0, 1]``, its explanation and the discrete level."""

    score: float
    reason: str
    priority: str

    @classmethod
    def fallback(cls) -> "PriorityAssessment":
        """Return the deterministic assessment used when classification fails."""

        return cls(score=0.5, reason=FALLBACK_REASON, priority=PRIORITY_MEDIUM)


__all__ = ["FALLBACK_REASON", "PriorityAssessment"]
