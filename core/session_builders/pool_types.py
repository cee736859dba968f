"""
Typed pool models used by the queue builder.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from core.srs.card_state import Card


@dataclass
class QueuePartitions:
    """
    Today's eligible cards, split by why they are eligible.

    Suspended cards never appear in any partition.
    """
    today: date
    due: list[Card] = field(default_factory=list)
    ahead: list[Card] = field(default_factory=list)  # due exactly tomorrow
    new: list[Card] = field(default_factory=list)    # never shown
    introduced_today: int = 0

    def remaining_quota(self, max_new_per_day: int) -> int:
        """New cards still allowed today (never negative)."""
        return max(0, max_new_per_day - self.introduced_today)


@dataclass(frozen=True)
class DaySummary:
    """
    Counts for the home screen.
    """
    new_today: int
    review_today: int
    new_tomorrow: int
    review_tomorrow: int
