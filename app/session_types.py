"""
Session value types used by the session controller.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from core.srs import Card, Rating


class SessionState(str, Enum):
    """Lifecycle of one review session."""
    IDLE = "idle"              # No active queue
    PRESENTING = "presenting"  # Queue head shown, waiting for a grade
    FLUSHING = "flushing"      # Queue exhausted, buffered writes not yet saved
    COMPLETE = "complete"      # Everything saved, summary reported


@dataclass(frozen=True)
class SessionSummary:
    """
    Counts reported when a session ends.
    """
    session_id: Optional[str]
    graded: int
    new_count: int
    review_count: int
    again_count: int
    events_unsaved: int = 0
    completed: bool = True  # False when the learner quit early

    @property
    def accuracy(self) -> Optional[float]:
        if self.graded == 0:
            return None
        return (self.graded - self.again_count) / self.graded


@dataclass(frozen=True)
class GradeResult:
    """
    Outcome of grading the presented card.
    """
    card: Card
    rating: Rating
    review_type: str          # "new" or "review"
    flushed: bool             # True once this grade's card write is saved
    summary: Optional[SessionSummary] = None  # Set when this grade ended the session
