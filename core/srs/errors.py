"""
Exception hierarchy for the scheduling engine and its collaborators.
"""

from __future__ import annotations


class SchedulingError(Exception):
    """Base class for all scheduler errors."""


class InvalidRatingError(SchedulingError, ValueError):
    """Raised when a rating is not one of again/hard/good/easy."""


class SessionStateError(SchedulingError, RuntimeError):
    """Raised when the session controller is driven out of order."""


class PersistenceError(SchedulingError):
    """Base class for storage failures."""


class CardWriteError(PersistenceError):
    """
    Card scheduling fields could not be saved.

    Not best-effort: the grading step is not durably committed.
    """

    def __init__(self, message: str, card_ids: list | None = None):
        super().__init__(message)
        self.card_ids = list(card_ids or [])


class ReviewLogError(PersistenceError):
    """Review event append failed (audit trail only, best-effort)."""
