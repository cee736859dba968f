"""
SRS Constants and Parameters

All configurable parameters for the scheduler in one place.
"""

from __future__ import annotations

from enum import Enum

from core.srs.errors import InvalidRatingError


# ---- Ratings ----

class Rating(str, Enum):
    """Learner's grade for a single review."""
    AGAIN = "again"   # Retrieval failed
    HARD = "hard"     # Retrieved with high effort
    GOOD = "good"     # Retrieved normally
    EASY = "easy"     # Retrieved fluently

    @classmethod
    def parse(cls, value: object) -> "Rating":
        """
        Convert user input into a Rating.

        Raises:
            InvalidRatingError: if value is not one of again/hard/good/easy
        """
        if isinstance(value, Rating):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidRatingError(f"Unknown rating: {value!r}")


# ---- Card Stages ----

class CardStage(str, Enum):
    """Position of a card in the spaced-repetition state machine."""
    NEW = "new"
    LEARNING = "learning"
    REVIEW = "review"
    RELEARNING = "relearning"  # Accepted on input; the scheduler never produces it


# ---- Review Event Classification ----

REVIEW_TYPE_NEW = "new"
REVIEW_TYPE_REVIEW = "review"


# ---- Ease Factor ----

DEFAULT_EASE = 2.5
MIN_EASE = 1.3

EASY_EASE_BONUS = 0.15      # Added on EASY in New, Learning and Review
LAPSE_EASE_PENALTY = 0.20   # Review + AGAIN
HARD_EASE_PENALTY = 0.15    # Review + HARD


# ---- Intervals (days) ----

FIRST_STEP_INTERVAL = 1     # AGAIN/HARD on a new or learning card
GRADUATING_INTERVAL = 3     # GOOD on a new or learning card
EASY_INTERVAL = 4           # EASY on a new or learning card
MIN_INTERVAL = 1

HARD_INTERVAL_MULTIPLIER = 1.2
EASY_BONUS = 1.3            # Extra multiplier on top of ease for Review + EASY


# ---- Policy switches ----

# HARD on a Learning card repeats the first step (stays Learning).
# Set True to graduate it like GOOD instead.
LEARNING_HARD_GRADUATES = False


# ---- Queue Building ----

DEFAULT_MAX_NEW_PER_DAY = 10


# ---- Persistence ----

DEFAULT_FLUSH_BATCH_SIZE = 5
DEFAULT_WRITE_RETRIES = 3
LOAD_PAGE_SIZE = 1000
