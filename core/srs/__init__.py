"""
SRS - Spaced Repetition Scheduler

Main API for the flashcard scheduler.

This module implements a simplified SM-2 scheduler with:
- A New / Learning / Review card state machine
- Ease-scaled exponential interval growth
- Lapse tracking with ease penalties

Quick start:
    from core import srs

    # Initialize database
    srs.init_db()

    # Grade a card (algorithm only, no DB calls)
    state = srs.apply_grade(card, srs.Rating.GOOD, today)

    # Persist it
    srs.SqlCardStore().save_card_fields(card.id, state)
"""

# Core scheduler API (algorithm logic)
from core.srs.scheduler import (
    apply_grade,
    build_review_event,
    classify_review,
    process_review,
)

# Database API
from core.srs.database import (
    CardStore,
    SqlCardStore,
    init_db,
    reset_db,
    is_test_mode,
    get_database_url,
)

# Constants and parameters
from core.srs.constants import (
    Rating,
    CardStage,
    DEFAULT_EASE,
    MIN_EASE,
    DEFAULT_MAX_NEW_PER_DAY,
    REVIEW_TYPE_NEW,
    REVIEW_TYPE_REVIEW,
)

# Card entity
from core.srs.card_state import (
    Card,
    CardState,
    hydrate_state,
    new_card,
)

from core.srs.errors import (
    SchedulingError,
    InvalidRatingError,
    SessionStateError,
    PersistenceError,
    CardWriteError,
    ReviewLogError,
)


__all__ = [
    # Core algorithm
    "apply_grade",
    "build_review_event",
    "classify_review",
    "process_review",

    # Database operations
    "CardStore",
    "SqlCardStore",
    "init_db",
    "reset_db",
    "is_test_mode",
    "get_database_url",

    # Enums
    "Rating",
    "CardStage",

    # Card entity
    "Card",
    "CardState",
    "hydrate_state",
    "new_card",

    # Errors
    "SchedulingError",
    "InvalidRatingError",
    "SessionStateError",
    "PersistenceError",
    "CardWriteError",
    "ReviewLogError",

    # Parameters
    "DEFAULT_EASE",
    "MIN_EASE",
    "DEFAULT_MAX_NEW_PER_DAY",
    "REVIEW_TYPE_NEW",
    "REVIEW_TYPE_REVIEW",
]
