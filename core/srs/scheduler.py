"""
Scheduler - SM-2 style grading logic

Pure scheduling and state updates (no database calls).

Main workflow:
1. Hydrate card fields (defaults for missing/malformed values)
2. Apply the stage transition for the rating
3. Clamp interval, recompute due date
4. Return updated state + review event data

Stage machine (three canonical stages; RELEARNING is accepted on input
only: AGAIN repeats it at 1d, anything else graduates at 3d):

    NEW        again/hard -> 1d LEARNING | good -> 3d REVIEW | easy -> 4d REVIEW, ease+0.15
    LEARNING   again/hard -> 1d LEARNING | good -> 3d REVIEW | easy -> 4d REVIEW, ease+0.15
    REVIEW     again -> 1d LEARNING, lapse, ease-0.20
               hard  -> interval*1.2, ease-0.15
               good  -> interval*ease
               easy  -> interval*ease*1.3, ease+0.15

Database I/O is handled by the database module.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Mapping, Optional, Tuple, Union

from core.srs import dates
from core.srs.card_state import Card, CardState, hydrate_state, round_half_up
from core.srs.constants import (
    EASY_BONUS,
    EASY_EASE_BONUS,
    EASY_INTERVAL,
    FIRST_STEP_INTERVAL,
    GRADUATING_INTERVAL,
    HARD_EASE_PENALTY,
    HARD_INTERVAL_MULTIPLIER,
    LAPSE_EASE_PENALTY,
    LEARNING_HARD_GRADUATES,
    MIN_EASE,
    MIN_INTERVAL,
    REVIEW_TYPE_NEW,
    REVIEW_TYPE_REVIEW,
    CardStage,
    Rating,
)


def apply_grade(
    card: Union[Card, CardState, Mapping[str, Any]],
    rating: Union[Rating, str],
    today: Optional[date] = None,
) -> CardState:
    """
    Compute the new scheduling fields for a graded card.

    Deterministic: same card, rating and date always give the same result.
    Caller is responsible for:
    1. Persisting the returned fields
    2. Appending the review event

    Args:
        card: Card entity, hydrated CardState, or raw storage row
        rating: again / hard / good / easy
        today: Grading date (defaults to today)

    Returns:
        CardState with stage, interval, ease, counters, dates and
        suspended=False (grading always resumes a suspended card)

    Raises:
        InvalidRatingError: if rating is not a known value
    """
    rating = Rating.parse(rating)
    if today is None:
        today = dates.today()

    state = card if isinstance(card, CardState) else hydrate_state(card)

    stage = state.stage
    interval = state.interval_days
    ease = state.ease
    lapses = state.lapses

    if stage == CardStage.RELEARNING:
        stage, interval = _relearning_step(rating)
    elif stage in (CardStage.NEW, CardStage.LEARNING):
        stage, interval, ease = _learning_step(stage, rating, ease)
    else:
        stage, interval, ease, lapses = _review_step(rating, interval, ease, lapses)

    interval = max(MIN_INTERVAL, interval)
    ease = max(MIN_EASE, ease)

    return CardState(
        stage=stage,
        interval_days=interval,
        ease=ease,
        reps=state.reps + 1,
        lapses=lapses,
        first_seen=state.first_seen or today,
        last_reviewed=today,
        due_date=dates.add_days(today, interval),
        suspended=False,
    )


def _learning_step(
    stage: CardStage,
    rating: Rating,
    ease: float
) -> Tuple[CardStage, int, float]:
    """
    Transition for a card that has not graduated yet.

    NEW promotes to REVIEW only when the interval exceeds one day.
    """
    if rating == Rating.AGAIN:
        interval = FIRST_STEP_INTERVAL
    elif rating == Rating.HARD:
        if stage != CardStage.NEW and LEARNING_HARD_GRADUATES:
            interval = GRADUATING_INTERVAL
        else:
            interval = FIRST_STEP_INTERVAL
    elif rating == Rating.GOOD:
        interval = GRADUATING_INTERVAL
    else:
        interval = EASY_INTERVAL
        ease += EASY_EASE_BONUS

    next_stage = CardStage.REVIEW if interval > FIRST_STEP_INTERVAL else CardStage.LEARNING
    return next_stage, interval, ease


def _relearning_step(rating: Rating) -> Tuple[CardStage, int]:
    """Legacy relearning cards: AGAIN repeats, anything else graduates."""
    if rating == Rating.AGAIN:
        return CardStage.RELEARNING, FIRST_STEP_INTERVAL
    return CardStage.REVIEW, GRADUATING_INTERVAL


def _review_step(
    rating: Rating,
    interval: int,
    ease: float,
    lapses: int
) -> Tuple[CardStage, int, float, int]:
    """Transition for a graduated card; AGAIN is a lapse back to LEARNING."""
    if rating == Rating.AGAIN:
        return (
            CardStage.LEARNING,
            FIRST_STEP_INTERVAL,
            max(MIN_EASE, ease - LAPSE_EASE_PENALTY),
            lapses + 1,
        )

    if rating == Rating.HARD:
        ease = max(MIN_EASE, ease - HARD_EASE_PENALTY)
        interval = round_half_up(interval * HARD_INTERVAL_MULTIPLIER)
    elif rating == Rating.GOOD:
        interval = round_half_up(interval * ease)
    else:
        ease += EASY_EASE_BONUS
        interval = round_half_up(interval * ease * EASY_BONUS)

    return CardStage.REVIEW, interval, ease, lapses


def classify_review(before: CardState) -> str:
    """'new' when this grading sets first_seen for the first time, else 'review'."""
    return REVIEW_TYPE_NEW if before.first_seen is None else REVIEW_TYPE_REVIEW


def build_review_event(
    card: Union[Card, Mapping[str, Any]],
    rating: Union[Rating, str],
    before: CardState,
    after: CardState,
    timestamp: Optional[datetime] = None,
) -> dict:
    """
    Build the append-only review event for one grading action.

    Returns:
        Event dict ready to pass to the review-event collaborator
    """
    rating = Rating.parse(rating)
    if timestamp is None:
        timestamp = datetime.now(timezone.utc)
    card_id = card.id if isinstance(card, Card) else card.get("id")

    return {
        "card_id": card_id,
        "rating": rating.value,
        "event_date": after.last_reviewed,
        "review_type": classify_review(before),
        "timestamp": timestamp,
        "stage_before": before.stage.value,
        "stage_after": after.stage.value,
        "interval_before": before.interval_days,
        "interval_after": after.interval_days,
        "ease_before": before.ease,
        "ease_after": after.ease,
        "session_id": None,  # Will be set by caller if needed
        "session_position": None,  # Will be set by caller if needed
    }


def process_review(
    card: Card,
    rating: Union[Rating, str],
    today: Optional[date] = None,
    timestamp: Optional[datetime] = None,
) -> Tuple[Card, CardState, dict]:
    """
    Grade a card and return (updated_card, new_state, event_data).

    No database calls; the card passed in is not modified.
    """
    rating = Rating.parse(rating)
    if today is None:
        today = dates.today()

    before = hydrate_state(card)
    after = apply_grade(before, rating, today)
    event_data = build_review_event(card, rating, before, after, timestamp)
    return card.with_state(after), after, event_data
