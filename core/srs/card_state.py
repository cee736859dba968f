"""
Card State - the Card entity and its scheduling fields

A card is one learnable fact (front/back text pair, optional hint image)
plus the scheduling fields the scheduler owns:

- stage: New / Learning / Review (Relearning accepted on input)
- interval_days: days until next showing
- ease: multiplicative growth factor (floor 1.3)
- reps / lapses: review and forgetting counters
- first_seen / last_reviewed / due_date: calendar dates

Cards are read from externally edited storage, so every scheduling field is
defaulted on the way in instead of raising.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Mapping, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from core.srs.constants import DEFAULT_EASE, MIN_EASE, CardStage
from core.srs.dates import add_days, parse_date


def round_half_up(value: float) -> int:
    """Round to the nearest day, halves away from zero (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def _coerce_count(value: Any) -> int:
    """Non-negative integer, or 0 for anything malformed."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(number) or math.isinf(number) or number < 0:
        return 0
    return round_half_up(number)


def _coerce_ease(value: Any) -> float:
    """Ease factor, DEFAULT_EASE when missing/invalid, never below MIN_EASE."""
    try:
        ease = float(value)
    except (TypeError, ValueError):
        return DEFAULT_EASE
    if math.isnan(ease) or math.isinf(ease) or ease <= 0:
        return DEFAULT_EASE
    return max(MIN_EASE, ease)


def _coerce_stage(value: Any) -> CardStage:
    if isinstance(value, CardStage):
        return value
    if isinstance(value, str):
        try:
            return CardStage(value.strip().lower())
        except ValueError:
            pass
    return CardStage.NEW


class Card(BaseModel):
    """
    A single flashcard as stored by the card collaborator.

    `front`/`back` also accept the `dutch`/`english` column names used by
    imported decks, and `stage` accepts `card_type`/`type`.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: Union[int, str]
    front: str = Field(default="", validation_alias=AliasChoices("front", "dutch"))
    back: str = Field(default="", validation_alias=AliasChoices("back", "english"))
    image_url: Optional[str] = None

    stage: CardStage = Field(
        default=CardStage.NEW,
        validation_alias=AliasChoices("stage", "card_type", "type"),
    )
    interval_days: int = Field(default=0, validation_alias=AliasChoices("interval_days", "interval"))
    ease: float = DEFAULT_EASE
    reps: int = 0
    lapses: int = 0

    first_seen: Optional[date] = None
    last_reviewed: Optional[date] = None
    due_date: Optional[date] = None
    suspended: bool = False

    @field_validator("front", "back", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("stage", mode="before")
    @classmethod
    def _stage(cls, value: Any) -> CardStage:
        return _coerce_stage(value)

    @field_validator("interval_days", "reps", "lapses", mode="before")
    @classmethod
    def _counts(cls, value: Any) -> int:
        return _coerce_count(value)

    @field_validator("ease", mode="before")
    @classmethod
    def _ease(cls, value: Any) -> float:
        return _coerce_ease(value)

    @field_validator("first_seen", "last_reviewed", "due_date", mode="before")
    @classmethod
    def _dates(cls, value: Any) -> Optional[date]:
        return parse_date(value)

    @field_validator("suspended", mode="before")
    @classmethod
    def _suspended(cls, value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes")
        return bool(value)

    # ---- Queue predicates ----

    @property
    def is_new(self) -> bool:
        """Never shown to the learner (eligible for the new-card quota)."""
        return self.stage == CardStage.NEW and self.first_seen is None

    def is_due(self, today: date) -> bool:
        """Past the New stage and scheduled on or before `today`."""
        return (
            self.stage != CardStage.NEW
            and self.due_date is not None
            and self.due_date <= today
        )

    def is_due_tomorrow(self, today: date) -> bool:
        return (
            self.stage != CardStage.NEW
            and self.due_date is not None
            and self.due_date == add_days(today, 1)
        )

    def with_state(self, state: "CardState") -> "Card":
        """Copy of this card with the scheduling fields replaced."""
        return self.model_copy(update=state.as_fields())


@dataclass(frozen=True)
class CardState:
    """
    Fully-typed scheduling state for one card.

    This is both the scheduler's input (after defaults are applied) and its
    output (the fields to write back).
    """
    stage: CardStage = CardStage.NEW
    interval_days: int = 0
    ease: float = DEFAULT_EASE
    reps: int = 0
    lapses: int = 0
    first_seen: Optional[date] = None
    last_reviewed: Optional[date] = None
    due_date: Optional[date] = None
    suspended: bool = False

    def as_fields(self) -> dict:
        """Scheduling fields as a plain dict, keyed like the Card entity."""
        return asdict(self)


def hydrate_state(card: Union[Card, Mapping[str, Any]]) -> CardState:
    """
    Build a validated CardState from a Card or a raw storage row.

    Missing or malformed fields fall back to the lifecycle defaults
    (stage=new, interval 0, ease 2.5, counters 0).
    """
    if not isinstance(card, Card):
        row = dict(card)
        row.setdefault("id", "")
        card = Card.model_validate(row)

    return CardState(
        stage=card.stage,
        interval_days=card.interval_days,
        ease=card.ease,
        reps=card.reps,
        lapses=card.lapses,
        first_seen=card.first_seen,
        last_reviewed=card.last_reviewed,
        due_date=card.due_date,
        suspended=card.suspended,
    )


def new_card(
    card_id: Union[int, str],
    front: str,
    back: str,
    image_url: Optional[str] = None,
) -> Card:
    """Create a card in its initial lifecycle state."""
    return Card(id=card_id, front=front, back=back, image_url=image_url)
