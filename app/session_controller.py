"""
Session lifecycle controller.

Owns all state for one review session (queue, position, write buffers,
counters) and drives cards one at a time through the scheduler:

    IDLE -> start() -> PRESENTING -> grade() -> PRESENTING ... -> COMPLETE -> IDLE

Grades are applied to the in-memory cards immediately and written to the
store in batches. A card-write failure is raised to the caller and the
unsaved fields stay buffered; the session is never reported complete until
every buffered card write has been saved.
"""

from __future__ import annotations

import logging
import random
import time
import uuid
from datetime import date, datetime, timezone
from typing import Any, Callable, Optional, Sequence, Union

from app.session_types import GradeResult, SessionState, SessionSummary
from core.session_builders import build_queue
from core.settings import StudySettings
from core.srs import dates
from core.srs.card_state import Card, CardState, hydrate_state
from core.srs.constants import REVIEW_TYPE_NEW, Rating
from core.srs.database import CardStore
from core.srs.errors import (
    CardWriteError,
    PersistenceError,
    ReviewLogError,
    SessionStateError,
)
from core.srs.scheduler import apply_grade, build_review_event

logger = logging.getLogger(__name__)


class SessionController:
    """
    Drives one learner's review queue to completion.
    """

    def __init__(
        self,
        store: CardStore,
        settings: Optional[StudySettings] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[dates.Clock] = None,
        retry_delay: float = 0.2,
    ):
        self.store = store
        self.settings = settings or StudySettings()
        self.rng = rng
        self.clock = clock or dates.today
        self.retry_delay = retry_delay
        self.last_summary: Optional[SessionSummary] = None
        self.nothing_due = False
        self._reset()

    def _reset(self) -> None:
        self.state = SessionState.IDLE
        self.session_id: Optional[str] = None
        self.today: Optional[date] = None
        self.cards: dict[Any, Card] = {}
        self.queue: list[Card] = []
        self.total = 0
        self.position = 0
        self.revealed = False

        self._pending_cards: dict[Any, CardState] = {}
        self._pending_events: list[dict] = []

        self.graded = 0
        self.new_count = 0
        self.review_count = 0
        self.again_count = 0
        self.events_unsaved = 0

    # ---- Queue ----

    def start(self, today: Optional[date] = None) -> SessionState:
        """
        Load all cards and build today's queue.

        An empty queue is not an error: the controller stays IDLE and
        `nothing_due` is set.
        """
        if self.state in (SessionState.PRESENTING, SessionState.FLUSHING):
            raise SessionStateError("A session is already active; finish it first")

        self._reset()
        self.today = today or self.clock()

        all_cards = self.store.load_cards()
        self.cards = {card.id: card for card in all_cards}
        self.queue = build_queue(
            all_cards,
            self.today,
            max_new_per_day=self.settings.max_new_per_day,
            rng=self.rng,
            review_ahead=self.settings.review_ahead,
        )
        self.total = len(self.queue)
        self.nothing_due = not self.queue

        if self.nothing_due:
            logger.info("Nothing due on %s", self.today.isoformat())
            return self.state

        self.session_id = str(uuid.uuid4())
        self.state = SessionState.PRESENTING
        return self.state

    @property
    def current_card(self) -> Optional[Card]:
        if self.state != SessionState.PRESENTING or not self.queue:
            return None
        return self.queue[0]

    @property
    def progress(self) -> tuple[int, int]:
        """(cards graded so far, queue length at start)"""
        return self.position, self.total

    @property
    def remaining(self) -> int:
        return len(self.queue)

    @property
    def pending_writes(self) -> int:
        return len(self._pending_cards)

    def reveal(self) -> str:
        """Show the back side of the presented card."""
        card = self._require_card()
        self.revealed = True
        return card.back

    # ---- Grading ----

    def grade(self, rating: Union[Rating, str]) -> GradeResult:
        """
        Grade the presented card and advance.

        Raises:
            InvalidRatingError: unknown rating (nothing is changed)
            SessionStateError: no card is being presented
            CardWriteError: the batch containing this grade could not be
                saved; the local update and advance have still happened
        """
        rating = Rating.parse(rating)
        card = self._require_card()

        before = hydrate_state(card)
        after = apply_grade(before, rating, self.today)
        event = build_review_event(card, rating, before, after, datetime.now(timezone.utc))
        event["session_id"] = self.session_id
        event["session_position"] = self.position

        updated = card.with_state(after)
        self.cards[card.id] = updated
        self._pending_cards[card.id] = after
        self._pending_events.append(event)

        self.queue.pop(0)
        self.position += 1
        self.revealed = False
        self._count(rating, event["review_type"])

        finished = not self.queue
        if finished:
            self.state = SessionState.FLUSHING

        if finished or len(self._pending_cards) >= self.settings.flush_batch_size:
            self.flush(final=finished)

        summary = self._complete() if finished else None
        return GradeResult(
            card=updated,
            rating=rating,
            review_type=event["review_type"],
            flushed=card.id not in self._pending_cards,
            summary=summary,
        )

    def _count(self, rating: Rating, review_type: str) -> None:
        self.graded += 1
        if review_type == REVIEW_TYPE_NEW:
            self.new_count += 1
        else:
            self.review_count += 1
        if rating == Rating.AGAIN:
            self.again_count += 1

    def _require_card(self) -> Card:
        card = self.current_card
        if card is None:
            raise SessionStateError("No card is being presented")
        return card

    # ---- Persistence ----

    def flush(self, final: bool = False) -> None:
        """
        Write buffered card fields, then buffered review events.

        Card writes are required: failures raise CardWriteError and keep the
        buffer. Review events are best-effort: failures are logged and kept
        for the next flush, or dropped and counted when `final` is set.
        """
        if self._pending_cards:
            updates = list(self._pending_cards.items())
            self._with_retries(self.store.batch_save_card_fields, updates, "card write")
            for card_id, state in updates:
                if self._pending_cards.get(card_id) is state:
                    del self._pending_cards[card_id]
            logger.info("Saved %d card(s)", len(updates))

        if self._pending_events:
            events = list(self._pending_events)
            try:
                self._with_retries(self.store.append_review_events, events, "review log")
            except ReviewLogError as exc:
                if final:
                    logger.warning("Dropping %d unsaved review event(s): %s", len(events), exc)
                    self.events_unsaved += len(events)
                    self._pending_events = []
                else:
                    logger.warning("Review log write failed, will retry on next flush: %s", exc)
                return
            self._pending_events = self._pending_events[len(events):]

    def _with_retries(self, write: Callable[[Sequence], None], payload: Sequence, label: str) -> None:
        """
        Call a store write up to `write_retries` times with exponential backoff.

        Re-raises the last PersistenceError; other storage exceptions are
        wrapped as CardWriteError / ReviewLogError by label.
        """
        attempts = self.settings.write_retries
        delay = self.retry_delay
        for attempt in range(1, attempts + 1):
            try:
                write(payload)
                return
            except (PersistenceError, OSError) as exc:
                if attempt == attempts:
                    logger.error("%s failed after %d attempt(s): %s", label, attempts, exc)
                    if isinstance(exc, PersistenceError):
                        raise
                    if label == "card write":
                        raise CardWriteError(str(exc), card_ids=[cid for cid, _ in payload]) from exc
                    raise ReviewLogError(str(exc)) from exc
                logger.warning("%s failed (attempt %d/%d): %s", label, attempt, attempts, exc)
                if delay > 0:
                    time.sleep(delay)
                    delay *= 2

    # ---- Completion ----

    def finish(self) -> SessionSummary:
        """
        Flush everything and end the session (early exit included).

        Raises:
            SessionStateError: no session is active
            CardWriteError: buffered card fields still cannot be saved; the
                session stays open so the caller can retry
        """
        if self.state == SessionState.IDLE:
            raise SessionStateError("No active session")

        self.flush(final=True)
        return self._complete()

    def abandon(self) -> SessionSummary:
        """Alias for finish() used when the learner navigates away."""
        return self.finish()

    def _complete(self) -> Optional[SessionSummary]:
        if self._pending_cards:
            return None

        summary = SessionSummary(
            session_id=self.session_id,
            graded=self.graded,
            new_count=self.new_count,
            review_count=self.review_count,
            again_count=self.again_count,
            events_unsaved=self.events_unsaved + len(self._pending_events),
            completed=not self.queue,
        )
        self.state = SessionState.COMPLETE
        logger.info(
            "Session %s complete: %d graded (%d new, %d review)",
            summary.session_id,
            summary.graded,
            summary.new_count,
            summary.review_count,
        )
        self.last_summary = summary
        self._reset()
        return summary
