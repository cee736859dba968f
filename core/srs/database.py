"""
Database - Card and review-event storage

Handles all database operations for cards and review events.
Uses SQLAlchemy ORM (SQLite by default, any SQLAlchemy URL via DATABASE_URL).

This module handles ONLY database I/O.
Algorithm logic is handled by the scheduler module.
"""

from __future__ import annotations

import logging
import os
import time
from abc import ABC, abstractmethod
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Iterable, Optional, Sequence, Tuple, Union

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from core.srs.card_state import Card, CardState
from core.srs.constants import DEFAULT_EASE, LOAD_PAGE_SIZE, CardStage
from core.srs.errors import CardWriteError, ReviewLogError
from core.srs.models import Base, CardModel, ReviewEventModel

logger = logging.getLogger(__name__)


# Database configuration
DB_DIR = Path(__file__).parent.parent.parent / "logs"
PROD_DB_NAME = "flashcards_db"
TEST_DB_NAME = "test_flashcards_db"

LOCKED_MESSAGES = {"database is locked", "database is busy"}

_ENGINES: dict[str, Engine] = {}

CardUpdate = Tuple[Union[int, str], CardState]


def is_test_mode() -> bool:
    """Check if running in test mode."""
    return os.getenv("TEST_MODE", "false").lower() == "true"


def get_database_url() -> str:
    """
    Get the database URL from environment variables.

    DATABASE_URL wins when set; otherwise a SQLite file under logs/.
    In TEST_MODE, 'flashcards_db' in the URL is replaced with
    'test_flashcards_db' so tests never touch production data.

    Returns:
        SQLAlchemy database URL
    """
    base_url = os.getenv("DATABASE_URL")
    if not base_url:
        base_url = f"sqlite:///{DB_DIR / (PROD_DB_NAME + '.sqlite')}"

    if is_test_mode():
        return base_url.replace(PROD_DB_NAME, TEST_DB_NAME)
    return base_url


def get_engine(database_url: Optional[str] = None) -> Engine:
    """
    Get (and cache) the SQLAlchemy engine for a database URL.

    Returns:
        SQLAlchemy Engine instance
    """
    url = database_url or get_database_url()
    engine = _ENGINES.get(url)
    if engine is not None:
        return engine

    if url.startswith("sqlite"):
        DB_DIR.mkdir(exist_ok=True)
        engine = create_engine(url, echo=False)
    else:
        engine = create_engine(
            url,
            pool_size=5,           # Keep 5 connections open
            max_overflow=10,       # Allow up to 10 extra connections
            pool_pre_ping=True,    # Verify connections before use
            echo=False
        )
    _ENGINES[url] = engine
    return engine


def get_session(database_url: Optional[str] = None) -> Session:
    """
    Get a SQLAlchemy session for database operations.

    Returns:
        SQLAlchemy Session instance
    """
    engine = get_engine(database_url)
    SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)
    return SessionLocal()


def init_db(database_url: Optional[str] = None) -> None:
    """
    Initialize database schema if tables don't exist.

    Safe to call multiple times - only creates missing tables.
    """
    engine = get_engine(database_url)
    existing_tables = inspect(engine).get_table_names()
    if 'cards' not in existing_tables or 'review_events' not in existing_tables:
        Base.metadata.create_all(engine)
        logger.info("Created flashcard tables at %s", engine.url)


def reset_db(database_url: Optional[str] = None) -> None:
    """
    DANGEROUS: Delete all data and recreate tables.

    Only use this for testing or when you want to start fresh.
    All cards and review history will be lost!
    """
    engine = get_engine(database_url)
    Base.metadata.drop_all(engine)
    logger.warning("All flashcard tables dropped")
    init_db(database_url)


def _is_lock_error(error: OperationalError) -> bool:
    """Return True if the OperationalError was caused by a lock."""
    message = str(error).lower()
    return any(token in message for token in LOCKED_MESSAGES)


def safe_commit(
    session: Session,
    retries: int = 5,
    initial_delay: float = 0.1,
) -> None:
    """
    Commit the current transaction, retrying when SQLite is locked.

    The delay is doubled after every attempt.

    Raises:
        OperationalError: if the commit still fails after `retries`
            attempts, or the error is unrelated to locking
    """
    delay = initial_delay
    for attempt in range(retries):
        try:
            session.commit()
            return
        except OperationalError as exc:
            session.rollback()
            if attempt == retries - 1 or not _is_lock_error(exc):
                raise
            logger.warning("Database locked, retrying commit (%d/%d)", attempt + 1, retries)
            time.sleep(delay)
            delay *= 2


# ---- Storage port ----

class CardStore(ABC):
    """
    Storage collaborator the session controller depends on.

    Implementations:
        - SqlCardStore: SQLAlchemy tables (this module)
        - in-memory fakes in the test suite
    """

    @abstractmethod
    def load_cards(self) -> list[Card]:
        """Return the full card collection (no ordering guarantee)."""

    @abstractmethod
    def batch_save_card_fields(self, updates: Sequence[CardUpdate]) -> None:
        """
        Persist scheduling fields for several cards, keyed by id.

        Must be idempotent under retry.

        Raises:
            CardWriteError: if any card could not be written
        """

    @abstractmethod
    def append_review_events(self, events: Sequence[dict]) -> None:
        """
        Append immutable review-event records.

        Raises:
            ReviewLogError: if the events could not be written
        """

    def save_card_fields(self, card_id: Union[int, str], state: CardState) -> None:
        """Persist scheduling fields for one card."""
        self.batch_save_card_fields([(card_id, state)])


class SqlCardStore(CardStore):
    """CardStore backed by the SQLAlchemy `cards` / `review_events` tables."""

    def __init__(self, database_url: Optional[str] = None, page_size: int = LOAD_PAGE_SIZE):
        self.database_url = database_url or get_database_url()
        self.page_size = page_size

    def _session(self) -> Session:
        return get_session(self.database_url)

    def load_cards(self) -> list[Card]:
        """
        Load every card, one page of `page_size` rows at a time.
        """
        session = self._session()
        try:
            cards: list[Card] = []
            offset = 0
            while True:
                rows = (
                    session.query(CardModel)
                    .order_by(CardModel.id)
                    .offset(offset)
                    .limit(self.page_size)
                    .all()
                )
                cards.extend(_row_to_card(row) for row in rows)
                if len(rows) < self.page_size:
                    break
                offset += self.page_size
            return cards
        finally:
            session.close()

    def get_card(self, card_id: Union[int, str]) -> Optional[Card]:
        session = self._session()
        try:
            row = session.get(CardModel, int(card_id))
            return _row_to_card(row) if row is not None else None
        finally:
            session.close()

    def add_card(self, front: str, back: str, image_url: Optional[str] = None) -> Card:
        """
        Create a card in its initial lifecycle state.

        Returns:
            The stored card (with its database id)
        """
        session = self._session()
        try:
            row = CardModel(
                front=front,
                back=back,
                image_url=image_url,
                stage=CardStage.NEW.value,
                interval_days=0,
                ease=DEFAULT_EASE,
                reps=0,
                lapses=0,
                first_seen=None,
                last_reviewed=None,
                due_date=None,
                suspended=False,
            )
            session.add(row)
            safe_commit(session)
            return _row_to_card(row)
        finally:
            session.close()

    def batch_save_card_fields(self, updates: Sequence[CardUpdate]) -> None:
        """
        Save scheduling fields for many cards in a single transaction.

        Writing the same values twice leaves the row unchanged.
        """
        if not updates:
            return

        card_ids = [card_id for card_id, _ in updates]
        session = self._session()
        try:
            for card_id, state in updates:
                row = session.get(CardModel, int(card_id))
                if row is None:
                    raise CardWriteError(f"Card {card_id} not found", card_ids=[card_id])
                row.stage = state.stage.value
                row.interval_days = state.interval_days
                row.ease = state.ease
                row.reps = state.reps
                row.lapses = state.lapses
                row.first_seen = state.first_seen
                row.last_reviewed = state.last_reviewed
                row.due_date = state.due_date
                row.suspended = state.suspended
            safe_commit(session)
        except CardWriteError:
            session.rollback()
            raise
        except (SQLAlchemyError, ValueError) as exc:
            session.rollback()
            raise CardWriteError(f"Failed to save cards {card_ids}: {exc}", card_ids=card_ids) from exc
        finally:
            session.close()

    def append_review_events(self, events: Sequence[dict]) -> None:
        """
        Log multiple review events in a single database transaction.

        Args:
            events: Event dicts as built by scheduler.build_review_event
        """
        if not events:
            return

        session = self._session()
        try:
            for event in events:
                session.add(_event_to_row(event))
            safe_commit(session)
        except (SQLAlchemyError, KeyError, ValueError) as exc:
            session.rollback()
            raise ReviewLogError(f"Failed to log {len(events)} review events: {exc}") from exc
        finally:
            session.close()

    def get_review_events(self, since: Optional[date] = None) -> list[dict]:
        """
        Get review events, oldest first.

        Args:
            since: Only events on or after this date
        """
        session = self._session()
        try:
            query = session.query(ReviewEventModel)
            if since is not None:
                query = query.filter(ReviewEventModel.event_date >= since)
            rows = query.order_by(ReviewEventModel.timestamp, ReviewEventModel.id).all()
            return [_row_to_event(row) for row in rows]
        finally:
            session.close()


# ---- Row conversion ----

def _row_to_card(row: CardModel) -> Card:
    return Card.model_validate({
        "id": row.id,
        "front": row.front,
        "back": row.back,
        "image_url": row.image_url,
        "stage": row.stage,
        "interval_days": row.interval_days,
        "ease": row.ease,
        "reps": row.reps,
        "lapses": row.lapses,
        "first_seen": row.first_seen,
        "last_reviewed": row.last_reviewed,
        "due_date": row.due_date,
        "suspended": row.suspended,
    })


def _event_to_row(event: dict) -> ReviewEventModel:
    timestamp = event.get("timestamp") or datetime.now(timezone.utc)
    return ReviewEventModel(
        card_id=int(event["card_id"]),
        rating=str(event["rating"]),
        event_date=event["event_date"],
        review_type=event["review_type"],
        timestamp=timestamp,
        stage_before=event.get("stage_before"),
        stage_after=event.get("stage_after"),
        interval_before=event.get("interval_before"),
        interval_after=event.get("interval_after"),
        ease_before=event.get("ease_before"),
        ease_after=event.get("ease_after"),
        session_id=event.get("session_id"),
        session_position=event.get("session_position"),
    )


def _row_to_event(row: ReviewEventModel) -> dict:
    return {
        "id": row.id,
        "card_id": row.card_id,
        "rating": row.rating,
        "event_date": row.event_date,
        "review_type": row.review_type,
        "timestamp": row.timestamp,
        "stage_before": row.stage_before,
        "stage_after": row.stage_after,
        "interval_before": row.interval_before,
        "interval_after": row.interval_after,
        "ease_before": row.ease_before,
        "ease_after": row.ease_after,
        "session_id": row.session_id,
        "session_position": row.session_position,
    }


def add_cards(store: SqlCardStore, pairs: Iterable[Tuple[str, str]]) -> list[Card]:
    """Create one new card per (front, back) pair."""
    return [store.add_card(front, back) for front, back in pairs]
