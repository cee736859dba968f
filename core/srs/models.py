"""
SQLAlchemy ORM Models for the flashcard database

Defines the Card and ReviewEvent tables.
"""

from sqlalchemy import Boolean, Column, Date, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class CardModel(Base):
    """
    One flashcard: display text plus its spaced-repetition schedule.
    """
    __tablename__ = 'cards'

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Display fields (edited outside the scheduler)
    front = Column(Text, nullable=False)
    back = Column(Text, nullable=False)
    image_url = Column(Text, nullable=True)

    # Scheduling state
    stage = Column(String(20), nullable=False, default="new")
    interval_days = Column(Integer, nullable=False, default=0)
    ease = Column(Float, nullable=False, default=2.5)
    reps = Column(Integer, nullable=False, default=0)
    lapses = Column(Integer, nullable=False, default=0)

    first_seen = Column(Date, nullable=True)
    last_reviewed = Column(Date, nullable=True)
    due_date = Column(Date, nullable=True, index=True)
    suspended = Column(Boolean, nullable=False, default=False)

    def __repr__(self):
        return f"<CardModel(id={self.id}, {self.front!r}, stage={self.stage})>"


class ReviewEventModel(Base):
    """
    Append-only log entry for a single grading action.
    """
    __tablename__ = 'review_events'

    id = Column(Integer, primary_key=True, autoincrement=True)
    card_id = Column(Integer, nullable=False, index=True)

    rating = Column(String(10), nullable=False)  # again / hard / good / easy
    event_date = Column(Date, nullable=False, index=True)
    review_type = Column(String(10), nullable=False)  # new / review
    timestamp = Column(DateTime(timezone=True), nullable=False)

    # Schedule before/after (for analytics)
    stage_before = Column(String(20), nullable=True)
    stage_after = Column(String(20), nullable=True)
    interval_before = Column(Integer, nullable=True)
    interval_after = Column(Integer, nullable=True)
    ease_before = Column(Float, nullable=True)
    ease_after = Column(Float, nullable=True)

    # Session context (optional)
    session_id = Column(String(64), nullable=True)
    session_position = Column(Integer, nullable=True)

    def __repr__(self):
        return f"<ReviewEventModel(id={self.id}, card={self.card_id}, rating={self.rating})>"
