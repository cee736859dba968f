"""
Queue Builder - Daily review queue

Builds today's ordered review list from the full card collection:
1. Due pool: graduated cards with due_date <= today
2. Ahead pool: cards due tomorrow (only when review-ahead is enabled)
3. New pool: cards never shown, capped by the daily new-card quota

Queue Logic:
- Suspended cards are invisible to every pool
- Each pool is shuffled independently
- Due cards always come before new cards, so overdue material is never
  starved by new introductions
"""

from __future__ import annotations

import logging
import random
from datetime import date
from typing import Iterable, Optional

from core.session_builders.pool_types import DaySummary, QueuePartitions
from core.session_builders.pool_utils import shuffled, take
from core.srs.card_state import Card
from core.srs.constants import DEFAULT_MAX_NEW_PER_DAY

logger = logging.getLogger(__name__)


def count_introduced_today(cards: Iterable[Card], today: date) -> int:
    """
    Count cards first shown today.

    These have already left the new pool, so grading a card once today does
    not double-count it against the quota.
    """
    return sum(1 for card in cards if card.first_seen == today)


def partition_cards(
    cards: Iterable[Card],
    today: date,
    include_ahead: bool = False
) -> QueuePartitions:
    """
    Split the collection into due / ahead / new pools (no shuffling).
    """
    cards = list(cards)
    partitions = QueuePartitions(
        today=today,
        introduced_today=count_introduced_today(cards, today),
    )

    for card in cards:
        if card.suspended:
            continue
        if card.is_due(today):
            partitions.due.append(card)
        elif include_ahead and card.is_due_tomorrow(today):
            partitions.ahead.append(card)
        elif card.is_new:
            partitions.new.append(card)

    return partitions


def build_queue(
    all_cards: Iterable[Card],
    today: date,
    max_new_per_day: int = DEFAULT_MAX_NEW_PER_DAY,
    rng: Optional[random.Random] = None,
    review_ahead: bool = False
) -> list[Card]:
    """
    Build today's review queue.

    Args:
        all_cards: Full card collection, in any order
        today: Current calendar date
        max_new_per_day: Daily new-card cap
        rng: Random source for shuffling (seed it for reproducible order)
        review_ahead: Append cards due tomorrow after today's due cards

    Returns:
        due ++ ahead ++ selected new cards; empty when nothing is due
    """
    partitions = partition_cards(all_cards, today, include_ahead=review_ahead)
    quota = partitions.remaining_quota(max_new_per_day)

    due = shuffled(partitions.due, rng)
    ahead = shuffled(partitions.ahead, rng)
    selected_new = take(shuffled(partitions.new, rng), quota)

    logger.info(
        "Built queue for %s: %d due, %d ahead, %d/%d new (quota %d, introduced today %d)",
        today.isoformat(),
        len(due),
        len(ahead),
        len(selected_new),
        len(partitions.new),
        quota,
        partitions.introduced_today,
    )
    return due + ahead + selected_new


def summarize_day(
    all_cards: Iterable[Card],
    today: date,
    max_new_per_day: int = DEFAULT_MAX_NEW_PER_DAY
) -> DaySummary:
    """
    Counts for today and tomorrow, excluding suspended cards.

    Today's new count respects what was already introduced today;
    tomorrow's assumes a fresh quota.
    """
    partitions = partition_cards(all_cards, today, include_ahead=True)
    available_new = len(partitions.new)

    return DaySummary(
        new_today=min(partitions.remaining_quota(max_new_per_day), available_new),
        review_today=len(partitions.due),
        new_tomorrow=min(max(0, max_new_per_day), available_new),
        review_tomorrow=len(partitions.ahead),
    )
