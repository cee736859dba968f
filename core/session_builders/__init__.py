"""Queue building for daily review sessions."""

from core.session_builders.pool_types import DaySummary, QueuePartitions
from core.session_builders.queue_builder import (
    build_queue,
    count_introduced_today,
    partition_cards,
    summarize_day,
)

__all__ = [
    "DaySummary",
    "QueuePartitions",
    "build_queue",
    "count_introduced_today",
    "partition_cards",
    "summarize_day",
]
