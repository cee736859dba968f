"""
Service layer to assemble review-history reports.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from core.analytics.constants import GROUP_LABELS, REPORT_GROUPS
from core.analytics.metrics import count_by_period
from core.analytics.queries import events_to_df
from core.analytics.types import ReportGroup, ReviewReport
from core.srs.database import SqlCardStore


def build_review_report(events: Iterable[dict], group: ReportGroup = "day") -> ReviewReport:
    """
    Aggregate review events into new/review counts per period.
    """
    if group not in REPORT_GROUPS:
        raise ValueError(f"Unknown report group: {group}")

    counts = count_by_period(events_to_df(events), group)
    return ReviewReport(
        group=group,
        label=GROUP_LABELS[group],
        counts=counts,
        total_new=int(counts["new"].sum()) if not counts.empty else 0,
        total_review=int(counts["review"].sum()) if not counts.empty else 0,
    )


def build_store_report(
    store: SqlCardStore,
    group: ReportGroup = "day",
    since: Optional[date] = None
) -> ReviewReport:
    """Build a report straight from the review_events table."""
    return build_review_report(store.get_review_events(since=since), group)
