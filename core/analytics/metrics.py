"""
Metric computations for review-history reports.
"""

from __future__ import annotations

import pandas as pd

from core.analytics.constants import REVIEW_TYPE_COLUMNS


def period_start(days: pd.Series, group: str) -> pd.Series:
    """
    Map each day to the start of its period.

    Weeks start on Sunday.
    """
    days = days.dt.normalize()
    if group == "day":
        return days
    if group == "week":
        # dayofweek: Monday=0 .. Sunday=6
        offset = (days.dt.dayofweek + 1) % 7
        return days - pd.to_timedelta(offset, unit="D")
    if group == "month":
        return days.dt.to_period("M").dt.to_timestamp()
    if group == "year":
        return days.dt.to_period("Y").dt.to_timestamp()
    raise ValueError(f"Unknown report group: {group}")


def count_by_period(events_df: pd.DataFrame, group: str) -> pd.DataFrame:
    """
    Count new and review events per period.

    Returns:
        DataFrame indexed by period start with int columns `new` and `review`
    """
    if events_df.empty:
        empty = pd.DataFrame(columns=REVIEW_TYPE_COLUMNS, dtype="int64")
        empty.index.name = "period"
        return empty

    scoped = events_df.assign(period=period_start(events_df["day"], group))
    counts = (
        scoped.groupby(["period", "review_type"])
        .size()
        .unstack(fill_value=0)
        .reindex(columns=REVIEW_TYPE_COLUMNS, fill_value=0)
        .sort_index()
        .astype("int64")
    )
    counts.columns.name = None
    return counts
