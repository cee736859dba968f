"""
Data-loading helpers for analytics.
"""

from __future__ import annotations

from typing import Iterable

import pandas as pd

from core.srs.dates import parse_date

EVENT_COLUMNS = ["card_id", "review_type", "event_date"]


def events_to_df(events: Iterable[dict]) -> pd.DataFrame:
    """
    Normalize review-event dicts into a dataframe with a datetime `day` column.

    Rows without a usable date or review type are dropped.
    """
    df = pd.DataFrame(list(events))
    if df.empty or "event_date" not in df.columns:
        return pd.DataFrame(columns=EVENT_COLUMNS + ["day"])

    for column in EVENT_COLUMNS:
        if column not in df.columns:
            df[column] = None

    df = df[EVENT_COLUMNS].copy()
    df["day"] = pd.to_datetime(df["event_date"].map(parse_date), errors="coerce")
    df = df.dropna(subset=["day", "review_type"])
    df = df[df["review_type"].isin(["new", "review"])]
    return df.sort_values("day").reset_index(drop=True)
