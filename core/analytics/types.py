"""
Types for review-history reports.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import pandas as pd


ReportGroup = Literal["day", "week", "month", "year"]


@dataclass(frozen=True)
class ReviewReport:
    """
    New vs review counts per period, oldest period first.

    `counts` is indexed by period start date with `new` and `review` columns.
    """
    group: ReportGroup
    label: str
    counts: pd.DataFrame
    total_new: int
    total_review: int
