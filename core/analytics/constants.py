"""
Constants for review-history reports.
"""

from __future__ import annotations

from typing import Final


REPORT_GROUPS: Final[list[str]] = ["day", "week", "month", "year"]

REVIEW_TYPE_COLUMNS: Final[list[str]] = ["new", "review"]

GROUP_LABELS: Final[dict[str, str]] = {
    "day": "Daily",
    "week": "Weekly",
    "month": "Monthly",
    "year": "Yearly",
}
