"""
Calendar date helpers.

Scheduling works on calendar dates (no time of day). Dates are stored as
ISO strings (YYYY-MM-DD) by some backends, so parsing is lenient.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Callable, Optional


Clock = Callable[[], date]


def today() -> date:
    """Today's local calendar date."""
    return date.today()


def add_days(day: date, days: int) -> date:
    """Return the date `days` days after `day`."""
    return day + timedelta(days=days)


def parse_date(value: object) -> Optional[date]:
    """
    Coerce a stored value into a date.

    Accepts date, datetime, or an ISO string (a timestamp suffix is ignored).
    Returns None for empty or unparseable values.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None
