from __future__ import annotations

from datetime import date, timedelta
from typing import Optional


def compute_duration_days(start_date: Optional[date], deadline: Optional[date]) -> int:
    """Whole days from start to deadline, at least 1; 1 when either date is missing."""
    if start_date is None or deadline is None:
        return 1
    return max(1, (deadline - start_date).days)


def add_days(value: date, days: int) -> date:
    return value + timedelta(days=days)


def days_between(start: date, end: date) -> int:
    return (end - start).days


__all__ = ["compute_duration_days", "add_days", "days_between"]
