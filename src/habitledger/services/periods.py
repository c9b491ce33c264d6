"""Period indexing: calendar dates to 1-based daily/weekly indices."""

from __future__ import annotations

from datetime import date

from ..models.habit import Frequency, Habit

DAYS_PER_WEEK = 7


def period_index(habit: Habit, on: date) -> int:
    """Return the period ``on`` falls into, counted from ``habit.created_on``.

    The creation date is period 1. Weekly habits count whole 7-day blocks from
    the creation date, not calendar weeks. Dates before creation map to 0 or
    below; floor division keeps the mapping monotonic across that boundary.
    """

    days = (on - habit.created_on).days
    if Frequency(habit.frequency) is Frequency.WEEKLY:
        return days // DAYS_PER_WEEK + 1
    return days + 1


__all__ = ["DAYS_PER_WEEK", "period_index"]
