"""Completion store protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ..errors import DuplicatePeriodError
from ...models.habit import Completion, Habit


class CompletionStore(Protocol):
    """Persists completions keyed by (habit, period index).

    Implementations enforce the composite key themselves and raise
    :class:`~habitledger.domain.errors.DuplicatePeriodError` on a second write
    for the same key.
    """

    def add(self, habit: Habit, period_index: int, marked_on: date) -> Completion:
        """Record a completion for ``period_index``."""
        ...

    def get(self, habit: Habit, period_index: int) -> Optional[Completion]:
        """Return the completion stored for ``period_index``, if any."""
        ...

    def latest(self, habit: Habit) -> Optional[Completion]:
        """Return the completion with the highest period index."""
        ...

    def all_for(self, habit: Habit, since: Optional[date] = None) -> list[Completion]:
        """List completions ordered by period index, optionally with ``marked_on >= since``."""
        ...

    def update(self, habit: Habit, period_index: int, marked_on: date) -> Optional[Completion]:
        """Change the mark date of an existing completion."""
        ...

    def delete(self, habit: Habit, period_index: int) -> bool:
        """Delete one completion; False when nothing was stored."""
        ...

    def delete_all_for(self, habit: Habit) -> int:
        """Delete every completion of ``habit`` and return how many were removed."""
        ...

    def replace_all(self, habit: Habit, rows: list[tuple[int, date]]) -> int:
        """Swap every completion of ``habit`` for ``rows`` in one transaction.

        ``rows`` holds ``(period_index, marked_on)`` pairs. A repeated index
        raises ``DuplicatePeriodError``; on any failure the old completions
        are left as they were.
        """
        ...


def ensure_distinct_periods(habit: Habit, rows: list[tuple[int, date]]) -> None:
    """Raise ``DuplicatePeriodError`` for the first index that repeats in ``rows``."""

    seen: set[int] = set()
    for idx, _ in rows:
        if idx in seen:
            raise DuplicatePeriodError(habit.id, idx)
        seen.add(idx)
