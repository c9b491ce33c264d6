"""Habit statistics: availability, streaks and completion percentage.

Every function receives the completion store explicitly and an optional
``today``; results depend only on the habit, that date and the stored period
indices, never on mark dates or storage order.
"""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from ..domain.errors import InvalidRangeError
from ..domain.repositories.completion import CompletionStore
from ..logging_config import get_logger
from ..models.habit import Habit
from .periods import period_index

logger = get_logger(__name__)


def is_available(habit: Habit, *, store: CompletionStore, today: date | None = None) -> bool:
    """True when ``habit`` has no completion in the period containing ``today``."""

    latest = store.latest(habit)
    if latest is None:
        return True
    return latest.period_index != period_index(habit, today or date.today())


def available_habits(
    habits: Iterable[Habit], *, store: CompletionStore, today: date | None = None
) -> list[Habit]:
    """Return the habits that can still be marked complete, in input order."""

    today = today or date.today()
    return [h for h in habits if is_available(h, store=store, today=today)]


def streak_from_indices(indices: Iterable[int], current: int) -> int:
    """Count consecutive indices ending at ``current``.

    Indices above ``current`` are ignored; a missing ``current`` gives 0.
    """

    streak = 0
    expected = current
    for idx in sorted(set(indices), reverse=True):
        if idx > current:
            continue
        if idx != expected:
            break
        streak += 1
        expected -= 1
    return streak


def longest_run(indices: Iterable[int]) -> int:
    """Length of the longest run of consecutive indices."""

    longest = 0
    run = 0
    last: int | None = None
    for idx in sorted(set(indices)):
        if last is not None and idx == last + 1:
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        last = idx
    return longest


def current_streak(habit: Habit, *, store: CompletionStore, today: date | None = None) -> int:
    """Consecutive completed periods ending at the period containing ``today``."""

    current = period_index(habit, today or date.today())
    streak = streak_from_indices((c.period_index for c in store.all_for(habit)), current)
    logger.debug("Habit %s streak at period %s = %s", habit.id, current, streak)
    return streak


def longest_streak(habit: Habit, *, store: CompletionStore) -> int:
    return longest_run(c.period_index for c in store.all_for(habit))


def completion_percentage(
    habit: Habit,
    *,
    store: CompletionStore,
    start: date,
    today: date | None = None,
) -> int:
    """Percentage (0-100) of periods from ``start`` through ``today`` with a completion.

    ``start`` is clamped to the habit's creation date. The window is the full
    inclusive span of periods; a start after ``today`` yields 0.

    Raises:
        InvalidRangeError: when the habit has completions but the window holds
            no period, i.e. the habit was created after ``today``.
    """

    today = today or date.today()
    if start > today:
        return 0

    effective_start = max(start, habit.created_on)
    first = period_index(habit, effective_start)
    current = period_index(habit, today)
    max_periods = current - first + 1

    completions = store.all_for(habit)
    if not completions:
        return 0
    if max_periods <= 0:
        raise InvalidRangeError(
            f"Habit {habit.id} created on {habit.created_on} has no periods up to {today}"
        )

    completed = sum(1 for c in completions if first <= c.period_index <= current)
    ratio = Decimal(100 * completed) / Decimal(max_periods)
    percentage = int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    logger.debug(
        "Habit %s completed %s of %s periods (%s%%)", habit.id, completed, max_periods, percentage
    )
    return percentage


__all__ = [
    "available_habits",
    "completion_percentage",
    "current_streak",
    "is_available",
    "longest_run",
    "longest_streak",
    "streak_from_indices",
]
