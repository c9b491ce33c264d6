"""Habit tracker service: habit management, completion marking and statistics."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..domain.errors import DuplicatePeriodError, HabitNotFoundError
from ..domain.repositories.completion import CompletionStore
from ..domain.repositories.habit import HabitRepository
from ..logging_config import get_logger
from ..models.habit import Completion, Frequency, Habit
from . import habits as stats
from .periods import period_index

logger = get_logger(__name__)


@dataclass(slots=True)
class HabitSummary:
    """Per-habit statistics row."""

    habit_id: int
    name: str
    frequency: Frequency
    available: bool
    streak: int
    longest_streak: int
    percentage: int


class HabitTracker:
    """Coordinates the habit repository and the completion store."""

    def __init__(self, habits: HabitRepository, completions: CompletionStore):
        self.habits = habits
        self.completions = completions

    # Habit management
    def create_habit(
        self,
        *,
        user_id: int,
        name: str,
        description: str = "",
        frequency: Frequency = Frequency.DAILY,
        created_on: date | None = None,
    ) -> Habit:
        """Create a habit; raises DuplicateHabitNameError if the user already has ``name``."""

        name = _clean_name(name)
        habit = Habit(
            user_id=user_id,
            name=name,
            description=description,
            frequency=Frequency(frequency),
            created_on=created_on or date.today(),
        )
        created = self.habits.create(habit, user_id=user_id)
        logger.info(
            "Habit created",
            extra={"habit_id": created.id, "user_id": user_id, "frequency": created.frequency.value},
        )
        return created

    def get_habit(self, habit_id: int, *, user_id: int) -> Habit:
        habit = self.habits.get_by_id(habit_id, user_id=user_id)
        if habit is None:
            raise HabitNotFoundError(habit_id)
        return habit

    def list_habits(self, *, user_id: int, by_created: bool = False) -> list[Habit]:
        """Return the user's habits by name, or by creation date when ``by_created``."""

        rows = self.habits.list_for_user(user_id=user_id)
        if by_created:
            rows.sort(key=lambda h: h.created_on)
        return rows

    def update_habit(
        self,
        habit_id: int,
        *,
        user_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        frequency: Optional[Frequency] = None,
    ) -> Habit:
        """Rename, re-describe or re-frequency a habit. The creation date never changes."""

        habit = self.get_habit(habit_id, user_id=user_id)
        if name is not None:
            habit.name = _clean_name(name)
        if description is not None:
            habit.description = description

        previous = Frequency(habit.frequency)
        reindex = frequency is not None and Frequency(frequency) is not previous
        if reindex:
            habit.frequency = Frequency(frequency)

        updated = self.habits.update(habit, user_id=user_id)
        if reindex:
            try:
                self._reindex_completions(updated)
            except Exception:
                updated.frequency = previous
                self.habits.update(updated, user_id=user_id)
                logger.error(
                    "Reindex failed, frequency restored",
                    extra={"habit_id": habit_id, "frequency": previous.value},
                )
                raise
        logger.info("Habit updated", extra={"habit_id": habit_id, "reindexed": reindex})
        return updated

    def _reindex_completions(self, habit: Habit) -> None:
        # Period indices are relative to the old frequency; rebuild them from
        # mark dates, keeping the earliest mark when periods collapse.
        existing = sorted(self.completions.all_for(habit), key=lambda c: c.marked_on)
        rows: dict[int, date] = {}
        for completion in existing:
            rows.setdefault(period_index(habit, completion.marked_on), completion.marked_on)
        kept = self.completions.replace_all(habit, sorted(rows.items()))
        logger.info(
            "Completions reindexed",
            extra={"habit_id": habit.id, "before": len(existing), "after": kept},
        )

    def delete_habit(self, habit_id: int, *, user_id: int) -> bool:
        """Delete a habit together with all of its completions."""

        habit = self.habits.get_by_id(habit_id, user_id=user_id)
        if habit is None:
            return False
        removed = self.completions.delete_all_for(habit)
        deleted = self.habits.delete(habit_id, user_id=user_id)
        logger.info(
            "Habit deleted",
            extra={"habit_id": habit_id, "user_id": user_id, "completions": removed},
        )
        return deleted

    # Completions
    def mark_complete(self, habit: Habit, on: date | None = None) -> Optional[Completion]:
        """Record a completion for the period containing ``on``.

        Returns None when that period already has a completion.
        """

        on = on or date.today()
        if on < habit.created_on:
            raise ValueError(f"Cannot mark habit {habit.id} on {on}, before it was created")

        idx = period_index(habit, on)
        try:
            completion = self.completions.add(habit, idx, on)
        except DuplicatePeriodError:
            logger.warning(
                "Completion rejected: period already marked",
                extra={"habit_id": habit.id, "period_index": idx},
            )
            return None
        logger.info("Habit marked", extra={"habit_id": habit.id, "period_index": idx})
        return completion

    def correct_completion(
        self, habit: Habit, idx: int, marked_on: date
    ) -> Optional[Completion]:
        """Administrative correction of a mark date within the same period."""

        if period_index(habit, marked_on) != idx:
            raise ValueError(f"{marked_on} is not in period {idx} of habit {habit.id}")
        return self.completions.update(habit, idx, marked_on)

    def remove_completion(self, habit: Habit, idx: int) -> bool:
        return self.completions.delete(habit, idx)

    def completions_for(self, habit: Habit, since: date | None = None) -> list[Completion]:
        return self.completions.all_for(habit, since)

    # Statistics
    def available(self, *, user_id: int, today: date | None = None) -> list[Habit]:
        return stats.available_habits(
            self.list_habits(user_id=user_id), store=self.completions, today=today
        )

    def streak(self, habit: Habit, today: date | None = None) -> int:
        return stats.current_streak(habit, store=self.completions, today=today)

    def longest_streak(self, habit: Habit) -> int:
        return stats.longest_streak(habit, store=self.completions)

    def percentage(self, habit: Habit, start: date, today: date | None = None) -> int:
        return stats.completion_percentage(habit, store=self.completions, start=start, today=today)

    def summary(
        self, *, user_id: int, start: date | None = None, today: date | None = None
    ) -> list[HabitSummary]:
        """One statistics row per habit; ``start`` defaults to each habit's creation date."""

        today = today or date.today()
        rows = []
        for habit in self.list_habits(user_id=user_id):
            if habit.created_on > today:
                continue
            rows.append(
                HabitSummary(
                    habit_id=habit.id,
                    name=habit.name,
                    frequency=Frequency(habit.frequency),
                    available=stats.is_available(habit, store=self.completions, today=today),
                    streak=self.streak(habit, today),
                    longest_streak=self.longest_streak(habit),
                    percentage=self.percentage(habit, start or habit.created_on, today),
                )
            )
        return rows


def _clean_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValueError("Habit name is required")
    return cleaned


__all__ = ["HabitSummary", "HabitTracker"]
