"""Domain errors raised by repositories and the tracker service."""

from __future__ import annotations


class DuplicatePeriodError(ValueError):
    """A completion already exists for this habit and period index."""

    def __init__(self, habit_id: int | None, period_index: int):
        super().__init__(
            f"Habit {habit_id} already has a completion for period {period_index}"
        )
        self.habit_id = habit_id
        self.period_index = period_index


class DuplicateHabitNameError(ValueError):
    """The user already owns a habit with this name."""

    def __init__(self, user_id: int, name: str):
        super().__init__(f"User {user_id} already has a habit named {name!r}")
        self.user_id = user_id
        self.name = name


class HabitNotFoundError(ValueError):
    """No habit with this id belongs to the user."""

    def __init__(self, habit_id: int):
        super().__init__(f"Habit {habit_id} not found")
        self.habit_id = habit_id


class InvalidRangeError(ValueError):
    """A percentage window that contains no eligible period."""


__all__ = [
    "DuplicateHabitNameError",
    "DuplicatePeriodError",
    "HabitNotFoundError",
    "InvalidRangeError",
]
