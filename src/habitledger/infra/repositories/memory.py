"""In-memory completion store keyed by (habit id, period index)."""

from __future__ import annotations

import threading
from datetime import date
from typing import Optional

from ...domain.errors import DuplicatePeriodError
from ...domain.repositories.completion import ensure_distinct_periods
from ...models.habit import Completion, Habit


class InMemoryCompletionStore:
    """Dict-backed store for tests and single-process use.

    Every access goes through one lock, so the check-and-insert on the
    composite key stays atomic across threads. Callers get copies; the
    stored rows are only changed through the store's own methods.
    """

    def __init__(self) -> None:
        self._rows: dict[tuple[int, int], Completion] = {}
        self._lock = threading.Lock()

    def add(self, habit: Habit, period_index: int, marked_on: date) -> Completion:
        key = (habit.id, period_index)
        with self._lock:
            if key in self._rows:
                raise DuplicatePeriodError(habit.id, period_index)
            completion = Completion(habit_id=habit.id, period_index=period_index, marked_on=marked_on)
            self._rows[key] = completion
            return _copy(completion)

    def get(self, habit: Habit, period_index: int) -> Optional[Completion]:
        with self._lock:
            completion = self._rows.get((habit.id, period_index))
            return _copy(completion) if completion else None

    def latest(self, habit: Habit) -> Optional[Completion]:
        rows = self.all_for(habit)
        return rows[-1] if rows else None

    def all_for(self, habit: Habit, since: Optional[date] = None) -> list[Completion]:
        with self._lock:
            rows = [_copy(c) for (habit_id, _), c in self._rows.items() if habit_id == habit.id]
        if since is not None:
            rows = [c for c in rows if c.marked_on >= since]
        return sorted(rows, key=lambda c: c.period_index)

    def update(self, habit: Habit, period_index: int, marked_on: date) -> Optional[Completion]:
        with self._lock:
            completion = self._rows.get((habit.id, period_index))
            if completion is None:
                return None
            completion.marked_on = marked_on
            return _copy(completion)

    def delete(self, habit: Habit, period_index: int) -> bool:
        with self._lock:
            return self._rows.pop((habit.id, period_index), None) is not None

    def delete_all_for(self, habit: Habit) -> int:
        with self._lock:
            return self._drop(habit.id)

    def replace_all(self, habit: Habit, rows: list[tuple[int, date]]) -> int:
        ensure_distinct_periods(habit, rows)
        with self._lock:
            self._drop(habit.id)
            for idx, marked_on in rows:
                self._rows[(habit.id, idx)] = Completion(
                    habit_id=habit.id, period_index=idx, marked_on=marked_on
                )
            return len(rows)

    def _drop(self, habit_id: int) -> int:
        # Caller holds the lock.
        keys = [key for key in self._rows if key[0] == habit_id]
        for key in keys:
            del self._rows[key]
        return len(keys)


def _copy(completion: Completion) -> Completion:
    return Completion(
        habit_id=completion.habit_id,
        period_index=completion.period_index,
        marked_on=completion.marked_on,
    )
