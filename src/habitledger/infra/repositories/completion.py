"""SQLModel implementation of the completion store."""

from __future__ import annotations

from datetime import date
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ...domain.errors import DuplicatePeriodError
from ...domain.repositories.completion import ensure_distinct_periods
from ...models.habit import Completion, Habit


class SQLModelCompletionStore:
    """Completion store backed by the ``habit_completion`` table.

    ``(habit_id, period_index)`` is the table's primary key, so a second
    insert for the same period fails in the database rather than in a
    read-then-write check.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def add(self, habit: Habit, period_index: int, marked_on: date) -> Completion:
        completion = Completion(habit_id=habit.id, period_index=period_index, marked_on=marked_on)
        with self.session_factory() as session:
            session.add(completion)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                if "unique" not in str(exc.orig).lower():
                    raise
                raise DuplicatePeriodError(habit.id, period_index) from exc
            session.refresh(completion)
            session.expunge(completion)
            return completion

    def get(self, habit: Habit, period_index: int) -> Optional[Completion]:
        with self.session_factory() as session:
            obj = session.get(Completion, _key(habit, period_index))
            if obj:
                session.expunge(obj)
            return obj

    def latest(self, habit: Habit) -> Optional[Completion]:
        with self.session_factory() as session:
            statement = (
                select(Completion)
                .where(Completion.habit_id == habit.id)
                .order_by(Completion.period_index.desc())  # type: ignore[attr-defined]
                .limit(1)
            )
            obj = session.exec(statement).first()
            if obj:
                session.expunge(obj)
            return obj

    def all_for(self, habit: Habit, since: Optional[date] = None) -> list[Completion]:
        with self.session_factory() as session:
            statement = select(Completion).where(Completion.habit_id == habit.id)
            if since is not None:
                statement = statement.where(Completion.marked_on >= since)
            statement = statement.order_by(Completion.period_index)  # type: ignore[arg-type]
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def update(self, habit: Habit, period_index: int, marked_on: date) -> Optional[Completion]:
        with self.session_factory() as session:
            obj = session.get(Completion, _key(habit, period_index))
            if obj is None:
                return None
            obj.marked_on = marked_on
            session.add(obj)
            session.commit()
            session.refresh(obj)
            session.expunge(obj)
            return obj

    def delete(self, habit: Habit, period_index: int) -> bool:
        with self.session_factory() as session:
            obj = session.get(Completion, _key(habit, period_index))
            if obj is None:
                return False
            session.delete(obj)
            session.commit()
            return True

    def delete_all_for(self, habit: Habit) -> int:
        with self.session_factory() as session:
            rows = list(session.exec(select(Completion).where(Completion.habit_id == habit.id)).all())
            for row in rows:
                session.delete(row)
            session.commit()
            return len(rows)

    def replace_all(self, habit: Habit, rows: list[tuple[int, date]]) -> int:
        ensure_distinct_periods(habit, rows)
        with self.session_factory() as session:
            existing = session.exec(select(Completion).where(Completion.habit_id == habit.id)).all()
            for row in existing:
                session.delete(row)
            # Old keys must be gone before the new rows reuse them.
            session.flush()
            session.add_all(
                Completion(habit_id=habit.id, period_index=idx, marked_on=marked_on)
                for idx, marked_on in rows
            )
            session.commit()
            return len(rows)


def _key(habit: Habit, period_index: int) -> dict[str, int]:
    return {"habit_id": habit.id, "period_index": period_index}
