"""SQLModel implementation of the habit repository."""

from __future__ import annotations

from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ...domain.errors import DuplicateHabitNameError
from ...models.habit import Habit


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get_by_id(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        with self.session_factory() as session:
            obj = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def get_by_name(self, name: str, *, user_id: int) -> Optional[Habit]:
        with self.session_factory() as session:
            statement = select(Habit).where(Habit.name == name, Habit.user_id == user_id)
            obj = session.exec(statement).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_for_user(self, *, user_id: int) -> list[Habit]:
        with self.session_factory() as session:
            statement = (
                select(Habit).where(Habit.user_id == user_id).order_by(Habit.name)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, habit: Habit, *, user_id: int) -> Habit:
        habit.user_id = user_id
        return self._save(habit)

    def update(self, habit: Habit, *, user_id: int) -> Habit:
        habit.user_id = user_id
        return self._save(habit)

    def _save(self, habit: Habit) -> Habit:
        with self.session_factory() as session:
            session.add(habit)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                if "unique" not in str(exc.orig).lower():
                    raise
                raise DuplicateHabitNameError(habit.user_id, habit.name) from exc
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def delete(self, habit_id: int, *, user_id: int) -> bool:
        """Delete a habit; the ORM cascade removes its completions."""
        with self.session_factory() as session:
            habit = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if habit is None:
                return False
            session.delete(habit)
            session.commit()
            return True
