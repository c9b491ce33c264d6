"""Habit and completion data structures."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import Column, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .user import User


class Frequency(str, Enum):
    """Recurrence unit of a habit; also the unit of its period index."""

    DAILY = "daily"
    WEEKLY = "weekly"


class Habit(SQLModel, table=True):
    """A user-defined habit tracked daily or weekly."""

    __tablename__: ClassVar[str] = "habit"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_habit_user_name"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=80, index=True)
    description: str = Field(default="", max_length=255)
    frequency: Frequency = Field(default=Frequency.DAILY, nullable=False)
    created_on: date = Field(default_factory=date.today, nullable=False)

    completions: list["Completion"] = Relationship(
        back_populates="habit",
        sa_relationship=relationship(
            "Completion",
            back_populates="habit",
            cascade="all, delete-orphan",
            order_by="Completion.period_index",
        ),
    )

    user: "User" = Relationship(sa_relationship=relationship("User", back_populates="habits"))


class Completion(SQLModel, table=True):
    """One recorded completion of a habit, keyed by its period index."""

    __tablename__: ClassVar[str] = "habit_completion"

    habit_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("habit.id", ondelete="CASCADE"),
            primary_key=True,
        )
    )
    period_index: int = Field(primary_key=True)
    marked_on: date = Field(nullable=False, index=True)

    habit: "Habit" = Relationship(
        back_populates="completions",
        sa_relationship=relationship("Habit", back_populates="completions"),
    )
