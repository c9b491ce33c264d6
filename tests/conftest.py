"""Pytest configuration and shared fixtures for HabitLedger tests.

Provides an isolated SQLite database per test, repository/store fixtures and
factories for habits, so the statistics can be exercised against both the
SQLModel store and the in-memory store.
"""

from __future__ import annotations

import itertools
import tempfile
from datetime import date
from pathlib import Path

import pytest
from sqlmodel import Session, create_engine, select

from habitledger.config import BaseConfig
from habitledger.infra.database import apply_sqlite_pragmas, create_schema, session_factory_for
from habitledger.infra.repositories import (
    InMemoryCompletionStore,
    SQLModelCompletionStore,
    SQLModelHabitRepository,
)
from habitledger.models import Frequency, Habit, User
from habitledger.services.tracker import HabitTracker

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine with foreign keys enforced and all tables created
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    apply_sqlite_pragmas(engine, BaseConfig.SQLITE_PRAGMAS)
    create_schema(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Session used by factories to seed rows directly."""
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching what the repositories receive in production."""
    return session_factory_for(db_engine)


@pytest.fixture
def habit_repo(session_factory) -> SQLModelHabitRepository:
    return SQLModelHabitRepository(session_factory)


@pytest.fixture
def store(session_factory) -> SQLModelCompletionStore:
    return SQLModelCompletionStore(session_factory)


@pytest.fixture
def memory_store() -> InMemoryCompletionStore:
    return InMemoryCompletionStore()


@pytest.fixture
def tracker(habit_repo, store) -> HabitTracker:
    return HabitTracker(habit_repo, store)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user(db_session) -> User:
    """Create a default user for scoping habits."""

    existing = db_session.exec(select(User).where(User.username == "tester")).first()
    if existing:
        return existing
    u = User(username="tester")
    db_session.add(u)
    db_session.commit()
    db_session.refresh(u)
    return u


@pytest.fixture
def habit_factory(db_session, user):
    """Factory for creating persisted habits.

    Returns:
        Callable: Function that creates and persists Habit instances
    """

    def _create_habit(
        name: str = "Test Habit",
        description: str = "Test habit description",
        frequency: Frequency = Frequency.DAILY,
        created_on: date = date(2024, 1, 1),
        owner: User | None = None,
    ) -> Habit:
        owner = owner or user
        habit = Habit(
            user_id=owner.id,
            name=name,
            description=description,
            frequency=frequency,
            created_on=created_on,
        )
        db_session.add(habit)
        db_session.commit()
        db_session.refresh(habit)
        return habit

    return _create_habit


@pytest.fixture
def make_habit():
    """Factory for unsaved habits with distinct ids, for in-memory store tests."""

    ids = itertools.count(1)

    def _make(
        frequency: Frequency = Frequency.DAILY,
        created_on: date = date(2024, 1, 1),
        name: str | None = None,
    ) -> Habit:
        habit_id = next(ids)
        return Habit(
            id=habit_id,
            user_id=1,
            name=name or f"habit-{habit_id}",
            frequency=frequency,
            created_on=created_on,
        )

    return _make
