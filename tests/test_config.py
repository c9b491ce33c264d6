"""Tests for configuration and database bootstrap."""

from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy import inspect, text
from sqlalchemy.pool import StaticPool
from sqlmodel import select

from habitledger.config import BaseConfig, TestConfig
from habitledger.infra.database import bootstrap_database
from habitledger.infra.repositories import SQLModelCompletionStore, SQLModelHabitRepository
from habitledger.models import User
from habitledger.services.tracker import HabitTracker


def test_defaults_build_sqlite_url_in_data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("HABITLEDGER_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("HABITLEDGER_DATABASE_URL", raising=False)
    monkeypatch.delenv("HABITLEDGER_DEV_MODE", raising=False)

    config = BaseConfig()

    assert config.DATA_DIR == (tmp_path / "data").resolve()
    assert config.DATA_DIR.is_dir()
    assert config.DATABASE_URL == f"sqlite:///{config.DATA_DIR / 'habitledger.db'}"
    assert config.DEV_MODE is True
    assert config.sqlalchemy_engine_options() == {"connect_args": {"check_same_thread": False}}


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("HABITLEDGER_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("HABITLEDGER_DATABASE_URL", "postgresql://habits@localhost/habits")
    monkeypatch.setenv("HABITLEDGER_DEV_MODE", "off")
    monkeypatch.setenv("HABITLEDGER_LOG_LEVEL", "warning")

    config = BaseConfig()

    assert config.DATABASE_URL == "postgresql://habits@localhost/habits"
    assert config.DEV_MODE is False
    assert config.LOG_LEVEL == "WARNING"
    assert config.is_sqlite is False
    assert config.sqlalchemy_engine_options() == {}


def test_test_config_uses_shared_in_memory_database(tmp_path, monkeypatch):
    monkeypatch.setenv("HABITLEDGER_DATA_DIR", str(tmp_path))
    config = TestConfig()

    assert config.DATABASE_URL == "sqlite://"
    assert config.sqlalchemy_engine_options()["poolclass"] is StaticPool


def test_bootstrap_enables_foreign_keys_and_wires_tracker(tmp_path, monkeypatch):
    monkeypatch.setenv("HABITLEDGER_DATA_DIR", str(tmp_path))
    engine, session_factory = bootstrap_database(TestConfig())

    with engine.connect() as conn:
        assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1

    with session_factory() as session:
        owner = User(username="cfg")
        session.add(owner)
        session.flush()
        owner_id = owner.id

    tracker = HabitTracker(SQLModelHabitRepository(session_factory), SQLModelCompletionStore(session_factory))
    habit = tracker.create_habit(user_id=owner_id, name="Stretch", created_on=date(2024, 1, 1))
    tracker.mark_complete(habit, date(2024, 1, 1))

    assert tracker.streak(habit, date(2024, 1, 1)) == 1
    engine.dispose()


def test_unit_of_work_rolls_back_on_error(tmp_path, monkeypatch):
    monkeypatch.setenv("HABITLEDGER_DATA_DIR", str(tmp_path))
    engine, session_factory = bootstrap_database(TestConfig())

    assert sorted(inspect(engine).get_table_names()) == ["habit", "habit_completion", "user"]

    with pytest.raises(RuntimeError):
        with session_factory() as session:
            session.add(User(username="ghost"))
            session.flush()
            raise RuntimeError("boom")

    with session_factory() as session:
        assert session.exec(select(User)).all() == []
    engine.dispose()
