"""Engine, schema and transaction plumbing for the habit tables."""

from __future__ import annotations

from contextlib import AbstractContextManager, contextmanager
from functools import partial
from typing import Callable, Iterator

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from ..config import BaseConfig
from ..logging_config import get_logger
from ..models import Completion, Habit, User

logger = get_logger(__name__)

SessionFactory = Callable[[], AbstractContextManager[Session]]

HABIT_TABLES = [User.__table__, Habit.__table__, Completion.__table__]


def create_db_engine(config: BaseConfig) -> Engine:
    engine = create_engine(config.DATABASE_URL, **config.sqlalchemy_engine_options())
    if config.is_sqlite:
        apply_sqlite_pragmas(engine, config.SQLITE_PRAGMAS)
    return engine


def apply_sqlite_pragmas(engine: Engine, pragmas: dict[str, str]) -> None:
    # SQLite ships with foreign keys off; the completion cascade needs them on.
    @event.listens_for(engine, "connect")
    def _set_pragmas(dbapi_connection, connection_record):  # noqa: ARG001
        cursor = dbapi_connection.cursor()
        try:
            for key, value in pragmas.items():
                cursor.execute(f"PRAGMA {key}={value}")
        finally:
            cursor.close()


def create_schema(engine: Engine) -> None:
    """Create whichever of the user, habit and completion tables are missing."""

    SQLModel.metadata.create_all(engine, tables=HABIT_TABLES)


@contextmanager
def unit_of_work(engine: Engine) -> Iterator[Session]:
    """Run the block in one session and commit it, or roll it back on error.

    Loaded objects are not expired on commit, so repositories can expunge
    them and hand them to callers after the session closes.
    """

    with Session(engine, expire_on_commit=False) as session:
        try:
            yield session
        except Exception:
            session.rollback()
            logger.debug("Transaction rolled back", exc_info=True)
            raise
        session.commit()


def session_factory_for(engine: Engine) -> SessionFactory:
    return partial(unit_of_work, engine)


def bootstrap_database(config: BaseConfig | None = None) -> tuple[Engine, SessionFactory]:
    """Open the configured database, create its tables, return (engine, session_factory)."""

    engine = create_db_engine(config or BaseConfig())
    create_schema(engine)
    return engine, session_factory_for(engine)
