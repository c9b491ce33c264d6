"""Command-line maintenance commands for HabitLedger."""

from __future__ import annotations

from datetime import date

import click

from .config import BaseConfig
from .infra.database import bootstrap_database
from .infra.repositories import SQLModelCompletionStore, SQLModelHabitRepository
from .logging_config import setup_logging
from .services.tracker import HabitTracker


def _build_tracker(config: BaseConfig) -> HabitTracker:
    _, session_factory = bootstrap_database(config)
    return HabitTracker(
        SQLModelHabitRepository(session_factory),
        SQLModelCompletionStore(session_factory),
    )


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """HabitLedger maintenance commands."""

    config = BaseConfig()
    setup_logging(config)
    ctx.obj = config


@cli.command("init-db")
@click.pass_obj
def init_db(config: BaseConfig) -> None:
    """Create the database schema."""

    bootstrap_database(config)
    click.echo(f"Database ready: {config.DATABASE_URL}")


@cli.command("stats")
@click.argument("user_id", type=int)
@click.option("--since", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
              help="Start of the percentage window (defaults to each habit's creation date)")
@click.option("--today", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
              help="Evaluate as of this date instead of the current day")
@click.pass_obj
def stats(config: BaseConfig, user_id: int, since, today) -> None:
    """Print availability, streak and completion percentage per habit."""

    tracker = _build_tracker(config)
    start = since.date() if since else None
    as_of = today.date() if today else date.today()
    rows = tracker.summary(user_id=user_id, start=start, today=as_of)
    if not rows:
        click.echo("No habits.")
        return
    for row in rows:
        status = "due" if row.available else "done"
        click.echo(
            f"{row.name} [{row.frequency.value}] {status} "
            f"streak={row.streak} best={row.longest_streak} {row.percentage}%"
        )


def main() -> None:  # pragma: no cover - console entry point
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
