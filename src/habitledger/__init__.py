"""HabitLedger: habit tracking with period-based streak and completion statistics."""

from __future__ import annotations

from .config import BaseConfig, DevConfig, TestConfig
from .services.tracker import HabitSummary, HabitTracker

__all__ = ["BaseConfig", "DevConfig", "HabitSummary", "HabitTracker", "TestConfig"]
