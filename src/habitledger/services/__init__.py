"""Service module exports."""

from . import habits, periods, tracker

__all__ = ["habits", "periods", "tracker"]
