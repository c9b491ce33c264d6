"""SQLModel table exports."""

from .habit import Completion, Frequency, Habit
from .user import User

__all__ = [
    "Completion",
    "Frequency",
    "Habit",
    "User",
]
