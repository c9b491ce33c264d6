"""Repository protocol definitions for domain layer."""

from .completion import CompletionStore
from .habit import HabitRepository

__all__ = [
    "CompletionStore",
    "HabitRepository",
]
