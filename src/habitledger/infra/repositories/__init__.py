"""Concrete repository implementations."""

from .completion import SQLModelCompletionStore
from .habit import SQLModelHabitRepository
from .memory import InMemoryCompletionStore

__all__ = [
    "InMemoryCompletionStore",
    "SQLModelCompletionStore",
    "SQLModelHabitRepository",
]
