"""Exception types raised across smart_tasks.

Model and generation failures have no type here: the fallback paths absorb
them before they reach callers. Store errors propagate as the
store's own exceptions.
"""

from __future__ import annotations


class SmartTasksError(Exception):
    """Base class for errors raised by this package."""


class InvalidInputError(SmartTasksError, ValueError):
    """Missing, empty or wrongly typed caller input."""


class DimensionMismatchError(SmartTasksError, ValueError):
    """Two embedding vectors of different length were compared."""

    def __init__(self, left: int, right: int) -> None:
        super().__init__(f"Vector dimensions differ: {left} != {right}")
        self.left = left
        self.right = right


class TaskNotFoundError(SmartTasksError, LookupError):
    """No task or subtask with the given id exists for the owner."""


__all__ = [
    "SmartTasksError",
    "InvalidInputError",
    "DimensionMismatchError",
    "TaskNotFoundError",
]
