"""Enums for task status and priority."""

from enum import Enum

# Filter value that suppresses the corresponding server-side predicate
ALL = "all"


class TaskStatus(str, Enum):
    """Valid statuses for a task."""

    TODO = "todo"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @property
    def label(self) -> str:
        """Human readable label ("in progress")."""
        return self.value.replace("-", " ")


class Priority(str, Enum):
    """Priority levels, P1 most urgent."""

    P1 = "P1"
    P2 = "P2"
    P3 = "P3"
    P4 = "P4"
