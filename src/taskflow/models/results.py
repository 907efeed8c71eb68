"""Outcome objects returned across the action boundary."""

from dataclasses import dataclass, field
from enum import Enum

from .task import Task


class ResultKind(str, Enum):
    """Why an action ended the way it did."""

    SUCCESS = "success"
    EMPTY = "empty"  # Parse succeeded but extracted nothing
    INVALID = "invalid"  # Rejected before any remote call
    REMOTE = "remote"  # Network or server-reported failure
    BUSY = "busy"  # Same action already in flight


@dataclass
class ActionResult:
    """Result of a create/update/delete/status-change action."""

    kind: ResultKind
    message: str
    task: Task | None = None

    @property
    def ok(self) -> bool:
        return self.kind == ResultKind.SUCCESS

    @classmethod
    def success(cls, message: str, task: Task | None = None) -> "ActionResult":
        return cls(ResultKind.SUCCESS, message, task)

    @classmethod
    def failure(cls, kind: ResultKind, message: str) -> "ActionResult":
        return cls(kind, message)


@dataclass
class IngestionResult:
    """Result of a bulk ingestion request."""

    kind: ResultKind
    message: str
    tasks: list[Task] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.kind == ResultKind.SUCCESS

    @property
    def inserted_count(self) -> int:
        return len(self.tasks) if self.ok else 0
