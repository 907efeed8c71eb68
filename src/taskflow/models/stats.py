"""Summary counts reported by the stats endpoint."""

from pydantic import BaseModel, Field

from .enums import Priority, TaskStatus


def _zero_priorities() -> dict[str, int]:
    return {p.value: 0 for p in Priority}


def _zero_statuses() -> dict[str, int]:
    return {s.value: 0 for s in TaskStatus}


class TaskStats(BaseModel):
    """Counts over all of the user's tasks, not just the loaded page."""

    total: int = 0
    priority: dict[str, int] = Field(default_factory=_zero_priorities)
    status: dict[str, int] = Field(default_factory=_zero_statuses)

    def count_priority(self, priority: Priority) -> int:
        return self.priority.get(priority.value, 0)

    def count_status(self, status: TaskStatus) -> int:
        return self.status.get(status.value, 0)
