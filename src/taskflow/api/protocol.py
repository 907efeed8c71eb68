"""Protocol for the remote task API."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from ..models import PaginationMeta, Task, TaskStats


@dataclass
class TaskPage:
    """One page of the task list as returned by the server."""

    tasks: list[Task] = field(default_factory=list)
    pagination: PaginationMeta = field(default_factory=PaginationMeta)


class TaskApiProtocol(Protocol):
    """Interface for the task server.

    The HTTP client implements it; tests use an in-memory fake. Every method
    may raise ``TaskflowApiError`` (or a subclass).
    """

    async def list_tasks(self, params: dict[str, Any]) -> TaskPage:
        """Fetch one filtered, sorted page of tasks.

        Args:
            params: Request parameters built by the query composer.
        """
        ...

    async def get_stats(self) -> TaskStats:
        """Fetch summary counts over all tasks."""
        ...

    async def create_task(self, payload: dict[str, Any]) -> Task:
        """Create a task and return it as stored by the server."""
        ...

    async def update_task(self, task_id: str, fields: dict[str, Any]) -> Task:
        """Apply a partial update and return the updated task.

        Note:
            Empty-string and None fields are never sent.
        """
        ...

    async def delete_task(self, task_id: str) -> None:
        """Delete a task. Only an acknowledgement comes back."""
        ...

    async def parse_text(self, text: str) -> list[Task]:
        """Extract and create tasks from free text. May return an empty list."""
        ...

    async def parse_file(self, path: Path) -> list[Task]:
        """Extract and create tasks from an uploaded text file."""
        ...
