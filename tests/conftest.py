"""Shared fixtures: an in-memory task server and wired-up services."""

from math import ceil
from pathlib import Path
from typing import Any

import pytest

from taskflow.api import NotFoundError, TaskflowApiError, TaskPage
from taskflow.models import PaginationMeta, Task, TaskStats
from taskflow.services import (
    ActionQueue,
    IngestionService,
    StatsService,
    StatusWorkflow,
    TaskListService,
    TaskService,
    TaskStore,
)


def make_task(task_id: str, name: str | None = None, **fields: Any) -> Task:
    """Build a Task the way the server would send it."""
    return Task.model_validate({"_id": task_id, "taskName": name or f"Task {task_id}", **fields})


class FakeTaskApi:
    """In-memory stand-in for the task server.

    ``errors`` maps an operation name (e.g. "update_task") to the exception
    it should raise; every call is recorded in ``calls``.
    """

    def __init__(self, tasks: list[Task] | None = None) -> None:
        self.tasks: list[Task] = list(tasks or [])
        self.stats = TaskStats()
        self.parsed: list[Task] = []
        self.errors: dict[str, TaskflowApiError] = {}
        self.calls: list[tuple[str, Any]] = []
        self._next_id = 1

    def _record(self, op: str, arg: Any = None) -> None:
        self.calls.append((op, arg))
        if op in self.errors:
            raise self.errors[op]

    def calls_to(self, op: str) -> list[Any]:
        return [arg for name, arg in self.calls if name == op]

    def _find(self, task_id: str) -> int:
        for index, task in enumerate(self.tasks):
            if task.id == task_id:
                return index
        raise NotFoundError("Resource not found", status_code=404, server_message="Task not found")

    async def list_tasks(self, params: dict[str, Any]) -> TaskPage:
        self._record("list_tasks", dict(params))
        matching = [
            task
            for task in self.tasks
            if params.get("priority") in (None, task.priority.value)
            and params.get("status") in (None, task.status.value)
            and params.get("search", "").lower() in task.task_name.lower()
        ]
        page, limit = params["page"], params["limit"]
        total_pages = ceil(len(matching) / limit)
        start = (page - 1) * limit
        return TaskPage(
            tasks=matching[start : start + limit],
            pagination=PaginationMeta(
                current_page=page,
                limit=limit,
                total_pages=total_pages,
                total_items=len(matching),
                has_prev_page=page > 1,
                has_next_page=page < total_pages,
            ),
        )

    async def get_stats(self) -> TaskStats:
        self._record("get_stats")
        return self.stats

    async def create_task(self, payload: dict[str, Any]) -> Task:
        self._record("create_task", dict(payload))
        task = Task.model_validate({"_id": f"new-{self._next_id}", **payload})
        self._next_id += 1
        self.tasks.insert(0, task)
        return task

    async def update_task(self, task_id: str, fields: dict[str, Any]) -> Task:
        self._record("update_task", (task_id, dict(fields)))
        index = self._find(task_id)
        updated = self.tasks[index].merged(fields)
        self.tasks[index] = updated
        return updated

    async def delete_task(self, task_id: str) -> None:
        self._record("delete_task", task_id)
        del self.tasks[self._find(task_id)]

    async def parse_text(self, text: str) -> list[Task]:
        self._record("parse_text", text)
        return list(self.parsed)

    async def parse_file(self, path: Path) -> list[Task]:
        self._record("parse_file", path)
        path.read_bytes()
        return list(self.parsed)


@pytest.fixture
def api() -> FakeTaskApi:
    return FakeTaskApi()


@pytest.fixture
def store() -> TaskStore:
    return TaskStore()


@pytest.fixture
def queue() -> ActionQueue:
    return ActionQueue()


@pytest.fixture
def stats_service(api: FakeTaskApi) -> StatsService:
    return StatsService(api)


@pytest.fixture
def list_service(
    store: TaskStore, api: FakeTaskApi, stats_service: StatsService, queue: ActionQueue
) -> TaskListService:
    """List service with no refresh delay so tests do not sleep."""
    return TaskListService(store, api, stats_service, queue=queue, refresh_delay=0)


@pytest.fixture
def workflow(
    store: TaskStore, api: FakeTaskApi, list_service: TaskListService
) -> StatusWorkflow:
    return StatusWorkflow(store, api, list_service)


@pytest.fixture
def ingestion(
    store: TaskStore, api: FakeTaskApi, stats_service: StatsService
) -> IngestionService:
    return IngestionService(store, api, stats_service)


@pytest.fixture
def task_service(
    store: TaskStore, api: FakeTaskApi, list_service: TaskListService
) -> TaskService:
    return TaskService(store, api, list_service)
