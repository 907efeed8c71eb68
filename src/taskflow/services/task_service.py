"""Service for manual task create/edit/delete."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ..api import TaskApiProtocol, TaskflowApiError
from ..models import ActionResult, ResultKind, TaskDraft, strip_blank_fields
from .list_service import TaskListService
from .task_store import TaskStore

logger = logging.getLogger(__name__)


class TaskService:
    """Service for task CRUD operations.

    Remote failures stop here: every method returns an ActionResult and
    leaves the store exactly as it was when the call fails.
    """

    def __init__(
        self,
        store: TaskStore,
        api: TaskApiProtocol,
        list_service: TaskListService,
    ) -> None:
        self.store = store
        self.api = api
        self.list_service = list_service

    async def create_task(self, draft: TaskDraft) -> ActionResult:
        """Create a task, prepend it to the page and schedule a refresh."""
        action = "create"
        if self.store.is_action_loading(action):
            return ActionResult.failure(ResultKind.BUSY, "Task creation already in progress")

        self.store.set_action_loading(action, True)
        try:
            task = await self.api.create_task(draft.to_payload())
        except TaskflowApiError as e:
            logger.warning("Create failed: %s", e)
            return ActionResult.failure(ResultKind.REMOTE, e.user_message("Failed to create task"))
        finally:
            self.store.set_action_loading(action, False)

        self.store.insert_one(task)
        self.list_service.schedule_refresh(task.id)
        logger.info("Task created: %s (priority=%s)", task.id, task.priority.value)
        return ActionResult.success("Task created successfully!", task)

    async def update_task(self, task_id: str, fields: Mapping[str, Any]) -> ActionResult:
        """
        Apply a partial update.

        Empty-string and None fields are dropped first so they cannot blank
        out values on the server.
        """
        changes = strip_blank_fields(fields)
        if not changes:
            return ActionResult.failure(ResultKind.INVALID, "Nothing to update")

        action = f"update:{task_id}"
        if self.store.is_action_loading(action):
            return ActionResult.failure(ResultKind.BUSY, "Update already in progress")

        self.store.set_action_loading(action, True)
        try:
            task = await self.api.update_task(task_id, changes)
        except TaskflowApiError as e:
            logger.warning("Update failed for %s: %s", task_id, e)
            return ActionResult.failure(ResultKind.REMOTE, e.user_message("Failed to update task"))
        finally:
            self.store.set_action_loading(action, False)

        self.store.patch_one(task_id, task)
        self.list_service.schedule_refresh(task_id)
        logger.info("Task updated: %s (%s)", task_id, ", ".join(sorted(changes)))
        return ActionResult.success("Task updated successfully!", task)

    async def delete_task(self, task_id: str) -> ActionResult:
        """Delete a task, drop it from the page and schedule a refresh."""
        action = f"delete:{task_id}"
        if self.store.is_action_loading(action):
            return ActionResult.failure(ResultKind.BUSY, "Delete already in progress")

        logger.info("Deleting task: %s", task_id)
        self.store.set_action_loading(action, True)
        try:
            await self.api.delete_task(task_id)
        except TaskflowApiError as e:
            logger.warning("Delete failed for %s: %s", task_id, e)
            return ActionResult.failure(ResultKind.REMOTE, e.user_message("Failed to delete task"))
        finally:
            self.store.set_action_loading(action, False)

        self.store.remove_one(task_id)
        self.list_service.schedule_refresh(task_id)
        return ActionResult.success("Task deleted successfully")
