"""Confirmation-gated status transitions."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..api import TaskApiProtocol, TaskflowApiError
from ..models import ActionResult, ResultKind, Task, TaskStatus
from .list_service import TaskListService
from .task_store import TaskStore

logger = logging.getLogger(__name__)


class TransitionError(ValueError):
    """A transition that cannot be staged."""

    pass


@dataclass(frozen=True)
class StagedTransition:
    """A proposed status change waiting for the user to confirm it."""

    task_id: str
    task_name: str
    from_status: TaskStatus
    to_status: TaskStatus

    @property
    def prompt(self) -> str:
        return f"Change '{self.task_name}' from {self.from_status.label} to {self.to_status.label}?"


class StatusWorkflow:
    """State machine over task status.

    Any status may move to any other (nothing is terminal), but no remote
    update is sent until a staged transition is confirmed:

        stage(task, to) -> confirm() | cancel()

    There is a single staging slot; staging again replaces whatever was
    waiting.
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
        self._staged: StagedTransition | None = None

    @property
    def staged(self) -> StagedTransition | None:
        return self._staged

    @staticmethod
    def action_key(task_id: str) -> str:
        return f"status:{task_id}"

    @staticmethod
    def quick_actions(task: Task) -> list[TaskStatus]:
        """One-click targets offered for ``task``."""
        targets: list[TaskStatus] = []
        if task.status != TaskStatus.COMPLETED:
            targets.append(TaskStatus.COMPLETED)
        if task.status == TaskStatus.TODO:
            targets.append(TaskStatus.IN_PROGRESS)
        if task.status == TaskStatus.COMPLETED:
            targets.append(TaskStatus.TODO)
        return targets

    def stage(self, task: Task, to_status: TaskStatus | str) -> StagedTransition:
        """Propose moving ``task`` to ``to_status``. Nothing is mutated."""
        try:
            target = TaskStatus(to_status)
        except ValueError as e:
            raise TransitionError(f"Unknown status: {to_status}") from e
        if target == task.status:
            raise TransitionError(f"Task is already {target.label}")

        if self._staged is not None:
            logger.debug("Replacing staged transition for %s", self._staged.task_id)
        self._staged = StagedTransition(
            task_id=task.id,
            task_name=task.display_title,
            from_status=task.status,
            to_status=target,
        )
        logger.debug("Staged %s: %s -> %s", task.id, task.status.value, target.value)
        return self._staged

    def cancel(self) -> None:
        """Discard the staged transition. No remote call is made."""
        if self._staged is not None:
            logger.debug("Cancelled staged transition for %s", self._staged.task_id)
        self._staged = None

    async def confirm(self) -> ActionResult:
        """
        Send the staged transition to the server.

        Success patches the store with the server's copy of the task, clears
        the staging slot and schedules a delayed list+stats refresh. Failure
        clears the slot and leaves the store untouched. A confirm for a task
        whose update is already in flight is BUSY and also clears the slot.
        """
        staged = self._staged
        if staged is None:
            return ActionResult.failure(ResultKind.INVALID, "No status change to confirm")

        action = self.action_key(staged.task_id)
        if self.store.is_action_loading(action):
            self._clear(staged)
            return ActionResult.failure(ResultKind.BUSY, "Status update already in progress")

        self.store.set_action_loading(action, True)
        try:
            updated = await self.api.update_task(
                staged.task_id, {"status": staged.to_status.value}
            )
        except TaskflowApiError as e:
            logger.warning("Status update failed for %s: %s", staged.task_id, e)
            self._clear(staged)
            return ActionResult.failure(
                ResultKind.REMOTE, e.user_message("Failed to update task status")
            )
        finally:
            self.store.set_action_loading(action, False)

        self.store.patch_one(staged.task_id, updated)
        self._clear(staged)
        self.list_service.schedule_refresh(staged.task_id)
        logger.info(
            "Task %s: %s -> %s",
            staged.task_id,
            staged.from_status.value,
            staged.to_status.value,
        )
        return ActionResult.success("Task status updated", updated)

    def _clear(self, staged: StagedTransition) -> None:
        # A newer transition may have been staged while the request was in flight
        if self._staged is staged:
            self._staged = None
