"""In-memory cache of the current task page and its view state."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from ..models import FilterSet, PaginationMeta, PaginationState, Task

logger = logging.getLogger(__name__)

StoreListener = Callable[["StoreSnapshot"], None]


@dataclass(frozen=True)
class StoreSnapshot:
    """Immutable view of the store at one point in time.

    Readers may keep a snapshot as long as they like; it never changes.
    Re-read ``TaskStore.snapshot`` after a mutation to see the new state.
    """

    tasks: tuple[Task, ...] = ()
    is_loading: bool = False
    filters: FilterSet = field(default_factory=FilterSet)
    pagination: PaginationState = field(default_factory=PaginationState)
    pending_actions: frozenset[str] = frozenset()

    @property
    def task_count(self) -> int:
        return len(self.tasks)

    def index_of(self, task_id: str) -> int | None:
        for i, task in enumerate(self.tasks):
            if task.id == task_id:
                return i
        return None

    def find(self, task_id: str) -> Task | None:
        index = self.index_of(task_id)
        return None if index is None else self.tasks[index]


class TaskStore:
    """Page-lifetime task cache.

    Every operation builds a new StoreSnapshot and swaps it in with a single
    assignment, so a reader never observes a half-applied change. The store
    never holds two tasks with the same id: inserting an id that is already
    present replaces that entry in place.

    Operations are synchronous; callers run them on the UI event loop.
    """

    def __init__(
        self,
        filters: FilterSet | None = None,
        pagination: PaginationState | None = None,
    ) -> None:
        self._snapshot = StoreSnapshot(
            filters=filters or FilterSet(),
            pagination=pagination or PaginationState(),
        )
        self._latest_request_seq = 0
        self._listeners: list[StoreListener] = []

    # ---- reading ----

    @property
    def snapshot(self) -> StoreSnapshot:
        return self._snapshot

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._snapshot.tasks

    @property
    def filters(self) -> FilterSet:
        return self._snapshot.filters

    @property
    def pagination(self) -> PaginationState:
        return self._snapshot.pagination

    @property
    def is_loading(self) -> bool:
        return self._snapshot.is_loading

    def get(self, task_id: str) -> Task | None:
        return self._snapshot.find(task_id)

    def is_action_loading(self, action: str) -> bool:
        return action in self._snapshot.pending_actions

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Call ``listener`` with the new snapshot after every change.

        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, snapshot: StoreSnapshot, reason: str) -> None:
        self._snapshot = snapshot
        logger.debug(
            "Store %s: tasks=%d page=%d loading=%s",
            reason,
            snapshot.task_count,
            snapshot.pagination.current_page,
            snapshot.is_loading,
        )
        for listener in list(self._listeners):
            listener(snapshot)

    # ---- list fetch ----

    def begin_fetch(self) -> int:
        """Mark a list fetch as started and return its request sequence number.

        Pass the number to replace_page / end_fetch; results of any older
        fetch are discarded from then on.
        """
        self._latest_request_seq += 1
        self._commit(replace(self._snapshot, is_loading=True), "begin_fetch")
        return self._latest_request_seq

    def end_fetch(self, request_seq: int) -> None:
        """Clear the loading flag after a failed fetch (if it is still the latest)."""
        if request_seq != self._latest_request_seq:
            return
        self._commit(replace(self._snapshot, is_loading=False), "end_fetch")

    def is_stale(self, request_seq: int) -> bool:
        return request_seq < self._latest_request_seq

    def replace_page(
        self,
        tasks: Iterable[Task],
        pagination_meta: PaginationMeta,
        request_seq: int | None = None,
    ) -> bool:
        """
        Swap in a freshly fetched page.

        Replaces the task list and every server-echo pagination field, and
        clears the loading flag. When ``request_seq`` belongs to a fetch that
        has since been superseded, nothing changes and False is returned.
        """
        if request_seq is not None and self.is_stale(request_seq):
            logger.debug(
                "Discarding stale page (seq=%d, latest=%d)",
                request_seq,
                self._latest_request_seq,
            )
            return False

        page = _dedupe(tasks)
        snapshot = replace(
            self._snapshot,
            tasks=page,
            is_loading=False,
            pagination=self._snapshot.pagination.absorb(pagination_meta),
        )
        self._commit(snapshot, "replace_page")
        return True

    # ---- single-task mutations ----

    def insert_one(self, task: Task) -> None:
        """Prepend a newly created task. Pagination metadata is left alone."""
        index = self._snapshot.index_of(task.id)
        if index is not None:
            tasks = _replace_at(self._snapshot.tasks, index, task)
        else:
            tasks = (task, *self._snapshot.tasks)
        self._commit(replace(self._snapshot, tasks=tasks), "insert_one")

    def insert_many(self, tasks: Iterable[Task]) -> int:
        """Append tasks in the given order. Returns the number of new entries.

        Pagination metadata is left alone, so total_items understates reality
        until the next list fetch.
        """
        current = list(self._snapshot.tasks)
        positions = {task.id: i for i, task in enumerate(current)}
        added = 0
        for task in tasks:
            if task.id in positions:
                current[positions[task.id]] = task
                continue
            positions[task.id] = len(current)
            current.append(task)
            added += 1
        self._commit(replace(self._snapshot, tasks=tuple(current)), "insert_many")
        return added

    def patch_one(self, task_id: str, fields: Mapping[str, Any] | Task) -> bool:
        """
        Merge fields into the matching task.

        An id that is not on the loaded page is a no-op (the task may live on
        another page), not an error. Returns True when a task was patched.
        """
        index = self._snapshot.index_of(task_id)
        if index is None:
            logger.debug("patch_one: %s not on current page", task_id)
            return False
        if isinstance(fields, Task):
            fields = fields.model_dump()
        patched = self._snapshot.tasks[index].merged(fields)
        tasks = _replace_at(self._snapshot.tasks, index, patched)
        self._commit(replace(self._snapshot, tasks=tasks), "patch_one")
        return True

    def remove_one(self, task_id: str) -> bool:
        """Remove the matching task; no-op when absent. Returns True if removed."""
        index = self._snapshot.index_of(task_id)
        if index is None:
            return False
        tasks = self._snapshot.tasks[:index] + self._snapshot.tasks[index + 1 :]
        self._commit(replace(self._snapshot, tasks=tasks), "remove_one")
        return True

    # ---- view state ----

    def set_filters(self, filters: FilterSet) -> None:
        """Replace the filter set and return to the first page."""
        snapshot = replace(
            self._snapshot,
            filters=filters,
            pagination=self._snapshot.pagination.with_page(1),
        )
        self._commit(snapshot, "set_filters")

    def set_pagination(self, pagination: PaginationState) -> None:
        self._commit(replace(self._snapshot, pagination=pagination), "set_pagination")

    def set_loading(self, is_loading: bool) -> None:
        self._commit(replace(self._snapshot, is_loading=is_loading), "set_loading")

    def set_action_loading(self, action: str, is_loading: bool) -> None:
        """Set or clear the loading flag of one named action (e.g. "create")."""
        pending = self._snapshot.pending_actions
        pending = pending | {action} if is_loading else pending - {action}
        self._commit(replace(self._snapshot, pending_actions=pending), "set_action_loading")


def _replace_at(tasks: tuple[Task, ...], index: int, task: Task) -> tuple[Task, ...]:
    return tasks[:index] + (task,) + tasks[index + 1 :]


def _dedupe(tasks: Iterable[Task]) -> tuple[Task, ...]:
    seen: set[str] = set()
    result: list[Task] = []
    for task in tasks:
        if task.id in seen:
            logger.warning("Duplicate task id in page: %s", task.id)
            continue
        seen.add(task.id)
        result.append(task)
    return tuple(result)
