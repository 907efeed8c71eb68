"""Loads the current task page and drives filter/page changes."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from pydantic import ValidationError

from ..api import TaskApiProtocol, TaskflowApiError
from ..models import ActionResult, FilterSet, ResultKind
from .action_queue import ActionQueue
from .query_composer import QueryComposer
from .stats_service import StatsService
from .task_store import TaskStore

logger = logging.getLogger(__name__)

REFRESH_LABEL = "refresh"


class TaskListService:
    """Keeps the store's page in step with the server.

    Every fetch takes a request sequence number from the store, so a slow
    response to an older request can never overwrite a newer page.
    """

    def __init__(
        self,
        store: TaskStore,
        api: TaskApiProtocol,
        stats_service: StatsService,
        queue: ActionQueue | None = None,
        composer: QueryComposer | None = None,
        refresh_delay: float = 0.1,
    ) -> None:
        self.store = store
        self.api = api
        self.stats_service = stats_service
        self.queue = queue or ActionQueue()
        self.composer = composer or QueryComposer()
        self.refresh_delay = refresh_delay

    async def load(self) -> ActionResult:
        """Fetch the page described by the store's filters and pagination."""
        request_seq = self.store.begin_fetch()
        snapshot = self.store.snapshot
        params = self.composer.compose(snapshot.filters, snapshot.pagination)
        try:
            page = await self.api.list_tasks(params)
        except TaskflowApiError as e:
            logger.warning("Failed to load tasks (seq=%d): %s", request_seq, e)
            self.store.end_fetch(request_seq)
            return ActionResult.failure(ResultKind.REMOTE, "Failed to load tasks")

        if not self.store.replace_page(page.tasks, page.pagination, request_seq):
            return ActionResult.success("Superseded by a newer request")
        logger.info(
            "Loaded page %d (%d tasks, %d total)",
            self.store.pagination.current_page,
            len(page.tasks),
            page.pagination.total_items,
        )
        return ActionResult.success(f"Loaded {len(page.tasks)} tasks")

    async def refresh(self) -> ActionResult:
        """Reload the list and the stats together."""
        result, _stats = await asyncio.gather(self.load(), self.stats_service.refresh())
        return result

    def schedule_refresh(self, key: str) -> asyncio.Task:
        """Queue a list+stats refresh under ``key`` after the refresh delay.

        A refresh already waiting under the same key is superseded.
        """
        return self.queue.submit(
            key, self.refresh, delay=self.refresh_delay, label=REFRESH_LABEL
        )

    # ---- filters ----

    async def set_filters(self, filters: FilterSet) -> ActionResult:
        """Replace the filters (back to page 1) and reload."""
        self.store.set_filters(filters)
        return await self.load()

    async def change_filters(self, **changes: Any) -> ActionResult:
        """Change individual filter values, e.g. ``change_filters(priority="P1")``."""
        try:
            filters = FilterSet.model_validate({**self.store.filters.model_dump(), **changes})
        except ValidationError as e:
            logger.debug("Rejected filter change %s: %s", changes, e)
            return ActionResult.failure(ResultKind.INVALID, "Invalid filter value")
        return await self.set_filters(filters)

    async def apply_expression(self, expression: str) -> ActionResult:
        """Apply a search-bar expression such as ``priority:P1 report``."""
        filters = self.composer.parse_expression(expression, self.store.filters)
        return await self.set_filters(filters)

    # ---- pagination ----

    async def go_to_page(self, page: int) -> ActionResult:
        pagination = self.store.pagination
        if page < 1 or (pagination.total_pages and page > pagination.total_pages):
            return ActionResult.failure(ResultKind.INVALID, f"No page {page}")
        self.store.set_pagination(pagination.with_page(page))
        return await self.load()

    async def next_page(self) -> ActionResult:
        pagination = self.store.pagination
        if not pagination.has_next_page:
            return ActionResult.failure(ResultKind.INVALID, "Already on the last page")
        return await self.go_to_page(pagination.current_page + 1)

    async def prev_page(self) -> ActionResult:
        pagination = self.store.pagination
        if not pagination.has_prev_page:
            return ActionResult.failure(ResultKind.INVALID, "Already on the first page")
        return await self.go_to_page(pagination.current_page - 1)
