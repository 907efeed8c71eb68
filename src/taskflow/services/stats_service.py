"""Summary counts fetched independently of the task store."""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..api import TaskApiProtocol, TaskflowApiError
from ..models import TaskStats

logger = logging.getLogger(__name__)


class StatsService:
    """Holds the latest summary counts.

    The store only ever holds one page, so totals cannot be derived from it;
    they come from the stats endpoint instead.
    """

    def __init__(self, api: TaskApiProtocol) -> None:
        self.api = api
        self._stats = TaskStats()
        self._listeners: list[Callable[[TaskStats], None]] = []

    @property
    def stats(self) -> TaskStats:
        return self._stats

    def subscribe(self, listener: Callable[[TaskStats], None]) -> None:
        self._listeners.append(listener)

    async def refresh(self) -> TaskStats:
        """Fetch fresh counts. On failure the previous counts are kept."""
        try:
            stats = await self.api.get_stats()
        except TaskflowApiError as e:
            logger.warning("Failed to load stats: %s", e)
            return self._stats

        self._stats = stats
        logger.debug("Stats refreshed: total=%d", stats.total)
        for listener in list(self._listeners):
            listener(stats)
        return stats
