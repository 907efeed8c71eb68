"""Per-key sequenced job queue on the asyncio event loop."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

Job = Callable[[], Awaitable[Any]]


@dataclass
class _QueuedJob:
    label: str
    predecessor: asyncio.Task | None
    started: bool = False
    task: asyncio.Task | None = field(default=None, repr=False)


class ActionQueue:
    """Runs jobs one after another per key, optionally after a delay.

    - Jobs submitted under the same key run strictly in submission order.
    - Submitting a job whose label matches a queued job that has not started
      yet cancels that job (the newer one supersedes it) and takes its place.
    - Jobs under different keys are independent.

    Job failures are logged, never raised to the submitter.
    """

    def __init__(self) -> None:
        self._tails: dict[str, _QueuedJob] = {}

    @property
    def pending_keys(self) -> list[str]:
        return list(self._tails)

    def submit(self, key: str, job: Job, *, delay: float = 0.0, label: str = "job") -> asyncio.Task:
        """Queue ``job`` under ``key`` and return its asyncio task."""
        tail = self._tails.get(key)
        predecessor = tail.task if tail else None

        if tail is not None and tail.label == label and not tail.started and tail.task is not None:
            logger.debug("Superseding queued %s for %s", label, key)
            tail.task.cancel()
            predecessor = tail.predecessor

        queued = _QueuedJob(label=label, predecessor=predecessor)
        queued.task = asyncio.create_task(self._run(key, queued, job, delay), name=f"{label}:{key}")
        self._tails[key] = queued
        return queued.task

    async def _run(self, key: str, queued: _QueuedJob, job: Job, delay: float) -> Any:
        try:
            if queued.predecessor is not None and not queued.predecessor.done():
                await asyncio.wait([queued.predecessor])
            if delay > 0:
                await asyncio.sleep(delay)
            queued.started = True
            try:
                return await job()
            except Exception:
                logger.exception("Queued %s for %s failed", queued.label, key)
                return None
        finally:
            if self._tails.get(key) is queued:
                del self._tails[key]

    def cancel(self, key: str) -> bool:
        """Cancel the queued job for ``key`` if it has not started."""
        tail = self._tails.get(key)
        if tail is None or tail.started or tail.task is None:
            return False
        tail.task.cancel()
        del self._tails[key]
        return True

    async def drain(self) -> None:
        """Wait until every queued job has finished or been cancelled."""
        while self._tails:
            tasks = [q.task for q in self._tails.values() if q.task is not None]
            if not tasks:
                break
            await asyncio.wait(tasks)
            for key, queued in list(self._tails.items()):
                if queued.task is not None and queued.task.done():
                    del self._tails[key]

    def cancel_all(self) -> None:
        """Cancel everything (used on shutdown)."""
        for queued in list(self._tails.values()):
            if queued.task is not None:
                queued.task.cancel()
        self._tails.clear()
