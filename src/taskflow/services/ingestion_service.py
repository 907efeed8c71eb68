"""Bulk ingestion: free text or a text file in, new tasks out."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from ..api import TaskApiProtocol, TaskflowApiError
from ..models import IngestionResult, ResultKind
from .stats_service import StatsService
from .task_store import TaskStore

logger = logging.getLogger(__name__)

MIN_TEXT_LENGTH = 10
MAX_FILE_SIZE = 5 * 1024 * 1024  # 5 MiB
ALLOWED_EXTENSIONS: tuple[str, ...] = (".txt", ".md")


class IngestionValidationError(ValueError):
    """Input rejected before contacting the server."""

    pass


@dataclass(frozen=True)
class IngestionSource:
    """What the user submitted: pasted text, a file, or both.

    When a file is attached it wins and the text is ignored.
    """

    text: str = ""
    file: Path | None = None

    @property
    def uses_file(self) -> bool:
        return self.file is not None


class IngestionService:
    """Sends text to the extraction service and merges the result into the store."""

    ACTION = "parse"

    def __init__(
        self, store: TaskStore, api: TaskApiProtocol, stats_service: StatsService
    ) -> None:
        self.store = store
        self.api = api
        self.stats_service = stats_service

    def validate(self, source: IngestionSource) -> None:
        """
        Check the source without touching the network.

        Raises:
            IngestionValidationError: bad extension, file too large, missing
                file, or text shorter than MIN_TEXT_LENGTH
        """
        if source.file is not None:
            validate_file(source.file)
            return
        if len(source.text) < MIN_TEXT_LENGTH:
            raise IngestionValidationError(
                f"Text must be at least {MIN_TEXT_LENGTH} characters long"
            )

    async def ingest(self, source: IngestionSource) -> IngestionResult:
        """
        Parse ``source`` remotely and append the extracted tasks to the store.

        - tasks extracted: insert_many and a stats refresh (the list itself
          is not refetched), success with the count
        - nothing extracted: non-fatal EMPTY result, store untouched
        - validation or remote failure: failure result, store untouched
        """
        try:
            self.validate(source)
        except IngestionValidationError as e:
            return IngestionResult(ResultKind.INVALID, str(e))

        if self.store.is_action_loading(self.ACTION):
            return IngestionResult(ResultKind.BUSY, "Parsing already in progress")

        self.store.set_action_loading(self.ACTION, True)
        try:
            if source.file is not None:
                logger.info("Parsing file %s", source.file.name)
                tasks = await self.api.parse_file(source.file)
            else:
                logger.info("Parsing %d characters of text", len(source.text))
                tasks = await self.api.parse_text(source.text)
        except TaskflowApiError as e:
            logger.warning("Parse failed: %s", e)
            return IngestionResult(ResultKind.REMOTE, e.user_message("Failed to parse text"))
        except OSError as e:
            logger.warning("Could not read %s: %s", source.file, e)
            return IngestionResult(ResultKind.INVALID, f"Could not read file: {e.strerror or e}")
        finally:
            self.store.set_action_loading(self.ACTION, False)

        if not tasks:
            logger.info("Parse returned no tasks")
            return IngestionResult(ResultKind.EMPTY, "No tasks could be extracted from the text")

        self.store.insert_many(tasks)
        logger.info("Ingested %d tasks", len(tasks))
        await self.stats_service.refresh()
        return IngestionResult(
            ResultKind.SUCCESS,
            f"Successfully parsed and created {len(tasks)} tasks!",
            tasks=list(tasks),
        )


def validate_file(path: Path) -> None:
    """Reject files with an unrecognized extension or over MAX_FILE_SIZE."""
    if path.suffix.lower() not in ALLOWED_EXTENSIONS:
        raise IngestionValidationError(
            f"Please upload a {' or '.join(ALLOWED_EXTENSIONS)} file"
        )
    try:
        size = path.stat().st_size
    except FileNotFoundError as e:
        raise IngestionValidationError(f"File not found: {path}") from e
    if size > MAX_FILE_SIZE:
        raise IngestionValidationError("File size must be less than 5MB")
