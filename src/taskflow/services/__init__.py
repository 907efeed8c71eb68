"""Service layer: the task cache and the workflows built on it."""

from .action_queue import ActionQueue
from .config_service import ConfigService
from .ingestion_service import (
    ALLOWED_EXTENSIONS,
    MAX_FILE_SIZE,
    MIN_TEXT_LENGTH,
    IngestionService,
    IngestionSource,
    IngestionValidationError,
)
from .list_service import TaskListService
from .query_composer import QueryComposer, RequestParams, compose
from .stats_service import StatsService
from .status_workflow import StagedTransition, StatusWorkflow, TransitionError
from .task_service import TaskService
from .task_store import StoreSnapshot, TaskStore

__all__ = [
    "ALLOWED_EXTENSIONS",
    "MAX_FILE_SIZE",
    "MIN_TEXT_LENGTH",
    "ActionQueue",
    "ConfigService",
    "IngestionService",
    "IngestionSource",
    "IngestionValidationError",
    "QueryComposer",
    "RequestParams",
    "StagedTransition",
    "StatsService",
    "StatusWorkflow",
    "StoreSnapshot",
    "TaskListService",
    "TaskService",
    "TaskStore",
    "TransitionError",
    "compose",
]
