"""Data models."""

from .enums import ALL, Priority, TaskStatus
from .query import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_SORT_BY,
    DEFAULT_SORT_ORDER,
    FilterSet,
    PaginationMeta,
    PaginationState,
)
from .results import ActionResult, IngestionResult, ResultKind
from .stats import TaskStats
from .task import Task, TaskDraft, strip_blank_fields, to_wire_fields
from .taskflow_config import ApiConfig, DashboardConfig, PriorityStyle, TaskflowConfig

__all__ = [
    "ALL",
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_SORT_BY",
    "DEFAULT_SORT_ORDER",
    "ActionResult",
    "ApiConfig",
    "DashboardConfig",
    "FilterSet",
    "IngestionResult",
    "PaginationMeta",
    "PaginationState",
    "Priority",
    "PriorityStyle",
    "ResultKind",
    "Task",
    "TaskDraft",
    "TaskStats",
    "TaskStatus",
    "TaskflowConfig",
    "strip_blank_fields",
    "to_wire_fields",
]
