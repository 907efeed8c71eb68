"""Configuration models for taskflow.yml."""

from typing import ClassVar

from pydantic import BaseModel, Field, field_validator

from .enums import ALL, Priority, TaskStatus
from .query import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_SORT_BY,
    DEFAULT_SORT_ORDER,
    FilterSet,
    SortOrder,
    check_priority_filter,
    check_status_filter,
)


def _validate_color(v: str) -> str:
    """Validate color is a valid named color or hex code."""
    if v.startswith("#"):
        hex_part = v[1:]
        if len(hex_part) not in (3, 6):
            raise ValueError("Hex color must be 3 or 6 characters (e.g., #fff or #ffffff)")
        if not all(c in "0123456789abcdefABCDEF" for c in hex_part):
            raise ValueError("Invalid hex color code")
    return v


class ApiConfig(BaseModel):
    """Where the task server lives and how patiently to talk to it."""

    url: str = Field(default="http://localhost:5001", min_length=1)
    timeout: float = Field(default=10.0, gt=0)
    refresh_delay: float = Field(
        default=0.1,
        ge=0,
        description="Seconds between a local patch and the follow-up list refresh",
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("API url must start with http:// or https://")
        return v.rstrip("/")


class PriorityStyle(BaseModel):
    """Display settings for one priority level."""

    color: str = "white"
    label: str = ""

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        return _validate_color(v)


def _default_priority_styles() -> dict[Priority, PriorityStyle]:
    return {
        Priority.P1: PriorityStyle(color="red", label="Urgent"),
        Priority.P2: PriorityStyle(color="orange1", label="High"),
        Priority.P3: PriorityStyle(color="yellow", label="Normal"),
        Priority.P4: PriorityStyle(color="blue", label="Low"),
    }


def _default_status_colors() -> dict[TaskStatus, str]:
    return {
        TaskStatus.TODO: "grey70",
        TaskStatus.IN_PROGRESS: "yellow",
        TaskStatus.COMPLETED: "green",
    }


class DashboardConfig(BaseModel):
    """Initial list view: page size, sort and filters."""

    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=100)
    sort_by: str = DEFAULT_SORT_BY
    sort_order: SortOrder = DEFAULT_SORT_ORDER
    priority: str = ALL
    status: str = ALL
    priorities: dict[Priority, PriorityStyle] = Field(default_factory=_default_priority_styles)
    status_colors: dict[TaskStatus, str] = Field(default_factory=_default_status_colors)

    VALID_SORT_FIELDS: ClassVar[tuple[str, ...]] = (
        "createdAt",
        "updatedAt",
        "dueDate",
        "priority",
        "taskName",
    )

    @field_validator("sort_by")
    @classmethod
    def validate_sort_by(cls, v: str) -> str:
        if v not in cls.VALID_SORT_FIELDS:
            raise ValueError(
                f"Invalid sort_by '{v}'. Must be one of: {', '.join(cls.VALID_SORT_FIELDS)}"
            )
        return v

    @field_validator("priority")
    @classmethod
    def validate_priority(cls, v: str) -> str:
        return check_priority_filter(v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        return check_status_filter(v)

    def initial_filters(self) -> FilterSet:
        """Filter set the dashboard starts with."""
        return FilterSet(
            priority=self.priority,
            status=self.status,
            sort_by=self.sort_by,
            sort_order=self.sort_order,
        )

    def priority_style(self, priority: Priority) -> PriorityStyle:
        return self.priorities.get(priority) or PriorityStyle(label=priority.value)


class TaskflowConfig(BaseModel):
    """Root configuration from taskflow.yml."""

    version: int = 1
    api: ApiConfig = Field(default_factory=ApiConfig)
    dashboard: DashboardConfig = Field(default_factory=DashboardConfig)

    @classmethod
    def default(cls) -> "TaskflowConfig":
        """Return default configuration."""
        return cls()
