"""Filter and pagination state models."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import ALL, Priority, TaskStatus

DEFAULT_SORT_BY = "createdAt"
DEFAULT_SORT_ORDER = "desc"
DEFAULT_PAGE_SIZE = 10

SortOrder = Literal["asc", "desc"]


def check_priority_filter(value: str) -> str:
    """Validate a priority filter value (a priority or "all")."""
    if value != ALL and value not in {p.value for p in Priority}:
        raise ValueError(f"Unknown priority filter: {value}")
    return value


def check_status_filter(value: str) -> str:
    """Validate a status filter value (a status or "all")."""
    if value != ALL and value not in {s.value for s in TaskStatus}:
        raise ValueError(f"Unknown status filter: {value}")
    return value


class FilterSet(BaseModel):
    """Active list filters.

    ``"all"`` for priority or status means no server-side predicate.
    """

    model_config = ConfigDict(frozen=True)

    priority: str = ALL
    status: str = ALL
    search: str = ""
    sort_by: str = DEFAULT_SORT_BY
    sort_order: SortOrder = DEFAULT_SORT_ORDER

    @field_validator("priority")
    @classmethod
    def validate_priority(cls, v: str) -> str:
        return check_priority_filter(v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        return check_status_filter(v)


class PaginationMeta(BaseModel):
    """Pagination block as reported by the server."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    current_page: int | None = Field(default=None, alias="currentPage")
    limit: int | None = None
    total_pages: int = Field(default=0, alias="totalPages")
    total_items: int = Field(default=0, alias="totalItems")
    has_prev_page: bool = Field(default=False, alias="hasPrevPage")
    has_next_page: bool = Field(default=False, alias="hasNextPage")


class PaginationState(BaseModel):
    """Pagination state held by the store.

    Ownership:
    - current_page, limit: client-owned; written by set_filters (page reset)
      and set_pagination (navigation); sent with every list request.
    - total_pages, total_items, has_prev_page, has_next_page: server echoes;
      written only by absorb(), i.e. by replace_page after a successful fetch.
    """

    model_config = ConfigDict(frozen=True)

    current_page: int = Field(default=1, ge=1)
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)
    total_pages: int = 0
    total_items: int = 0
    has_prev_page: bool = False
    has_next_page: bool = False

    def with_page(self, page: int) -> "PaginationState":
        return self.model_copy(update={"current_page": max(1, page)})

    def absorb(self, meta: PaginationMeta) -> "PaginationState":
        """Overwrite every server-echo field wholesale."""
        return self.model_copy(
            update={
                "total_pages": meta.total_pages,
                "total_items": meta.total_items,
                "has_prev_page": meta.has_prev_page,
                "has_next_page": meta.has_next_page,
            }
        )
