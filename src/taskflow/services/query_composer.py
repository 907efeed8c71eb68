"""Turns filter and pagination state into list request parameters."""

import re
from typing import Any

from ..models import ALL, FilterSet, PaginationState, Priority, TaskStatus
from ..models.query import DEFAULT_SORT_BY, DEFAULT_SORT_ORDER

RequestParams = dict[str, Any]

_STATUS_ALIASES: dict[str, str] = {
    "todo": TaskStatus.TODO.value,
    "in-progress": TaskStatus.IN_PROGRESS.value,
    "in_progress": TaskStatus.IN_PROGRESS.value,
    "inprogress": TaskStatus.IN_PROGRESS.value,
    "doing": TaskStatus.IN_PROGRESS.value,
    "completed": TaskStatus.COMPLETED.value,
    "done": TaskStatus.COMPLETED.value,
    "all": ALL,
}


class QueryComposer:
    """Builds list request parameters and parses search-bar expressions."""

    # Pattern for key:value tokens
    TOKEN_PATTERN = re.compile(r"(?:(priority|status|sort|order):)?(\S+)")

    def compose(self, filters: FilterSet, pagination: PaginationState) -> RequestParams:
        """
        Build the request parameters for a list fetch.

        - page, limit, sortBy, sortOrder are always present
        - priority / status are omitted when the filter is "all"
        - search is included only when non-empty
        """
        params: RequestParams = {
            "page": pagination.current_page,
            "limit": pagination.limit,
            "sortBy": filters.sort_by or DEFAULT_SORT_BY,
            "sortOrder": filters.sort_order or DEFAULT_SORT_ORDER,
        }
        if filters.priority and filters.priority != ALL:
            params["priority"] = filters.priority
        if filters.status and filters.status != ALL:
            params["status"] = filters.status
        if filters.search:
            params["search"] = filters.search
        return params

    def parse_expression(self, expression: str, base: FilterSet | None = None) -> FilterSet:
        """
        Parse a search-bar expression into a filter set.

        Syntax:
        - priority:P1..P4 or priority:all
        - status:todo / in-progress / completed / all (done, doing accepted)
        - sort:createdAt / dueDate / priority / ...
        - order:asc / desc
        - anything else is free-text search

        Unknown values keep the corresponding value from ``base``. Free text
        always replaces the base search (an expression with no free text
        clears it).
        """
        base = base or FilterSet()
        changes: dict[str, Any] = {}
        text_parts: list[str] = []

        for match in self.TOKEN_PATTERN.finditer(expression):
            key = match.group(1)
            value = match.group(2)

            if key is None:
                text_parts.append(value)

            elif key == "priority":
                upper = value.upper()
                if value.lower() == ALL:
                    changes["priority"] = ALL
                elif upper in {p.value for p in Priority}:
                    changes["priority"] = upper

            elif key == "status":
                status = _STATUS_ALIASES.get(value.lower())
                if status is not None:
                    changes["status"] = status

            elif key == "sort":
                changes["sort_by"] = value

            elif key == "order" and value.lower() in ("asc", "desc"):
                changes["sort_order"] = value.lower()

        changes["search"] = " ".join(text_parts)
        return base.model_copy(update=changes)


def compose(filters: FilterSet, pagination: PaginationState) -> RequestParams:
    """Module-level shortcut for QueryComposer().compose()."""
    return QueryComposer().compose(filters, pagination)
