"""Tests for data models."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from taskflow.models import (
    ALL,
    ApiConfig,
    DashboardConfig,
    FilterSet,
    PaginationMeta,
    PaginationState,
    Priority,
    Task,
    TaskDraft,
    TaskflowConfig,
    TaskStats,
    TaskStatus,
    strip_blank_fields,
    to_wire_fields,
)


class TestTask:
    """Tests for the Task model."""

    def test_parses_wire_keys(self):
        """Server keys (_id, taskName, dueDate) map onto fields."""
        task = Task.model_validate(
            {
                "_id": "abc123",
                "taskName": "Write report",
                "priority": "P1",
                "status": "in-progress",
                "dueDate": "2025-03-01T12:00:00Z",
                "assignee": "sam",
            }
        )

        assert task.id == "abc123"
        assert task.task_name == "Write report"
        assert task.priority == Priority.P1
        assert task.status == TaskStatus.IN_PROGRESS
        assert task.due_date == datetime(2025, 3, 1, 12, 0, tzinfo=UTC)
        assert task.assignee == "sam"

    def test_defaults(self):
        """Priority defaults to P3 and status to todo."""
        task = Task(id="1", task_name="Minimal")

        assert task.priority == Priority.P3
        assert task.status == TaskStatus.TODO
        assert task.due_date is None

    def test_title_accepted_as_fallback(self):
        """Parsed tasks may carry title instead of taskName."""
        task = Task.model_validate({"_id": "1", "title": "From notes"})

        assert task.task_name == "From notes"

    def test_task_name_wins_over_title(self):
        task = Task.model_validate({"_id": "1", "taskName": "Real", "title": "Other"})

        assert task.task_name == "Real"

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            Task.model_validate({"_id": "1", "taskName": ""})

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            Task.model_validate({"_id": "1", "taskName": "x", "status": "blocked"})

    def test_extra_keys_ignored(self):
        task = Task.model_validate({"_id": "1", "taskName": "x", "user": "u1", "__v": 0})

        assert task.id == "1"

    def test_merged_accepts_wire_and_field_names(self):
        task = Task(id="1", task_name="Old")

        merged = task.merged({"taskName": "New", "priority": "P2", "status": "completed"})

        assert merged.task_name == "New"
        assert merged.priority == Priority.P2
        assert merged.status == TaskStatus.COMPLETED
        assert task.task_name == "Old"

    def test_merged_never_changes_id(self):
        task = Task(id="1", task_name="Keep")

        merged = task.merged({"_id": "2", "id": "3"})

        assert merged.id == "1"

    def test_merged_ignores_unknown_keys(self):
        task = Task(id="1", task_name="Keep")

        assert task.merged({"bogus": True}) == task

class TestTaskDraft:
    """Tests for create payloads."""

    def test_payload_drops_blank_fields(self):
        draft = TaskDraft(title="Plan sprint", priority=Priority.P2)

        assert draft.to_payload() == {"title": "Plan sprint", "priority": "P2", "status": "todo"}

    def test_payload_serializes_due_date(self):
        due = datetime(2025, 1, 31, 23, 59, 59, tzinfo=UTC)
        draft = TaskDraft(title="x", due_date=due, assignee="kim")

        payload = draft.to_payload()

        assert payload["dueDate"] == due.isoformat()
        assert payload["assignee"] == "kim"

    def test_empty_title_rejected(self):
        with pytest.raises(ValidationError):
            TaskDraft(title="")


class TestFieldHelpers:
    """Tests for partial-update helpers."""

    def test_strip_blank_fields(self):
        fields = {"taskName": "X", "description": "", "dueDate": None, "priority": "P1"}

        assert strip_blank_fields(fields) == {"taskName": "X", "priority": "P1"}

    def test_strip_keeps_falsy_non_blank_values(self):
        assert strip_blank_fields({"count": 0, "flag": False}) == {"count": 0, "flag": False}

    def test_to_wire_fields_translates_names_and_values(self):
        due = datetime(2025, 2, 1, tzinfo=UTC)

        wire = to_wire_fields(
            {"task_name": "X", "priority": Priority.P4, "status": TaskStatus.TODO, "due_date": due}
        )

        assert wire == {
            "taskName": "X",
            "priority": "P4",
            "status": "todo",
            "dueDate": due.isoformat(),
        }

    def test_to_wire_fields_passes_wire_keys_through(self):
        assert to_wire_fields({"taskName": "X", "status": "completed"}) == {
            "taskName": "X",
            "status": "completed",
        }


class TestEnums:
    """Tests for Priority and TaskStatus."""

    def test_status_label(self):
        assert TaskStatus.IN_PROGRESS.label == "in progress"
        assert TaskStatus.TODO.label == "todo"


class TestFilterSet:
    """Tests for FilterSet validation."""

    def test_defaults(self):
        filters = FilterSet()

        assert filters.priority == ALL
        assert filters.status == ALL
        assert filters.search == ""
        assert filters.sort_by == "createdAt"
        assert filters.sort_order == "desc"

    @pytest.mark.parametrize("priority", ["P5", "high", ""])
    def test_rejects_unknown_priority(self, priority: str):
        with pytest.raises(ValidationError):
            FilterSet(priority=priority)

    def test_rejects_unknown_status(self):
        with pytest.raises(ValidationError):
            FilterSet(status="done")

    def test_rejects_unknown_sort_order(self):
        with pytest.raises(ValidationError):
            FilterSet(sort_order="up")


class TestPagination:
    """Tests for pagination ownership rules."""

    def test_meta_parses_server_keys(self):
        meta = PaginationMeta.model_validate(
            {
                "currentPage": 2,
                "totalPages": 5,
                "totalItems": 42,
                "hasPrevPage": True,
                "hasNextPage": True,
            }
        )

        assert meta.current_page == 2
        assert meta.total_pages == 5
        assert meta.total_items == 42

    def test_absorb_overwrites_server_echo_fields_only(self):
        state = PaginationState(current_page=3, limit=25, total_pages=9, total_items=200)
        meta = PaginationMeta(
            current_page=1,
            limit=10,
            total_pages=4,
            total_items=31,
            has_prev_page=True,
            has_next_page=False,
        )

        absorbed = state.absorb(meta)

        assert absorbed.current_page == 3
        assert absorbed.limit == 25
        assert absorbed.total_pages == 4
        assert absorbed.total_items == 31
        assert absorbed.has_prev_page is True
        assert absorbed.has_next_page is False

    def test_with_page_clamps_to_one(self):
        assert PaginationState().with_page(0).current_page == 1

    def test_page_must_be_positive(self):
        with pytest.raises(ValidationError):
            PaginationState(current_page=0)


class TestTaskStats:
    """Tests for TaskStats."""

    def test_zero_filled_by_default(self):
        stats = TaskStats()

        assert stats.total == 0
        assert all(stats.count_priority(p) == 0 for p in Priority)
        assert all(stats.count_status(s) == 0 for s in TaskStatus)

    def test_counts_from_payload(self):
        stats = TaskStats.model_validate(
            {"total": 7, "priority": {"P1": 2, "P3": 5}, "status": {"completed": 4}}
        )

        assert stats.count_priority(Priority.P1) == 2
        assert stats.count_priority(Priority.P2) == 0
        assert stats.count_status(TaskStatus.COMPLETED) == 4


class TestConfigModels:
    """Tests for taskflow.yml models."""

    def test_default_config(self):
        config = TaskflowConfig.default()

        assert config.api.url == "http://localhost:5001"
        assert config.api.refresh_delay == 0.1
        assert config.dashboard.page_size == 10
        assert config.dashboard.initial_filters() == FilterSet()

    def test_api_url_strips_trailing_slash(self):
        assert ApiConfig(url="https://tasks.example.com/").url == "https://tasks.example.com"

    def test_api_url_requires_scheme(self):
        with pytest.raises(ValidationError):
            ApiConfig(url="tasks.example.com")

    def test_dashboard_rejects_unknown_sort_field(self):
        with pytest.raises(ValidationError):
            DashboardConfig(sort_by="color")

    def test_dashboard_initial_filters(self):
        dashboard = DashboardConfig(
            priority="P2", status="todo", sort_by="dueDate", sort_order="asc"
        )

        filters = dashboard.initial_filters()

        assert filters.priority == "P2"
        assert filters.status == "todo"
        assert filters.sort_by == "dueDate"
        assert filters.sort_order == "asc"

    def test_dashboard_rejects_bad_color(self):
        with pytest.raises(ValidationError):
            DashboardConfig(priorities={"P1": {"color": "#12"}})

    def test_priority_style_defaults(self):
        dashboard = DashboardConfig()

        assert dashboard.priority_style(Priority.P1).color == "red"
        assert dashboard.priority_style(Priority.P4).label == "Low"
