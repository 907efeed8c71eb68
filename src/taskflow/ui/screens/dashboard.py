"""Main dashboard screen."""

from collections.abc import Callable

from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import Footer, Header, Static

from ...models import ALL, DashboardConfig, FilterSet, PaginationState, Task, TaskStats
from ...services import StoreSnapshot
from ..widgets.command_bar import CommandBar
from ..widgets.stats_bar import StatsBar
from ..widgets.task_table import TaskTable


def describe_filters(filters: FilterSet) -> str:
    """Summarize the active filters; empty when nothing narrows the list."""
    parts = []
    if filters.priority != ALL:
        parts.append(f"priority:{filters.priority}")
    if filters.status != ALL:
        parts.append(f"status:{filters.status}")
    if filters.search:
        parts.append(f'"{filters.search}"')
    return " ".join(parts)


def describe_page(pagination: PaginationState, filters: FilterSet) -> str:
    total_pages = max(pagination.total_pages, 1)
    arrows = ("◀ " if pagination.has_prev_page else "  ") + (
        "▶" if pagination.has_next_page else " "
    )
    return (
        f"{arrows} Page {pagination.current_page} of {total_pages}"
        f"  ·  {pagination.total_items} tasks"
        f"  ·  sorted by {filters.sort_by} {filters.sort_order}"
    )


class DashboardScreen(Screen):
    """Stats, the current page of tasks and the search bar.

    Renders from store snapshots; it never mutates the store itself.
    """

    # Layers for z-ordering (later = higher)
    LAYERS = ["base", "command"]

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def dashboard_config(self) -> DashboardConfig:
        return self.app.taskflow_config.dashboard  # pyrefly: ignore[missing-attribute]

    def compose(self) -> ComposeResult:
        yield Header()
        yield StatsBar("", id="stats-bar")
        with Container(id="table-container"):
            yield TaskTable(id="task-table")
        yield Static("", id="page-status", classes="page-status-bar")
        yield Static("", id="filter-status", classes="filter-status-bar")
        yield CommandBar()
        yield Footer()

    def on_mount(self) -> None:
        store = self.app.store  # pyrefly: ignore[missing-attribute]
        stats_service = self.app.stats_service  # pyrefly: ignore[missing-attribute]
        self._unsubscribe = store.subscribe(self.render_snapshot)
        stats_service.subscribe(self.render_stats)
        self.render_snapshot(store.snapshot)
        self.render_stats(stats_service.stats)
        self.query_one(TaskTable).focus()

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def render_snapshot(self, snapshot: StoreSnapshot) -> None:
        """Redraw table, page line and filter line from ``snapshot``."""
        table = self.query_one(TaskTable)
        if table.tasks != snapshot.tasks:
            table.set_tasks(snapshot.tasks, self.dashboard_config)
        table.loading = snapshot.is_loading and not snapshot.tasks

        self.query_one("#page-status", Static).update(
            describe_page(snapshot.pagination, snapshot.filters)
        )

        filter_text = describe_filters(snapshot.filters)
        status = self.query_one("#filter-status", Static)
        if filter_text:
            status.update(f"[dim]Filter:[/] {filter_text} [dim](Esc to clear search)[/]")
            status.display = True
        else:
            status.update("")
            status.display = False

    def render_stats(self, stats: TaskStats) -> None:
        self.query_one(StatsBar).show_stats(stats, self.dashboard_config)

    def get_current_task(self) -> Task | None:
        """Get the task under the table cursor."""
        return self.query_one(TaskTable).current_task

    @property
    def command_bar(self) -> CommandBar:
        return self.query_one(CommandBar)
