"""taskflow TUI Application."""

import logging
from collections.abc import Coroutine
from functools import partial
from typing import Any

from textual.app import App
from textual.binding import Binding
from textual.screen import ModalScreen

from .api import Session, TaskflowClient
from .config import Settings
from .models import (
    ALL,
    ActionResult,
    IngestionResult,
    PaginationState,
    Priority,
    ResultKind,
    Task,
    TaskDraft,
    TaskStatus,
)
from .services import (
    ActionQueue,
    ConfigService,
    IngestionService,
    IngestionSource,
    StatsService,
    StatusWorkflow,
    TaskListService,
    TaskService,
    TaskStore,
    TransitionError,
)
from .ui.screens.dashboard import DashboardScreen
from .ui.widgets import (
    ConfirmModal,
    HelpScreen,
    ParseModal,
    TaskFormModal,
)
from .utils import format_due_date

logger = logging.getLogger(__name__)

STATUS_FILTER_CYCLE: tuple[str, ...] = (
    ALL,
    TaskStatus.TODO.value,
    TaskStatus.IN_PROGRESS.value,
    TaskStatus.COMPLETED.value,
)

SEVERITY_BY_KIND: dict[ResultKind, str] = {
    ResultKind.SUCCESS: "information",
    ResultKind.EMPTY: "warning",
    ResultKind.INVALID: "warning",
    ResultKind.BUSY: "warning",
    ResultKind.REMOTE: "error",
}


class TaskflowApp(App):
    """taskflow - terminal dashboard for a remote task server."""

    TITLE = "taskflow"

    CSS_PATH = "ui/styles.tcss"

    BINDINGS = [
        # Core bindings
        Binding("q", "quit", "Quit", show=True),
        Binding("?", "help", "Help", show=True),
        Binding("r", "refresh", "Refresh", show=True),
        # Task actions
        Binding("n", "new_task", "New", show=True),
        Binding("e", "edit_task", "Edit", show=True),
        Binding("d", "delete_task", "Delete", show=False),
        Binding("p", "parse_tasks", "Extract", show=True),
        # Status changes (each asks for confirmation)
        Binding("c", "set_status('completed')", "Complete", show=True),
        Binding("s", "set_status('in-progress')", "Start", show=False),
        Binding("t", "set_status('todo')", "Reopen", show=False),
        # Filters
        Binding("1", "filter_priority('P1')", "P1", show=False),
        Binding("2", "filter_priority('P2')", "P2", show=False),
        Binding("3", "filter_priority('P3')", "P3", show=False),
        Binding("4", "filter_priority('P4')", "P4", show=False),
        Binding("0", "filter_priority('all')", "Any priority", show=False),
        Binding("f", "cycle_status_filter", "Status filter", show=False),
        Binding("/", "enter_search", "Search", show=True),
        # Pagination
        Binding("left_square_bracket", "prev_page", "Prev page", show=False),
        Binding("right_square_bracket", "next_page", "Next page", show=False),
        Binding("escape", "escape", "Back", show=False, priority=True),
    ]

    def __init__(self, settings: Settings | None = None) -> None:
        super().__init__()
        self.settings = settings or Settings()
        self._init_services()

    def _init_services(self) -> None:
        """Build the client, store and services from settings and taskflow.yml."""
        self.config_service = ConfigService(self.settings.project_root)
        self.taskflow_config = self.config_service.get_config()
        api_config = self.taskflow_config.api
        api_url = (self.settings.api_url or api_config.url).rstrip("/")

        self.session = Session(self.settings.token)
        self.session.on_invalidated(self._on_session_invalidated)
        self.client = TaskflowClient(api_url, self.session, timeout=api_config.timeout)

        dashboard = self.taskflow_config.dashboard
        self.store = TaskStore(
            filters=dashboard.initial_filters(),
            pagination=PaginationState(limit=dashboard.page_size),
        )
        self.queue = ActionQueue()
        self.stats_service = StatsService(self.client)
        self.list_service = TaskListService(
            self.store,
            self.client,
            self.stats_service,
            queue=self.queue,
            refresh_delay=api_config.refresh_delay,
        )
        self.status_workflow = StatusWorkflow(self.store, self.client, self.list_service)
        self.ingestion_service = IngestionService(self.store, self.client, self.stats_service)
        self.task_service = TaskService(self.store, self.client, self.list_service)
        logger.info("Using task server at %s", api_url)

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.push_screen(DashboardScreen())
        if self.config_service.has_config_error:
            self.notify(
                f"{self.config_service.config_error} (using defaults)",
                severity="warning",
                timeout=6,
            )
        self._run(self._refresh(), "refresh")

    async def on_unmount(self) -> None:
        self.queue.cancel_all()
        await self.client.aclose()

    def _run(self, coro: Coroutine[Any, Any, Any], group: str) -> None:
        """Run a service call as a worker on the app's event loop."""
        self.run_worker(coro, group=group, exit_on_error=False)

    def _report(self, result: ActionResult | IngestionResult, quiet: bool = False) -> None:
        """Turn an action result into a notification.

        With ``quiet`` set, successes are not announced.
        """
        if result.ok and quiet:
            return
        self.notify(
            result.message,
            severity=SEVERITY_BY_KIND.get(result.kind, "information"),
            timeout=2 if result.ok else 4,
        )

    def _on_session_invalidated(self) -> None:
        self.notify(
            "Not authorized: set a valid token with --token or TASKFLOW_TOKEN",
            severity="error",
            timeout=8,
        )

    def _current_task(self) -> Task | None:
        screen = self.screen
        if not isinstance(screen, DashboardScreen):
            return None
        return screen.get_current_task()

    # General actions
    def action_refresh(self) -> None:
        """Reload tasks and stats."""
        self._run(self._refresh(), "refresh")

    async def _refresh(self) -> None:
        result = await self.list_service.refresh()
        self._report(result, quiet=True)

    def action_help(self) -> None:
        """Show help screen."""
        self.push_screen(HelpScreen())

    # Task actions
    def action_new_task(self) -> None:
        """Open the task form for a new task."""
        if not isinstance(self.screen, DashboardScreen):
            return
        self.push_screen(  # pyrefly: ignore[no-matching-overload]
            TaskFormModal(),
            callback=self._handle_new_task,
        )

    def _handle_new_task(self, values: dict[str, Any] | None) -> None:
        if values is None:
            return
        draft = TaskDraft(
            title=values["task_name"],
            description=values["description"],
            priority=values["priority"],
            status=values["status"],
            due_date=values["due_date"],
            assignee=values["assignee"],
        )
        self._run(self._create_task(draft), "create")

    async def _create_task(self, draft: TaskDraft) -> None:
        result = await self.task_service.create_task(draft)
        self._report(result)

    def action_edit_task(self) -> None:
        """Open the task form prefilled with the current task."""
        task = self._current_task()
        if task is None:
            return
        self.push_screen(  # pyrefly: ignore[no-matching-overload]
            TaskFormModal(task),
            callback=partial(self._handle_edit_task, task),
        )

    def _handle_edit_task(self, original: Task, values: dict[str, Any] | None) -> None:
        if values is None:
            return
        changes = changed_fields(original, values)
        if not changes:
            self.notify("No changes", timeout=2)
            return
        self._run(self._update_task(original.id, changes), "update")

    async def _update_task(self, task_id: str, changes: dict[str, Any]) -> None:
        result = await self.task_service.update_task(task_id, changes)
        self._report(result)

    def action_delete_task(self) -> None:
        """Delete the current task (with confirmation)."""
        task = self._current_task()
        if task is None:
            return
        self.push_screen(  # pyrefly: ignore[no-matching-overload]
            ConfirmModal(
                f"Delete '{task.display_title}'?",
                title="Delete task",
                confirm_label="Delete",
                destructive=True,
            ),
            callback=partial(self._handle_delete_confirm, task.id),
        )

    def _handle_delete_confirm(self, task_id: str, confirmed: bool) -> None:
        if not confirmed:
            return
        self._run(self._delete_task(task_id), "delete")

    async def _delete_task(self, task_id: str) -> None:
        result = await self.task_service.delete_task(task_id)
        self._report(result)

    def action_set_status(self, status: str) -> None:
        """Stage a status change for the current task and ask to confirm it."""
        task = self._current_task()
        if task is None:
            return
        try:
            staged = self.status_workflow.stage(task, status)
        except TransitionError as e:
            self.notify(str(e), severity="warning", timeout=2)
            return
        self.push_screen(  # pyrefly: ignore[no-matching-overload]
            ConfirmModal(staged.prompt, title="Change status", confirm_label="Confirm"),
            callback=self._handle_status_confirm,
        )

    def _handle_status_confirm(self, confirmed: bool) -> None:
        if not confirmed:
            self.status_workflow.cancel()
            return
        self._run(self._confirm_status(), "status")

    async def _confirm_status(self) -> None:
        result = await self.status_workflow.confirm()
        self._report(result)

    def action_parse_tasks(self) -> None:
        """Open the extraction modal."""
        if not isinstance(self.screen, DashboardScreen):
            return
        self.push_screen(  # pyrefly: ignore[no-matching-overload]
            ParseModal(validator=self.ingestion_service.validate),
            callback=self._handle_parse,
        )

    def _handle_parse(self, source: IngestionSource | None) -> None:
        if source is None:
            return
        self.notify("Extracting tasks...", timeout=2)
        self._run(self._ingest(source), "parse")

    async def _ingest(self, source: IngestionSource) -> None:
        result = await self.ingestion_service.ingest(source)
        self._report(result)

    # Filter actions
    def action_filter_priority(self, priority: str) -> None:
        """Show only one priority (or all of them)."""
        if priority != ALL:
            priority = Priority(priority).value
        self._run(self._change_filters(priority=priority), "filters")

    def action_cycle_status_filter(self) -> None:
        """Step the status filter through all, todo, in-progress, completed."""
        current = self.store.filters.status
        index = STATUS_FILTER_CYCLE.index(current) if current in STATUS_FILTER_CYCLE else -1
        status = STATUS_FILTER_CYCLE[(index + 1) % len(STATUS_FILTER_CYCLE)]
        self.notify(f"Status: {status}", timeout=1)
        self._run(self._change_filters(status=status), "filters")

    async def _change_filters(self, **changes: str) -> None:
        result = await self.list_service.change_filters(**changes)
        self._report(result, quiet=True)

    def action_enter_search(self) -> None:
        """Open the search bar."""
        screen = self.screen
        if not isinstance(screen, DashboardScreen):
            return
        screen.command_bar.open()

    def action_escape(self) -> None:
        """Handle escape: dismiss modal, close the search bar, or clear the search."""
        screen = self.screen

        # If we're on a modal screen, dismiss it
        if isinstance(screen, ModalScreen):
            screen.dismiss()
            return

        if not isinstance(screen, DashboardScreen):
            return

        command_bar = screen.command_bar
        if command_bar.is_visible:
            command_bar.close()
            screen.query_one("#task-table").focus()
        elif command_bar.expression or self.store.filters.search:
            command_bar.clear()
            self._run(self._apply_search(""), "filters")

    def on_input_submitted(self, event) -> None:
        """Handle search input submission."""
        if event.input.id != "search-input":
            return
        screen = self.screen
        if isinstance(screen, DashboardScreen):
            command_bar = screen.command_bar
            command_bar.remember(event.value)
            command_bar.close()
            screen.query_one("#task-table").focus()
            self._run(self._apply_search(event.value), "filters")

    async def _apply_search(self, expression: str) -> None:
        result = await self.list_service.apply_expression(expression)
        self._report(result, quiet=True)

    # Pagination actions
    def action_prev_page(self) -> None:
        self._run(self._turn_page(-1), "page")

    def action_next_page(self) -> None:
        self._run(self._turn_page(1), "page")

    async def _turn_page(self, delta: int) -> None:
        if delta < 0:
            result = await self.list_service.prev_page()
        else:
            result = await self.list_service.next_page()
        self._report(result, quiet=True)


def changed_fields(original: Task, values: dict[str, Any]) -> dict[str, Any]:
    """Form values that differ from ``original``.

    Blank and missing count as equal; due dates compare by calendar day.
    """
    changes: dict[str, Any] = {}
    for name, value in values.items():
        current = getattr(original, name)
        if name == "due_date":
            if format_due_date(current) == format_due_date(value):
                continue
        elif (current or None) == (value or None):
            continue
        changes[name] = value
    return changes


def run(settings: Settings | None = None) -> None:
    """Run the taskflow application."""
    app = TaskflowApp(settings)
    app.run()
