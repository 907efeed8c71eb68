"""Task table widget."""

from __future__ import annotations

from rich.text import Text
from textual.widgets import DataTable

from ...models import DashboardConfig, Task, TaskStatus
from ...utils import format_due_date, is_overdue

TITLE_WIDTH = 40


def truncate(text: str, max_len: int) -> str:
    """Truncate text with ellipsis."""
    if len(text) <= max_len:
        return text
    return text[: max_len - 1] + "…"


def task_row(task: Task, config: DashboardConfig) -> tuple[Text, Text, Text, Text, Text]:
    """Render one task as table cells."""
    style = config.priority_style(task.priority)
    priority = Text("● ", style=style.color)
    priority.append(f"{task.priority.value} {style.label}".strip())

    status_color = config.status_colors.get(task.status, "white")
    status = Text(task.status.label, style=status_color)

    due = Text(format_due_date(task.due_date))
    if task.status != TaskStatus.COMPLETED and is_overdue(task.due_date):
        due.stylize("bold red")

    assignee = Text(f"@{task.assignee}" if task.assignee else "-", style="dim")
    return Text(truncate(task.display_title, TITLE_WIDTH)), priority, status, due, assignee


class TaskTable(DataTable):
    """Rows of the current page, in server order.

    Keeps the cursor on the same task id across re-renders when it is
    still on the page.
    """

    COLUMNS = ("Title", "Priority", "Status", "Due", "Assignee")

    def __init__(self, *args, **kwargs) -> None:
        kwargs.setdefault("cursor_type", "row")
        kwargs.setdefault("zebra_stripes", True)
        super().__init__(*args, **kwargs)
        self._tasks: tuple[Task, ...] = ()

    def on_mount(self) -> None:
        self.add_columns(*self.COLUMNS)

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._tasks

    def set_tasks(self, tasks: tuple[Task, ...], config: DashboardConfig) -> None:
        """Replace all rows."""
        current = self.current_task
        self._tasks = tasks
        self.clear()
        for task in tasks:
            self.add_row(*task_row(task, config), key=task.id)

        if current is not None:
            for index, task in enumerate(tasks):
                if task.id == current.id:
                    self.move_cursor(row=index)
                    break

    @property
    def current_task(self) -> Task | None:
        """The task under the cursor, if any."""
        row = self.cursor_row
        if 0 <= row < len(self._tasks):
            return self._tasks[row]
        return None
