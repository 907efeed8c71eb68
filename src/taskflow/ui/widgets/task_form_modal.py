"""Modal form for creating and editing tasks."""

from typing import Any

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Center, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Select

from ...models import Priority, Task, TaskStatus
from ...utils import format_due_date, parse_due_date


class TaskFormModal(ModalScreen[dict[str, Any] | None]):
    """Form for a task's editable fields.

    Dismisses with a dict keyed by Task field names, or None on cancel.
    With ``task`` given the form is prefilled and the status field is left
    out: status changes go through the confirmation workflow instead.
    """

    DEFAULT_CSS = """
    TaskFormModal {
        align: center middle;
    }

    TaskFormModal > Vertical {
        width: 70;
        height: auto;
        max-height: 90%;
        padding: 1 2;
        background: $surface;
        border: solid $primary;
    }

    TaskFormModal .form-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    TaskFormModal .field-label {
        color: $text-muted;
    }

    TaskFormModal .form-error {
        color: $error;
        height: auto;
    }

    TaskFormModal .buttons {
        width: 100%;
        height: auto;
        align: center middle;
        margin-top: 1;
    }

    TaskFormModal Button {
        margin: 0 1;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("ctrl+s", "save", "Save"),
    ]

    def __init__(self, task: Task | None = None) -> None:
        super().__init__()
        self._task_data = task

    @property
    def is_edit(self) -> bool:
        return self._task_data is not None

    def compose(self) -> ComposeResult:
        task = self._task_data
        with Vertical():
            yield Label("Edit Task" if task else "New Task", classes="form-title")

            yield Label("Title", classes="field-label")
            yield Input(value=task.task_name if task else "", id="task-name")

            yield Label("Description", classes="field-label")
            yield Input(value=(task.description or "") if task else "", id="description")

            yield Label("Priority", classes="field-label")
            yield Select(
                [(p.value, p.value) for p in Priority],
                value=(task.priority if task else Priority.P3).value,
                allow_blank=False,
                id="priority",
            )

            if not task:
                yield Label("Status", classes="field-label")
                yield Select(
                    [(s.label, s.value) for s in TaskStatus],
                    value=TaskStatus.TODO.value,
                    allow_blank=False,
                    id="status",
                )

            yield Label("Due date (YYYY-MM-DD)", classes="field-label")
            due = format_due_date(task.due_date) if task and task.due_date else ""
            yield Input(value=due, placeholder="optional", id="due-date")

            yield Label("Assignee", classes="field-label")
            yield Input(value=(task.assignee or "") if task else "", id="assignee")

            yield Label("", id="form-error", classes="form-error")
            with Center(classes="buttons"):
                yield Button("Save", id="save", variant="success")
                yield Button("Cancel", id="cancel", variant="primary")

    def on_mount(self) -> None:
        self.query_one("#task-name", Input).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "save":
            self.action_save()
        else:
            self.action_cancel()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.action_save()

    def action_save(self) -> None:
        values = self._collect()
        if values is not None:
            self.dismiss(values)

    def action_cancel(self) -> None:
        self.dismiss(None)

    def _collect(self) -> dict[str, Any] | None:
        """Read the inputs, or show an error and return None."""
        title = self.query_one("#task-name", Input).value.strip()
        if not title:
            self._show_error("Title is required")
            return None

        try:
            due_date = parse_due_date(self.query_one("#due-date", Input).value)
        except ValueError:
            self._show_error("Due date must look like 2025-01-31")
            return None

        values: dict[str, Any] = {
            "task_name": title,
            "description": self.query_one("#description", Input).value.strip(),
            "priority": Priority(self.query_one("#priority", Select).value),
            "due_date": due_date,
            "assignee": self.query_one("#assignee", Input).value.strip(),
        }
        if not self.is_edit:
            values["status"] = TaskStatus(self.query_one("#status", Select).value)
        return values

    def _show_error(self, message: str) -> None:
        self.query_one("#form-error", Label).update(message)
