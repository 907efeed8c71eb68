"""Help screen showing keyboard shortcuts."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Static

# (section, [(key, description), ...])
HELP_SECTIONS: list[tuple[str, list[tuple[str, str]]]] = [
    (
        "Navigation",
        [
            ("Up / Down", "Move between tasks"),
            ("[ / ]", "Previous / next page"),
        ],
    ),
    (
        "Tasks",
        [
            ("n", "Create new task"),
            ("e", "Edit current task"),
            ("d", "Delete current task"),
            ("c", "Mark completed (asks first)"),
            ("s", "Start: mark in progress (asks first)"),
            ("t", "Reopen: mark to do (asks first)"),
            ("p", "Extract tasks from text or a file"),
        ],
    ),
    (
        "Filters",
        [
            ("1-4", "Show only P1..P4"),
            ("0", "Any priority"),
            ("f", "Cycle status filter"),
            ("/", "Search"),
            ("Escape", "Clear search / Cancel"),
        ],
    ),
    (
        "Search Syntax",
        [
            ("words", "Search task text"),
            ("priority:P1", "Filter by priority (or all)"),
            ("status:todo", "todo, in-progress, completed, all"),
            ("sort:dueDate", "Sort field"),
            ("order:asc", "Sort direction"),
        ],
    ),
    (
        "General",
        [
            ("r", "Refresh tasks and stats"),
            ("?", "Show this help"),
            ("q", "Quit"),
        ],
    ),
]


class HelpScreen(ModalScreen):
    """Modal help screen showing keyboard shortcuts."""

    DEFAULT_CSS = """
    HelpScreen {
        align: center middle;
    }

    HelpScreen > Vertical {
        width: 70;
        height: auto;
        max-height: 90%;
        padding: 1 2;
        background: $surface;
        border: solid $primary;
    }

    HelpScreen .help-title {
        text-align: center;
        text-style: bold;
        padding-bottom: 1;
        border-bottom: solid $primary-darken-2;
    }

    HelpScreen .help-section {
        height: auto;
        padding: 1 0 0 0;
    }

    HelpScreen .section-title {
        text-style: bold;
        color: $primary;
    }

    HelpScreen .help-row {
        height: 1;
    }

    HelpScreen .help-key {
        width: 15;
        text-style: bold;
    }

    HelpScreen .help-desc {
        width: 1fr;
        color: $text-muted;
    }

    HelpScreen .help-footer {
        text-align: center;
        color: $text-muted;
        padding-top: 1;
        border-top: solid $primary-darken-2;
    }
    """

    BINDINGS = [
        Binding("escape", "dismiss", "Close", show=False),
    ]

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static("Keyboard Shortcuts", classes="help-title")
            for title, rows in HELP_SECTIONS:
                with Vertical(classes="help-section"):
                    yield Static(title, classes="section-title")
                    for key, description in rows:
                        yield self._help_row(key, description)
            yield Static("Press any key to close", classes="help-footer")

    def _help_row(self, key: str, description: str) -> Horizontal:
        row = Horizontal(classes="help-row")
        row.compose_add_child(Static(key, classes="help-key", markup=False))
        row.compose_add_child(Static(description, classes="help-desc"))
        return row

    def on_key(self, event) -> None:
        """Dismiss on any key press and prevent propagation."""
        event.stop()
        self.dismiss()
