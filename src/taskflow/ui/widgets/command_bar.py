"""Search bar widget."""

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widget import Widget
from textual.widgets import Input, Static


class CommandBar(Widget):
    """Search bar docked at the bottom of the dashboard.

    Holds the last applied expression so reopening the bar shows it again.
    """

    DEFAULT_CSS = """
    CommandBar {
        height: 1;
        dock: bottom;
        background: $surface;
        display: none;
        layer: command;
    }

    CommandBar.-visible {
        display: block;
    }

    CommandBar .mode-indicator {
        width: auto;
        padding: 0 1;
        background: $primary;
        color: $text;
    }

    CommandBar .search-input {
        width: 1fr;
        border: none;
        background: $surface;
    }

    CommandBar .search-input:focus {
        border: none;
    }
    """

    def __init__(self) -> None:
        super().__init__()
        self._expression: str = ""

    def compose(self) -> ComposeResult:
        with Horizontal():
            yield Static("Search:", classes="mode-indicator")
            yield Input(
                placeholder="priority:P1 status:todo sort:dueDate order:asc words...",
                id="search-input",
                classes="search-input",
            )

    def open(self) -> None:
        """Show the bar and focus the input."""
        self.add_class("-visible")
        input_widget = self.query_one("#search-input", Input)
        input_widget.value = self._expression
        input_widget.focus()

    def close(self) -> None:
        """Hide the bar without applying anything."""
        self.remove_class("-visible")

    def remember(self, expression: str) -> None:
        self._expression = expression.strip()

    def clear(self) -> None:
        self._expression = ""
        self.query_one("#search-input", Input).value = ""

    @property
    def expression(self) -> str:
        """The last applied expression."""
        return self._expression

    @property
    def is_visible(self) -> bool:
        return self.has_class("-visible")
