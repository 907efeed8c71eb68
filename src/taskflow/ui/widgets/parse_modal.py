"""Modal for bulk task extraction from text or a file."""

from collections.abc import Callable
from pathlib import Path

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Center, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Static, TextArea

from ...services import MIN_TEXT_LENGTH, IngestionSource, IngestionValidationError


class ParseModal(ModalScreen[IngestionSource | None]):
    """Paste meeting notes (or point at a .txt/.md file) to extract tasks.

    When a file path is filled in it takes precedence over the text.
    """

    DEFAULT_CSS = """
    ParseModal {
        align: center middle;
    }

    ParseModal > Vertical {
        width: 80;
        height: auto;
        max-height: 90%;
        padding: 1 2;
        background: $surface;
        border: solid $primary;
    }

    ParseModal .form-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    ParseModal TextArea {
        height: 12;
    }

    ParseModal .char-count {
        color: $text-muted;
        text-align: right;
    }

    ParseModal .form-error {
        color: $error;
        height: auto;
    }

    ParseModal .buttons {
        width: 100%;
        height: auto;
        align: center middle;
        margin-top: 1;
    }

    ParseModal Button {
        margin: 0 1;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("ctrl+s", "submit", "Extract"),
    ]

    def __init__(self, validator: Callable[[IngestionSource], None] | None = None) -> None:
        """
        Args:
            validator: Called before dismissing; an IngestionValidationError
                keeps the modal open and shows the message inline
        """
        super().__init__()
        self._validator = validator

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label("Extract Tasks", classes="form-title")
            yield TextArea(id="parse-text")
            yield Static(self._count_text(0), id="char-count", classes="char-count")
            yield Input(placeholder="or a .txt / .md file path", id="parse-file")
            yield Label("", id="form-error", classes="form-error")
            with Center(classes="buttons"):
                yield Button("Extract", id="submit", variant="success")
                yield Button("Cancel", id="cancel", variant="primary")

    def on_mount(self) -> None:
        self.query_one("#parse-text", TextArea).focus()

    @staticmethod
    def _count_text(count: int) -> str:
        return f"{count} characters (min {MIN_TEXT_LENGTH})"

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        count = len(event.text_area.text)
        self.query_one("#char-count", Static).update(self._count_text(count))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "submit":
            self.action_submit()
        else:
            self.action_cancel()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.action_submit()

    def build_source(self) -> IngestionSource:
        text = self.query_one("#parse-text", TextArea).text
        raw_path = self.query_one("#parse-file", Input).value.strip()
        file = Path(raw_path).expanduser() if raw_path else None
        return IngestionSource(text=text, file=file)

    def action_submit(self) -> None:
        source = self.build_source()
        if self._validator is not None:
            try:
                self._validator(source)
            except IngestionValidationError as e:
                self.query_one("#form-error", Label).update(str(e))
                return
        self.dismiss(source)

    def action_cancel(self) -> None:
        self.dismiss(None)
