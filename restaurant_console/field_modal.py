"""Single field entry modal screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from restaurant_console.models import NUMERIC_FIELDS, parse_number


class FieldEditModal(ModalScreen[str | None]):
    """Prompt for one field value; dismisses the text, or None on cancel."""

    CSS = """
    FieldEditModal {
        align: center middle;
        background: $background 60%;
    }

    #field-dialog {
        width: 64;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #field-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #field-value {
        border: heavy $secondary;
        padding: 0 1;
        color: white;
        margin-bottom: 1;
    }

    #field-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #field-help {
        color: #dddddd;
    }
    """

    def __init__(self, label: str, field: str, value: object = None) -> None:
        super().__init__()
        self.label = label
        self.field = field.rsplit(".", 1)[-1]
        self.value = "" if value is None else str(value)
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="field-dialog"):
            yield Static(self.label, id="field-title")
            yield Static(id="field-value")
            yield Static(id="field-error")
            yield Static("Enter confirm. Backspace delete. Esc cancel.", id="field-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key in {"escape", "ctrl+c"}:
            self.dismiss(None)
            event.stop()
            return

        if event.key == "enter":
            self._confirm()
            event.stop()
            return

        if event.key == "backspace":
            if self.value:
                self.value = self.value[:-1]
                self.error = ""
                self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character:
            self.value += event.character
            self.error = ""
            self._refresh_content()
            event.stop()

    def _confirm(self) -> None:
        if self.field in NUMERIC_FIELDS and self.value.strip():
            try:
                parse_number(self.value)
            except ValueError:
                self.error = f"{self.label} must be a number."
                self._refresh_content()
                return
        self.dismiss(self.value)

    def _refresh_content(self) -> None:
        value_widget = self.query_one("#field-value", Static)
        error_widget = self.query_one("#field-error", Static)
        value_widget.update(Text(f"{self.value}|"))
        error_widget.update(Text(self.error))
