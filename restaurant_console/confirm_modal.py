"""Delete confirmation modal screen."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from restaurant_console.gate import DeletionConfirmationGate


class DeleteConfirmModal(ModalScreen[bool]):
    """Show the open gate's warning; dismisses True on confirm, False on cancel."""

    CSS = """
    DeleteConfirmModal {
        align: center middle;
        background: $background 60%;
    }

    #delete-dialog {
        width: 60;
        height: auto;
        border: round #b23a48;
        background: $panel;
        padding: 1 2;
    }

    #delete-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #delete-prompt {
        color: white;
        margin-bottom: 1;
    }

    #delete-help {
        color: #dddddd;
    }
    """

    def __init__(self, gate: DeletionConfirmationGate) -> None:
        super().__init__()
        self.gate = gate

    def compose(self) -> ComposeResult:
        with Container(id="delete-dialog"):
            yield Static(self.gate.title, id="delete-title")
            yield Static(self.gate.prompt, id="delete-prompt")
            yield Static("y / Enter delete. n / Esc / q cancel.", id="delete-help")

    def on_key(self, event: Key) -> None:
        if event.key in {"y", "enter"}:
            self.dismiss(True)
            event.stop()
            return

        if event.key in {"n", "escape", "q", "ctrl+c"}:
            self.dismiss(False)
            event.stop()
