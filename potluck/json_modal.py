"""Read-only export view of the full dish list."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Static


class JsonModal(ModalScreen[None]):
    """Show exported JSON. Select and copy from the terminal."""

    BINDINGS = [
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
        ("ctrl+c", "close", "Close"),
    ]

    CSS = """
    JsonModal {
        align: center middle;
        background: $background 60%;
    }

    #json-dialog {
        width: 80%;
        height: 80%;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #json-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #json-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    def __init__(self, payload: str) -> None:
        super().__init__()
        self.payload = payload

    def compose(self) -> ComposeResult:
        with Container(id="json-dialog"):
            yield Static("Exported JSON", id="json-title")
            with VerticalScroll():
                yield Static(self.payload, id="json-output", markup=False)
            yield Static("Esc / q / Ctrl+C to close", id="json-help")

    def action_close(self) -> None:
        self.dismiss()
