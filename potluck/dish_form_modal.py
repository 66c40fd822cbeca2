"""Add/edit dish form modal screen."""

from __future__ import annotations

from typing import Callable

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from potluck.errors import ValidationError
from potluck.models import DishRecord, EditPayload

_TEXT_FIELDS = ("dish_name", "guest_name")
_FLAG_FIELDS = ("is_vegan", "is_gluten_free", "is_lactose_free")
_FIELD_LABELS = {
    "dish_name": "Dish name",
    "guest_name": "Your name",
    "is_vegan": "Vegan",
    "is_gluten_free": "Gluten Free",
    "is_lactose_free": "Lactose Free",
}
_MAX_TEXT = 80


class DishFormModal(ModalScreen[EditPayload | None]):
    """Collect dish fields and hand them to ``submit``.

    ``submit`` raises ValidationError to keep the form open with its messages;
    otherwise the modal dismisses with the submitted payload.
    """

    CSS = """
    DishFormModal {
        align: center middle;
        background: $background 60%;
    }

    #dish-form-dialog {
        width: 60;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #dish-form-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #dish-form-body {
        color: white;
        margin-bottom: 1;
    }

    #dish-form-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #dish-form-help {
        color: #dddddd;
    }
    """

    def __init__(
        self,
        submit: Callable[[EditPayload], object],
        *,
        title: str = "Add a Dish",
        record: DishRecord | None = None,
    ) -> None:
        super().__init__()
        self.submit = submit
        self.form_title = title
        self.values: dict[str, str | bool] = {
            "dish_name": record.dish_name if record else "",
            "guest_name": record.guest_name if record else "",
            "is_vegan": record.is_vegan if record else False,
            "is_gluten_free": record.is_gluten_free if record else False,
            "is_lactose_free": record.is_lactose_free if record else False,
        }
        self.fields = [*_TEXT_FIELDS, *_FLAG_FIELDS]
        self.cursor_index = 0
        self.errors: list[str] = []

    def compose(self) -> ComposeResult:
        with Container(id="dish-form-dialog"):
            yield Static(self.form_title, id="dish-form-title")
            yield Static(id="dish-form-body")
            yield Static(id="dish-form-error")
            yield Static(
                "↑/↓/Tab move. Type to edit names, Space toggles tags. Enter save. Esc/Ctrl+C cancel.",
                id="dish-form-help",
            )

    def on_mount(self) -> None:
        self._refresh_content()

    def payload(self) -> EditPayload:
        return EditPayload(
            dish_name=str(self.values["dish_name"]),
            guest_name=str(self.values["guest_name"]),
            is_vegan=bool(self.values["is_vegan"]),
            is_gluten_free=bool(self.values["is_gluten_free"]),
            is_lactose_free=bool(self.values["is_lactose_free"]),
        )

    def on_key(self, event: Key) -> None:
        event.stop()
        event.prevent_default()

        if event.key in {"escape", "ctrl+c"}:
            self.dismiss(None)
            return

        if event.key == "enter":
            self._confirm()
            return

        if event.key in {"down", "tab"}:
            self._move_cursor(1)
            return

        if event.key in {"up", "shift+tab"}:
            self._move_cursor(-1)
            return

        field_name = self.fields[self.cursor_index]
        if field_name in _FLAG_FIELDS:
            if event.key == "space":
                self.values[field_name] = not self.values[field_name]
                self._refresh_content()
            return

        current = str(self.values[field_name])
        if event.key == "backspace":
            if current:
                self.values[field_name] = current[:-1]
                self._refresh_content()
            return

        if event.is_printable and event.character and len(current) < _MAX_TEXT:
            self.values[field_name] = current + event.character
            self.errors = []
            self._refresh_content()

    def _move_cursor(self, delta: int) -> None:
        self.cursor_index = (self.cursor_index + delta) % len(self.fields)
        self._refresh_content()

    def _confirm(self) -> None:
        payload = self.payload()
        try:
            self.submit(payload)
        except ValidationError as exc:
            self.errors = exc.messages
            self._refresh_content()
            return
        self.dismiss(payload)

    def _refresh_content(self) -> None:
        body = self.query_one("#dish-form-body", Static)
        error_widget = self.query_one("#dish-form-error", Static)

        content = Text(style="white")
        for idx, field_name in enumerate(self.fields):
            if idx > 0:
                content.append("\n")
            active = idx == self.cursor_index
            pointer = "➤ " if active else "  "
            label = _FIELD_LABELS[field_name]
            if field_name in _TEXT_FIELDS:
                value = str(self.values[field_name])
                cursor = "|" if active else ""
                content.append(f"{pointer}{label}: ", style="bold white" if active else "white")
                content.append(f"{value}{cursor}")
            else:
                checked = "[x]" if self.values[field_name] else "[ ]"
                content.append(f"{pointer}{checked} {label}", style="bold white" if active else "white")

        body.update(content)
        error_widget.update(Text("\n".join(self.errors)))
