"""Main Textual app class."""

from __future__ import annotations

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Header, Static

from potluck.config import REFRESH_SECONDS
from potluck.confirm_modal import ConfirmModal
from potluck.dish_form_modal import DishFormModal
from potluck.errors import ReadOnlyCollection
from potluck.json_modal import JsonModal
from potluck.logging_utils import get_logger
from potluck.models import DishRecord, EditPayload, FilterSpec
from potluck.remote import open_issue_form
from potluck.rendering import format_dish_label, format_dish_tags, format_filter_bar, format_status
from potluck.session import DishBook, SyncMode

logger = get_logger(__name__)


class PotluckApp(App):
    """A Textual app for signing up dishes and browsing the potluck list."""

    TITLE = "Potluck"
    SUB_TITLE = "Who's bringing what"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    #dishes-pane {
        width: 3fr;
        border: round $primary;
        padding: 1;
    }

    #filter-pane {
        width: 2fr;
        border: round $secondary;
        padding: 1;
    }

    #filter-bar {
        border: heavy $secondary;
        padding: 0 1;
        margin-bottom: 1;
        height: 4;
    }

    #status {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #dishes-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    input_state = reactive("normal")
    selected_index = reactive(None)

    BINDINGS = [
        ("up", "move_selection(-1)", "Previous dish"),
        ("down", "move_selection(1)", "Next dish"),
        ("backspace", "backspace_search", "Delete search char"),
        Binding("ctrl+e", "export_json", "Export JSON", priority=True),
        Binding("ctrl+r", "reset_all", "Reset list", priority=True),
        ("ctrl+c", "cancel_search", "Exit search"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, book: DishBook) -> None:
        super().__init__()
        self.book = book
        self.filters = FilterSpec()
        self.system_status = ""

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="dishes-pane"):
                yield Static("Dishes", classes="pane-title")
                yield Static("(no dishes yet)", id="dishes-list")
            with Vertical(id="filter-pane"):
                yield Static(id="filter-bar")
                yield Static(id="status")

    def on_mount(self) -> None:
        if self.book.mode is SyncMode.REMOTE:
            self.system_status = "Loading dishes..."
            self._start_refresh()
            self.set_interval(REFRESH_SECONDS, self._start_refresh)
        else:
            self.book.load()
            self.system_status = f"{len(self.book.records)} dishes loaded"
        logger.info(f"on_mount mode={self.book.mode.value}")
        self._refresh_all()

    def on_key(self, event: Key) -> None:
        if isinstance(self.screen, ModalScreen):
            return

        if self.input_state == "search":
            if event.key in {"enter", "escape"}:
                self.input_state = "normal"
                self._refresh_all()
                event.stop()
                return
            if event.is_printable and event.character:
                self.filters.search_text += event.character
                self.selected_index = None
                self._refresh_all()
                event.stop()
            return

        if not event.is_printable or not event.character:
            return

        key = event.character.lower()
        handlers = {
            "/": self._start_search,
            "v": lambda: self._toggle_filter("only_vegan"),
            "g": lambda: self._toggle_filter("only_gluten_free"),
            "l": lambda: self._toggle_filter("only_lactose_free"),
            "x": self._clear_filters,
            "a": self._open_add_form,
            "e": self._open_edit_form,
            "d": self._confirm_remove_selected,
            "j": lambda: self.action_move_selection(1),
            "k": lambda: self.action_move_selection(-1),
            "r": self._start_refresh,
        }
        handler = handlers.get(key)
        if handler is None:
            return
        handler()
        event.stop()

    def action_cancel_search(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state == "normal":
            return
        self.input_state = "normal"
        self._refresh_all()

    def action_backspace_search(self) -> None:
        if self.input_state != "search" or not self.filters.search_text:
            return
        self.filters.search_text = self.filters.search_text[:-1]
        self.selected_index = None
        self._refresh_all()

    def action_move_selection(self, delta: int) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        visible = self._visible()
        if not visible:
            return
        if self.selected_index is None:
            self.selected_index = 0 if delta > 0 else len(visible) - 1
        else:
            self.selected_index = (self.selected_index + delta) % len(visible)
        self._refresh_dishes()

    def action_export_json(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        self.push_screen(JsonModal(self.book.export_json()))

    def action_reset_all(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.book.mode is not SyncMode.LOCAL:
            self._set_status("Reset is only available for the local list")
            return

        def _on_confirm(confirmed: bool | None) -> None:
            if not confirmed:
                return
            self.book.reset()
            self.selected_index = None
            self._set_status("List cleared")

        self.push_screen(ConfirmModal("This will clear the saved list on THIS machine only. Continue?"), _on_confirm)

    def _visible(self) -> list[DishRecord]:
        return self.book.visible(self.filters)

    def _selected_record(self) -> DishRecord | None:
        visible = self._visible()
        if self.selected_index is None or not (0 <= self.selected_index < len(visible)):
            return None
        return visible[self.selected_index]

    def _start_search(self) -> None:
        self.input_state = "search"
        self._refresh_all()

    def _toggle_filter(self, name: str) -> None:
        setattr(self.filters, name, not getattr(self.filters, name))
        self.selected_index = None
        self._refresh_all()

    def _clear_filters(self) -> None:
        self.filters = FilterSpec()
        self.selected_index = None
        self._refresh_all()

    def _open_add_form(self) -> None:
        def _submit(payload: EditPayload) -> None:
            try:
                submission = self.book.add(
                    payload.dish_name,
                    payload.guest_name,
                    payload.is_vegan,
                    payload.is_gluten_free,
                    payload.is_lactose_free,
                )
            except ValueError as exc:
                # Missing GITHUB_REPOSITORY in remote mode.
                self._set_status(f"Cannot sign up: {exc}")
                return
            if submission.issue_url:
                open_issue_form(submission.issue_url)
                self._set_status("Opened GitHub to finish your sign-up")
            elif submission.record:
                self._set_status(f"Added {submission.record.dish_name}")

        self.push_screen(DishFormModal(_submit, title="Add a Dish"), self._on_form_closed)

    def _open_edit_form(self) -> None:
        record = self._selected_record()
        if record is None:
            return
        if self.book.mode is not SyncMode.LOCAL:
            self._set_status("Edit the GitHub issue to change a remote dish")
            return

        def _submit(payload: EditPayload) -> None:
            updated = self.book.edit(record.id, payload)
            self._set_status(f"Updated {updated.dish_name}")

        self.push_screen(DishFormModal(_submit, title="Edit Dish", record=record), self._on_form_closed)

    def _on_form_closed(self, payload: EditPayload | None) -> None:
        # Widgets on the main screen cannot be queried while the form is on top.
        self._refresh_all()

    def _confirm_remove_selected(self) -> None:
        record = self._selected_record()
        if record is None:
            return

        def _on_confirm(confirmed: bool | None) -> None:
            if not confirmed:
                return
            try:
                self.book.remove(record.id)
            except ReadOnlyCollection as exc:
                self._set_status(str(exc))
                return
            self._set_status(f"Removed {record.dish_name}")

        self.push_screen(ConfirmModal(f'Remove "{record.dish_name}"?'), _on_confirm)

    def _start_refresh(self) -> None:
        if self.book.mode is not SyncMode.REMOTE:
            return
        self.run_worker(self._fetch_remote, thread=True, exclusive=True, group="refresh")

    def _fetch_remote(self) -> None:
        incoming = self.book.fetcher(self.book.remote_url)
        self.call_from_thread(self._apply_remote, incoming)

    def _apply_remote(self, incoming: list[DishRecord]) -> None:
        self.book.replace_all(incoming)
        self.system_status = f"{len(incoming)} dishes from GitHub"
        self._refresh_all()

    def _set_status(self, message: str) -> None:
        self.system_status = message
        logger.info(f"status {message}")
        self._refresh_all()

    def _refresh_all(self) -> None:
        self._refresh_dishes()
        self._refresh_filter_bar()

    def _refresh_dishes(self) -> None:
        try:
            dishes_widget = self.query_one("#dishes-list", Static)
        except NoMatches:
            return

        visible = self._visible()
        if not visible:
            self.selected_index = None
            dishes_widget.update("(no dishes match)" if self.filters.is_active() else "(no dishes yet)")
            return
        if self.selected_index is not None and self.selected_index >= len(visible):
            self.selected_index = len(visible) - 1

        lines = Text()
        for idx, record in enumerate(visible):
            if idx > 0:
                lines.append("\n")
            pointer = "➤ " if idx == self.selected_index else "  "
            lines.append(pointer)
            lines.append(f"{idx + 1}. ")
            lines.append_text(format_dish_label(record))
            tags = format_dish_tags(record)
            if tags.plain:
                lines.append("\n      ")
                lines.append_text(tags)

        dishes_widget.update(lines)

    def _refresh_filter_bar(self) -> None:
        try:
            bar = self.query_one("#filter-bar", Static)
            status = self.query_one("#status", Static)
        except NoMatches:
            return
        bar.update(format_filter_bar(self.filters, typing_search=self.input_state == "search"))

        help_lines = "a add  e edit  d remove  j/k move  x clear filters\nCtrl+E export  Ctrl+R reset  Ctrl+Q quit"
        if self.book.mode is SyncMode.REMOTE:
            help_lines = "a sign up via GitHub  r refresh  j/k move  x clear filters\nCtrl+E export  Ctrl+Q quit"
        status.update(format_status(help_lines, self.system_status))
