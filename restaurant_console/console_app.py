"""Main Textual app class."""

from __future__ import annotations

import logging
from typing import AsyncIterable

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Header, Static

from restaurant_console.confirm_modal import DeleteConfirmModal
from restaurant_console.errors import ConsoleError
from restaurant_console.events import poll_order_events
from restaurant_console.field_modal import FieldEditModal
from restaurant_console.gate import DeletionConfirmationGate
from restaurant_console.menu import MenuCollectionController
from restaurant_console.models import MenuItemDraft, WireDict
from restaurant_console.notifications import NotificationIntake
from restaurant_console.rendering import (
    MENU_FIELDS,
    RESTAURANT_FIELDS,
    field_value,
    format_menu_row,
    format_notifications,
    format_restaurant,
)
from restaurant_console.session import EditMode, EditSessionController
from restaurant_console.store import RestaurantStore

logger = logging.getLogger(__name__)

PANES = ("restaurant", "menu", "orders")
DRAFT_PROMPTS = [
    ("name", "Item name"),
    ("description", "Description"),
    ("price", "Price"),
    ("ratings", "Ratings (optional)"),
    ("discounts", "Discounts (optional)"),
    ("image_link", "Image link (optional)"),
]


class RestaurantConsoleApp(App):
    """A Textual console for one restaurant, its menu and incoming orders."""

    TITLE = "Restaurant Console"
    SUB_TITLE = "Restaurant / Menu / Orders"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    #restaurant-pane {
        width: 2fr;
        border: round $primary;
        padding: 1;
    }

    #menu-pane {
        width: 3fr;
        border: round $secondary;
        padding: 1;
    }

    #orders-pane {
        width: 2fr;
        border: round #ffd866;
        padding: 1;
    }

    #menu-list {
        height: 1fr;
    }

    #status-bar {
        height: 3;
        border: heavy $secondary;
        padding: 0 1;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    active_pane = reactive("restaurant")
    field_cursor = reactive(0)
    menu_cursor = reactive(0)
    order_cursor = reactive(0)

    BINDINGS = [
        Binding("ctrl+s", "save", "Save edit", priority=True),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        store: RestaurantStore,
        order_source: AsyncIterable[WireDict] | None = None,
    ) -> None:
        super().__init__()
        self.store = store
        self.gate = DeletionConfirmationGate()
        self.session = EditSessionController(store, self.gate, on_deleted=self._on_restaurant_deleted)
        self.menu = MenuCollectionController(store, self.gate)
        self.intake = NotificationIntake(on_change=self._refresh_orders)
        self.order_source = order_source if order_source is not None else poll_order_events(store)
        self.draft = MenuItemDraft()
        self.system_status = ""

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="restaurant-pane"):
                yield Static("Restaurant", classes="pane-title")
                yield Static("Loading...", id="restaurant-detail")
            with Vertical(id="menu-pane"):
                yield Static("Menu", classes="pane-title")
                yield Static("Loading...", id="menu-list")
            with Vertical(id="orders-pane"):
                yield Static(id="orders-list")
        yield Static(id="status-bar")

    def on_mount(self) -> None:
        self._refresh_all()
        self.run_worker(self.intake.run(self.order_source), name="order-intake", exit_on_error=False)
        self.run_worker(self._load_all(), name="initial-load")

    async def _load_all(self) -> None:
        await self.session.load()
        await self.menu.load()
        self._refresh_all()

    async def on_unmount(self) -> None:
        await self.store.aclose()

    def on_key(self, event: Key) -> None:
        if isinstance(self.screen, ModalScreen):
            return

        logger.debug("on_key key=%r pane=%r mode=%s", event.key, self.active_pane, self.session.mode.value)
        key = event.key
        if key in {"1", "2", "3"}:
            self.active_pane = PANES[int(key) - 1]
            self.field_cursor = 0
            self._refresh_all()
            event.stop()
            return

        if key == "tab":
            self.active_pane = PANES[(PANES.index(self.active_pane) + 1) % len(PANES)]
            self.field_cursor = 0
            self._refresh_all()
            event.stop()
            return

        handler = {
            "restaurant": self._on_restaurant_key,
            "menu": self._on_menu_key,
            "orders": self._on_orders_key,
        }[self.active_pane]
        if handler(key):
            event.stop()

    def action_save(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.active_pane == "restaurant" and self.session.mode is EditMode.EDITING:
            self.run_worker(self._commit_restaurant())
        elif self.active_pane == "menu" and self.menu.editing_item_id is not None:
            self.run_worker(self._commit_menu_item())

    def _on_restaurant_key(self, key: str) -> bool:
        if self.session.load_error or self.session.restaurant is None or self.session.deleted:
            return False

        editing = self.session.mode is EditMode.EDITING
        if key in {"j", "down"} and editing:
            self.field_cursor = (self.field_cursor + 1) % len(RESTAURANT_FIELDS)
        elif key in {"k", "up"} and editing:
            self.field_cursor = (self.field_cursor - 1) % len(RESTAURANT_FIELDS)
        elif key == "e" and not editing:
            self.session.enter_edit()
            self.field_cursor = 0
        elif key == "enter" and editing:
            path, label = RESTAURANT_FIELDS[self.field_cursor]
            modal = FieldEditModal(label, path, field_value(self.session.working_copy, path))
            self.push_screen(modal, lambda value: self._set_restaurant_field(path, value))
        elif key in {"escape", "ctrl+c"} and editing:
            self.session.cancel()
            self.system_status = "Edit cancelled"
        elif key == "d":
            self.session.request_delete()
            self.push_screen(DeleteConfirmModal(self.gate), self._on_delete_answer)
        else:
            return False
        self._refresh_all()
        return True

    def _on_menu_key(self, key: str) -> bool:
        if self.menu.load_error:
            return False

        editing_id = self.menu.editing_item_id
        if key in {"j", "down"}:
            if editing_id is not None:
                self.field_cursor = (self.field_cursor + 1) % len(MENU_FIELDS)
            elif self.menu.items:
                self.menu_cursor = (self.menu_cursor + 1) % len(self.menu.items)
        elif key in {"k", "up"}:
            if editing_id is not None:
                self.field_cursor = (self.field_cursor - 1) % len(MENU_FIELDS)
            elif self.menu.items:
                self.menu_cursor = (self.menu_cursor - 1) % len(self.menu.items)
        elif key == "a" and editing_id is None:
            self._prompt_draft_field(0)
        elif key == "e":
            item = self._selected_menu_item()
            if item is None or item.id is None:
                return False
            self.menu.begin_edit_item(item.id)
            self.field_cursor = 0
        elif key == "enter" and editing_id is not None:
            path, label = MENU_FIELDS[self.field_cursor]
            item = self.menu.find(editing_id)
            modal = FieldEditModal(label, path, field_value(item, path))
            self.push_screen(modal, lambda value: self._set_menu_field(editing_id, path, value))
        elif key in {"escape", "ctrl+c"} and editing_id is not None:
            self.menu.cancel_edit()
            self.system_status = "Item edit closed (unsaved values stay until reload)"
        elif key == "d":
            item = self._selected_menu_item()
            if item is None or item.id is None:
                return False
            self.menu.request_delete_item(item.id)
            self.push_screen(DeleteConfirmModal(self.gate), self._on_delete_answer)
        elif key == "r":
            self.run_worker(self._reload_menu())
        else:
            return False
        self._refresh_all()
        return True

    def _on_orders_key(self, key: str) -> bool:
        notifications = self.intake.notifications
        if not notifications:
            return False

        if key in {"j", "down"}:
            self.order_cursor = (self.order_cursor + 1) % len(notifications)
        elif key in {"k", "up"}:
            self.order_cursor = (self.order_cursor - 1) % len(notifications)
        elif key in {"x", "d"}:
            selected = notifications[min(self.order_cursor, len(notifications) - 1)]
            self.intake.dismiss(selected.id)
        else:
            return False
        self._refresh_orders()
        return True

    def _set_restaurant_field(self, path: str, value: str | None) -> None:
        if value is None or self.session.mode is not EditMode.EDITING:
            return
        self.session.update_field(path, value)
        self._refresh_restaurant()

    def _set_menu_field(self, item_id: str, path: str, value: str | None) -> None:
        if value is None or self.menu.editing_item_id != item_id:
            return
        self.menu.update_field(item_id, path, value)
        self._refresh_menu()

    def _prompt_draft_field(self, index: int) -> None:
        if index >= len(DRAFT_PROMPTS):
            self.run_worker(self._add_draft())
            return

        field, label = DRAFT_PROMPTS[index]

        def _store_value(value: str | None) -> None:
            if value is None:
                self.system_status = "Add item cancelled"
                self._refresh_status()
                return
            self.draft.set_from_text(field, value)
            self._prompt_draft_field(index + 1)

        self.push_screen(FieldEditModal(label, field, getattr(self.draft, field) or None), _store_value)

    def _on_delete_answer(self, confirmed: bool | None) -> None:
        if not confirmed:
            self.gate.cancel()
            self.system_status = "Delete cancelled"
            self._refresh_status()
            return

        task = self.gate.confirm()
        if task is not None:
            task.add_done_callback(lambda _: self._after_remote_call())

    async def _commit_restaurant(self) -> None:
        if await self.session.commit():
            self.system_status = "Restaurant saved"
        self._after_remote_call()

    async def _commit_menu_item(self) -> None:
        try:
            saved = await self.menu.commit_edit()
        except ConsoleError as exc:
            self.system_status = str(exc)
            saved = False
        if saved:
            self.system_status = "Menu item saved"
        self._after_remote_call()

    async def _add_draft(self) -> None:
        if not self.draft.is_valid():
            self.system_status = "Name, description and a positive price are required"
            self._refresh_status()
            return
        if await self.menu.add_item(self.draft):
            self.system_status = "Menu item added"
        self._after_remote_call()

    async def _reload_menu(self) -> None:
        await self.menu.load()
        self._refresh_all()

    def _after_remote_call(self) -> None:
        for error in (self.session.last_error, self.menu.last_error):
            if error:
                self.notify(error, title="Request failed", severity="error")
        self.session.last_error = None
        self.menu.last_error = None
        self._refresh_all()

    def _on_restaurant_deleted(self) -> None:
        logger.info("Restaurant %s deleted, leaving console", self.store.session.restaurant_id)
        self.exit("Restaurant deleted.")

    def _selected_menu_item(self):
        if not self.menu.items:
            return None
        self.menu_cursor = min(self.menu_cursor, len(self.menu.items) - 1)
        return self.menu.items[self.menu_cursor]

    def _refresh_all(self) -> None:
        self._refresh_restaurant()
        self._refresh_menu()
        self._refresh_orders()
        self._refresh_status()

    def _refresh_restaurant(self) -> None:
        try:
            widget = self.query_one("#restaurant-detail", Static)
        except NoMatches:
            return
        if self.session.load_error:
            widget.update(Text(self.session.load_error, style="bold #ffb3b3"))
            return
        restaurant = self.session.current
        if restaurant is None:
            widget.update("Loading...")
            return
        editing = self.session.mode is EditMode.EDITING
        widget.update(format_restaurant(restaurant, editing, self.field_cursor if editing else None))

    def _refresh_menu(self) -> None:
        try:
            widget = self.query_one("#menu-list", Static)
        except NoMatches:
            return
        if self.menu.load_error:
            widget.update(Text(self.menu.load_error, style="bold #ffb3b3"))
            return
        if not self.menu.items:
            widget.update("(no menu items yet)")
            return

        self.menu_cursor = min(self.menu_cursor, len(self.menu.items) - 1)
        lines = Text()
        for idx, item in enumerate(self.menu.items):
            if idx > 0:
                lines.append("\n")
            pointer = "➤ " if idx == self.menu_cursor and self.active_pane == "menu" else "  "
            editing = item.id is not None and item.id == self.menu.editing_item_id
            lines.append(pointer)
            lines.append_text(format_menu_row(item, editing, self.field_cursor if editing else None))
        widget.update(lines)

    def _refresh_orders(self) -> None:
        try:
            pane = self.query_one("#orders-pane", Vertical)
            widget = self.query_one("#orders-list", Static)
        except NoMatches:
            return
        notifications = self.intake.notifications
        if notifications:
            self.order_cursor = min(self.order_cursor, len(notifications) - 1)
        cursor = self.order_cursor if self.active_pane == "orders" else None
        content = format_notifications(notifications, cursor)
        if content is None:
            pane.display = False
            return
        pane.display = True
        widget.update(content)

    def _refresh_status(self) -> None:
        try:
            bar = self.query_one("#status-bar", Static)
        except NoMatches:
            return
        hints = {
            "restaurant": "e edit, Enter change field, Ctrl+S save, Esc cancel, d delete",
            "menu": "a add, e edit row, Enter change field, Ctrl+S save, Esc close, d delete, r reload",
            "orders": "j/k move, x dismiss",
        }[self.active_pane]
        status = self.system_status or "Ready"
        bar.update(Text(f"[{self.active_pane}] 1/2/3 or Tab switch pane. {hints}. Ctrl+Q quit.\n{status}"))
