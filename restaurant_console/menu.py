"""Menu collection with add, single-row inline edit and delete."""

from __future__ import annotations

import logging
from typing import Any

from restaurant_console.errors import InvalidStateError, ItemNotFoundError, StoreError
from restaurant_console.gate import DeleteKind, DeleteTarget, DeletionConfirmationGate
from restaurant_console.models import MenuItem, MenuItemDraft, set_field
from restaurant_console.store import RestaurantStore

logger = logging.getLogger(__name__)


class MenuCollectionController:
    """Owns the local menu; every change lands only after the store accepts it.

    At most one row is in edit at a time (``editing_item_id``). Switching rows
    drops the previous row out of edit without saving it, and ``cancel_edit``
    leaves typed values on the row until the next load or commit.
    """

    def __init__(self, store: RestaurantStore, gate: DeletionConfirmationGate) -> None:
        self.store = store
        self.gate = gate
        self.items: list[MenuItem] = []
        self.editing_item_id: str | None = None
        self.load_error: str | None = None
        self.last_error: str | None = None
        self.busy = False
        gate.register(DeleteKind.MENU_ITEM, self.on_confirm)

    async def load(self) -> bool:
        if not self._acquire("load"):
            return False
        try:
            items = await self.store.list_menu()
        except StoreError as exc:
            logger.error("Error fetching menu: %s", exc)
            self.load_error = "Failed to load menu. Please try again later."
            return False
        finally:
            self.busy = False
        self.items = items
        self.load_error = None
        return True

    async def add_item(self, draft: MenuItemDraft) -> bool:
        if not draft.is_valid():
            return False
        if not self._acquire("add"):
            return False
        try:
            created = await self.store.create_menu_item(draft)
        except StoreError as exc:
            logger.error("Error adding menu item: %s", exc)
            self.last_error = str(exc)
            return False
        finally:
            self.busy = False

        self.items.append(created)
        draft.reset()
        self.last_error = None
        return True

    def begin_edit_item(self, item_id: str) -> None:
        if self.find(item_id) is None:
            raise ItemNotFoundError(item_id)
        if self.editing_item_id not in (None, item_id):
            logger.info("Abandoning unsaved edit of menu item %s", self.editing_item_id)
        self.editing_item_id = item_id

    def update_field(self, item_id: str, field: str, value: Any) -> None:
        if item_id != self.editing_item_id:
            raise InvalidStateError(f"Menu item {item_id} is not being edited")
        item = self.find(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        set_field(item, field, value)

    async def commit_edit(self) -> bool:
        item = self.find(self.editing_item_id) if self.editing_item_id is not None else None
        if item is None:
            raise ItemNotFoundError(self.editing_item_id)
        if not self._acquire("update"):
            return False
        try:
            updated = await self.store.update_menu_item(item)
        except StoreError as exc:
            logger.error("Error updating menu item: %s", exc)
            self.last_error = str(exc)
            return False
        finally:
            self.busy = False

        self.items = [updated if row.id == item.id else row for row in self.items]
        self.editing_item_id = None
        self.last_error = None
        return True

    def cancel_edit(self) -> None:
        self.editing_item_id = None

    def request_delete_item(self, item_id: str) -> None:
        self.gate.open(DeleteTarget.menu_item(item_id))

    async def on_confirm(self, target: DeleteTarget) -> bool:
        return await self.confirm_delete_item(target.item_id)

    async def confirm_delete_item(self, item_id: str) -> bool:
        if not self._acquire("delete"):
            return False
        try:
            await self.store.delete_menu_item(item_id)
        except StoreError as exc:
            logger.error("Error deleting menu item: %s", exc)
            self.last_error = str(exc)
            return False
        finally:
            self.busy = False

        self.items = [row for row in self.items if row.id != item_id]
        if self.editing_item_id == item_id:
            self.editing_item_id = None
        self.last_error = None
        return True

    def find(self, item_id: str | None) -> MenuItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def _acquire(self, operation: str) -> bool:
        if self.busy:
            logger.warning("Menu %s ignored: another request is in flight", operation)
            self.last_error = f"Menu {operation} not sent: another request is still in progress"
            return False
        self.busy = True
        return True
