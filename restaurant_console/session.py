"""View/edit session over the loaded restaurant record."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable

from restaurant_console.errors import InvalidStateError, StoreError
from restaurant_console.gate import DeleteKind, DeleteTarget, DeletionConfirmationGate
from restaurant_console.models import Restaurant, set_field, snapshot
from restaurant_console.store import RestaurantStore

logger = logging.getLogger(__name__)


class EditMode(Enum):
    VIEWING = "viewing"
    EDITING = "editing"


class EditSessionController:
    """Owns the loaded restaurant and its working copy while editing.

    Field edits only touch ``working_copy``; ``restaurant`` changes only when
    the store acknowledges a commit.
    """

    def __init__(
        self,
        store: RestaurantStore,
        gate: DeletionConfirmationGate,
        on_deleted: Callable[[], None] | None = None,
    ) -> None:
        self.store = store
        self.gate = gate
        self.on_deleted = on_deleted
        self.mode = EditMode.VIEWING
        self.restaurant: Restaurant | None = None
        self.working_copy: Restaurant | None = None
        self.load_error: str | None = None
        self.last_error: str | None = None
        self.deleted = False
        self.busy = False
        gate.register(DeleteKind.RESTAURANT, self.on_confirm)

    async def load(self) -> bool:
        if not self._acquire("load"):
            return False
        try:
            self.restaurant = await self.store.get_restaurant()
        except StoreError as exc:
            logger.error("Error fetching restaurant details: %s", exc)
            self.load_error = "Failed to load restaurant details. Please try again later."
            return False
        finally:
            self.busy = False
        self.load_error = None
        return True

    def enter_edit(self) -> None:
        if self.mode is EditMode.EDITING:
            raise InvalidStateError("Already editing")
        if self.restaurant is None:
            raise InvalidStateError("No restaurant loaded")
        self.working_copy = snapshot(self.restaurant)
        self.mode = EditMode.EDITING

    def update_field(self, field: str, value: Any) -> None:
        self._require_editing("update_field")
        set_field(self.working_copy, field, value)

    async def commit(self) -> bool:
        self._require_editing("commit")
        if not self._acquire("commit"):
            return False
        try:
            updated = await self.store.update_restaurant(self.working_copy)
        except StoreError as exc:
            logger.error("Error updating restaurant: %s", exc)
            self.last_error = str(exc)
            return False
        finally:
            self.busy = False

        self.restaurant = updated
        self.working_copy = None
        self.mode = EditMode.VIEWING
        self.last_error = None
        return True

    def cancel(self) -> None:
        self._require_editing("cancel")
        self.working_copy = None
        self.mode = EditMode.VIEWING

    def request_delete(self) -> None:
        self.gate.open(DeleteTarget.restaurant())

    async def on_confirm(self, target: DeleteTarget) -> bool:
        return await self.confirm_delete()

    async def confirm_delete(self) -> bool:
        if not self._acquire("delete"):
            return False
        try:
            await self.store.delete_restaurant()
        except StoreError as exc:
            logger.error("Error deleting restaurant: %s", exc)
            self.last_error = str(exc)
            return False
        finally:
            self.busy = False

        self.deleted = True
        self.last_error = None
        if self.on_deleted is not None:
            self.on_deleted()
        return True

    @property
    def current(self) -> Restaurant | None:
        """The record the host should display for the current mode."""
        if self.mode is EditMode.EDITING:
            return self.working_copy
        return self.restaurant

    def _require_editing(self, operation: str) -> None:
        if self.mode is not EditMode.EDITING or self.working_copy is None:
            raise InvalidStateError(f"{operation} is only valid while editing")

    def _acquire(self, operation: str) -> bool:
        if self.busy:
            logger.warning("Restaurant %s ignored: another request is in flight", operation)
            self.last_error = f"Restaurant {operation} not sent: another request is still in progress"
            return False
        self.busy = True
        return True
