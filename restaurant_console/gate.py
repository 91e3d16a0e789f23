"""Shared delete confirmation for the restaurant and its menu items."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)


class DeleteKind(Enum):
    RESTAURANT = "restaurant"
    MENU_ITEM = "menuItem"


@dataclass(frozen=True)
class DeleteTarget:
    """What the gate deletes on confirm; ``item_id`` is set for menu items only."""

    kind: DeleteKind
    item_id: str | None = None

    @classmethod
    def restaurant(cls) -> DeleteTarget:
        return cls(DeleteKind.RESTAURANT)

    @classmethod
    def menu_item(cls, item_id: str) -> DeleteTarget:
        return cls(DeleteKind.MENU_ITEM, item_id)

    @property
    def label(self) -> str:
        return "restaurant" if self.kind is DeleteKind.RESTAURANT else "menu item"


ConfirmHandler = Callable[[DeleteTarget], Awaitable[Any]]


class DeletionConfirmationGate:
    """Two-state confirm step (closed/open) dispatching to a handler per target kind.

    ``confirm`` schedules the handler and closes at once; the outcome of the
    delete is reported by the controller that owns the handler.
    """

    def __init__(self) -> None:
        self.target: DeleteTarget | None = None
        self._handlers: dict[DeleteKind, ConfirmHandler] = {}
        self._pending: set[asyncio.Task[Any]] = set()

    @property
    def is_open(self) -> bool:
        return self.target is not None

    def register(self, kind: DeleteKind, on_confirm: ConfirmHandler) -> None:
        self._handlers[kind] = on_confirm

    def open(self, target: DeleteTarget) -> None:
        if target.kind is DeleteKind.MENU_ITEM and target.item_id is None:
            raise ValueError("Menu item deletion needs an item id")
        self.target = target

    def confirm(self) -> asyncio.Task[Any] | None:
        target = self.target
        if target is None:
            return None
        self.target = None

        handler = self._handlers.get(target.kind)
        if handler is None:
            logger.error("No delete handler registered for %s", target.kind.value)
            return None

        task = asyncio.get_running_loop().create_task(handler(target))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    def cancel(self) -> None:
        self.target = None

    @property
    def title(self) -> str:
        if self.target is None:
            return ""
        return f"Delete {self.target.label.title()}"

    @property
    def prompt(self) -> str:
        if self.target is None:
            return ""
        return f"Are you sure you want to delete this {self.target.label}? This action cannot be undone."
