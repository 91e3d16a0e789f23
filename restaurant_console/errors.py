"""Exceptions raised by the store client and controllers."""

from __future__ import annotations


class ConsoleError(Exception):
    """Base class for restaurant console failures."""


class StoreError(ConsoleError):
    """A remote store call was rejected or could not be completed."""

    def __init__(self, operation: str, detail: str, status_code: int | None = None) -> None:
        super().__init__(f"{operation} failed: {detail}")
        self.operation = operation
        self.detail = detail
        self.status_code = status_code


class ItemNotFoundError(ConsoleError):
    """The menu item under edit is not in the local collection."""

    def __init__(self, item_id: str | None) -> None:
        super().__init__(f"Menu item not found: {item_id}")
        self.item_id = item_id


class InvalidStateError(ConsoleError):
    """An operation was invoked in a mode that does not allow it."""
