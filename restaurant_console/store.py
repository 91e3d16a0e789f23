"""HTTP client for the remote restaurant store."""

from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

import httpx

from restaurant_console.config import API_BASE_URL, REQUEST_TIMEOUT_SECONDS
from restaurant_console.errors import StoreError
from restaurant_console.models import ConsoleSession, MenuItem, MenuItemDraft, Restaurant, WireDict

logger = logging.getLogger(__name__)

RESTAURANTS_PATH = "/api/restaurants/"
ORDER_NOTIFICATIONS_PATH = "/api/orders/notifications/"

T = TypeVar("T")


def _parse(operation: str, convert: Callable[[WireDict], T], data: Any) -> T:
    if not isinstance(data, dict):
        raise StoreError(operation, "expected a JSON object")
    try:
        return convert(data)
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise StoreError(operation, f"malformed response: {exc}") from exc


class RestaurantStore:
    """Reads and writes the session owner's restaurant and menu.

    Every call carries the session's bearer token. Any transport error or
    non-2xx response is raised as :class:`StoreError`.
    """

    def __init__(
        self,
        session: ConsoleSession,
        base_url: str = API_BASE_URL,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.session = session
        self.http_client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Authorization": f"Bearer {session.token}"},
        )

    async def aclose(self) -> None:
        await self.http_client.aclose()

    async def get_restaurant(self) -> Restaurant:
        data = await self._request("read restaurant", "GET", self._params())
        return _parse("read restaurant", Restaurant.from_wire, data)

    async def update_restaurant(self, restaurant: Restaurant) -> Restaurant:
        data = await self._request("update restaurant", "PUT", self._params(), json=restaurant.to_wire())
        return _parse("update restaurant", Restaurant.from_wire, data)

    async def delete_restaurant(self) -> None:
        await self._request("delete restaurant", "DELETE", self._params())

    async def list_menu(self) -> list[MenuItem]:
        data = await self._request("read menu", "GET", self._params(menu=True))
        if not isinstance(data, list):
            raise StoreError("read menu", "expected a list of menu items")
        return [_parse("read menu", MenuItem.from_wire, item) for item in data]

    async def create_menu_item(self, draft: MenuItemDraft) -> MenuItem:
        data = await self._request("create menu item", "POST", self._params(menu=True), json=draft.to_wire())
        return _parse("create menu item", MenuItem.from_wire, data)

    async def update_menu_item(self, item: MenuItem) -> MenuItem:
        params = self._params(menu=True, item_id=item.id)
        data = await self._request("update menu item", "PUT", params, json=item.to_wire())
        return _parse("update menu item", MenuItem.from_wire, data)

    async def delete_menu_item(self, item_id: str) -> None:
        await self._request("delete menu item", "DELETE", self._params(menu=True, item_id=item_id))

    async def fetch_order_events(self, since: Any = None) -> list[WireDict]:
        """Return order events newer than ``since`` (all pending events when None)."""
        params = self._params()
        if since is not None:
            params["since"] = str(since)
        data = await self._request("poll orders", "GET", params, path=ORDER_NOTIFICATIONS_PATH)
        if not isinstance(data, list):
            raise StoreError("poll orders", "expected a list of order events")
        return data

    def _params(self, menu: bool = False, item_id: str | None = None) -> dict[str, str]:
        params = {"id": self.session.restaurant_id}
        if menu:
            params["menu"] = "true"
        if item_id is not None:
            params["menuItemId"] = item_id
        return params

    async def _request(
        self,
        operation: str,
        method: str,
        params: dict[str, str],
        json: Any = None,
        path: str = RESTAURANTS_PATH,
    ) -> Any:
        logger.debug("%s %s %s params=%s", operation, method, path, params)
        try:
            response = await self.http_client.request(method, path, params=params, json=json)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise StoreError(operation, f"HTTP {exc.response.status_code}", exc.response.status_code) from exc
        except httpx.HTTPError as exc:
            raise StoreError(operation, str(exc) or type(exc).__name__) from exc
        except ValueError as exc:
            # Raised while encoding a body httpx cannot serialise, such as NaN.
            raise StoreError(operation, f"request body is not valid JSON: {exc}") from exc

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise StoreError(operation, "response body is not JSON", response.status_code) from exc
