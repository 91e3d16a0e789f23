import json

import httpx
import pytest

from restaurant_console.errors import StoreError
from restaurant_console.models import ConsoleSession, MenuItem, MenuItemDraft, Restaurant
from restaurant_console.store import RestaurantStore


def _make_store(handler):
    return RestaurantStore(
        ConsoleSession(restaurant_id="r1", token="secret"),
        base_url="http://store.test",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_get_restaurant_sends_owner_id_and_bearer_token():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"_id": "r1", "name": "Spice Garden", "phoneNumber": "555", "rating": "4.5"})

    store = _make_store(handler)
    restaurant = await store.get_restaurant()
    await store.aclose()

    request = seen[0]
    assert request.method == "GET"
    assert request.url.path == "/api/restaurants/"
    assert dict(request.url.params) == {"id": "r1"}
    assert request.headers["Authorization"] == "Bearer secret"
    assert restaurant.id == "r1"
    assert restaurant.phone_number == "555"
    assert restaurant.rating == 4.5


@pytest.mark.asyncio
async def test_update_menu_item_targets_item_and_sends_full_body():
    seen = []

    def handler(request):
        seen.append(request)
        body = json.loads(request.content)
        return httpx.Response(200, json={**body, "name": body["name"].upper()})

    store = _make_store(handler)
    updated = await store.update_menu_item(MenuItem(id="9", name="Tea", description="Hot", price=2, image_link="tea.png"))
    await store.aclose()

    request = seen[0]
    assert request.method == "PUT"
    assert dict(request.url.params) == {"id": "r1", "menu": "true", "menuItemId": "9"}
    assert json.loads(request.content) == {
        "id": "9",
        "name": "Tea",
        "description": "Hot",
        "price": 2,
        "ratings": 0.0,
        "discounts": 0.0,
        "imageLink": "tea.png",
    }
    assert updated.name == "TEA"


@pytest.mark.asyncio
async def test_create_menu_item_posts_draft_without_id():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(201, json={"id": "9", **json.loads(request.content)})

    store = _make_store(handler)
    created = await store.create_menu_item(MenuItemDraft(name="Tea", description="Hot", price=2))
    await store.aclose()

    assert seen[0].method == "POST"
    assert dict(seen[0].url.params) == {"id": "r1", "menu": "true"}
    assert "id" not in json.loads(seen[0].content)
    assert created.id == "9"


@pytest.mark.asyncio
async def test_delete_accepts_empty_body():
    store = _make_store(lambda request: httpx.Response(204))

    assert await store.delete_menu_item("9") is None
    await store.aclose()


@pytest.mark.asyncio
async def test_error_status_raises_store_error():
    store = _make_store(lambda request: httpx.Response(500, json={"error": "boom"}))

    with pytest.raises(StoreError) as excinfo:
        await store.update_restaurant(Restaurant(id="r1", name="X"))
    await store.aclose()

    assert excinfo.value.status_code == 500
    assert excinfo.value.operation == "update restaurant"


@pytest.mark.asyncio
async def test_transport_error_raises_store_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    store = _make_store(handler)

    with pytest.raises(StoreError) as excinfo:
        await store.list_menu()
    await store.aclose()

    assert excinfo.value.status_code is None


@pytest.mark.asyncio
async def test_menu_must_be_a_list():
    store = _make_store(lambda request: httpx.Response(200, json={"name": "not a list"}))

    with pytest.raises(StoreError):
        await store.list_menu()
    await store.aclose()


@pytest.mark.asyncio
async def test_fetch_order_events_passes_since():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=[{"id": "1", "timestamp": 5, "message": "m", "order": {"total": 1}}])

    store = _make_store(handler)
    events = await store.fetch_order_events(since=4)
    await store.aclose()

    assert seen[0].url.path == "/api/orders/notifications/"
    assert dict(seen[0].url.params) == {"id": "r1", "since": "4"}
    assert events[0]["id"] == "1"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"id": "r1", "name": "A", "rating": "n/a"},
        {"id": "r1", "name": "A", "address": ["not", "an", "object"]},
        {"id": "r1", "name": "A", "rating": "inf"},
    ],
)
async def test_malformed_restaurant_raises_store_error(payload):
    store = _make_store(lambda request: httpx.Response(200, json=payload))

    with pytest.raises(StoreError) as excinfo:
        await store.get_restaurant()
    await store.aclose()

    assert excinfo.value.operation == "read restaurant"
    assert "malformed response" in excinfo.value.detail


@pytest.mark.asyncio
@pytest.mark.parametrize("entry", ["Soup", {"id": "1", "name": "Soup", "price": "five"}])
async def test_malformed_menu_entry_raises_store_error(entry):
    store = _make_store(lambda request: httpx.Response(200, json=[{"id": "2", "name": "Naan", "price": 1}, entry]))

    with pytest.raises(StoreError):
        await store.list_menu()
    await store.aclose()


@pytest.mark.asyncio
async def test_unencodable_body_raises_store_error():
    sent = []
    store = _make_store(lambda request: sent.append(request) or httpx.Response(200, json={}))

    with pytest.raises(StoreError) as excinfo:
        await store.update_menu_item(MenuItem(id="9", name="Tea", price=float("nan")))
    await store.aclose()

    assert excinfo.value.operation == "update menu item"
    assert sent == []
