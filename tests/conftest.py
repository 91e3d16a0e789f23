from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from restaurant_console.gate import DeletionConfirmationGate
from restaurant_console.models import Address, ConsoleSession, MenuItem, Restaurant
from restaurant_console.store import RestaurantStore


@pytest.fixture
def restaurant() -> Restaurant:
    return Restaurant(
        id="r1",
        name="Spice Garden",
        phone_number="+91 20 5555 0101",
        opening_hours="11:00-23:00",
        gstin="27AAPFU0939F1ZV",
        fssai="11521998000123",
        rating=4.7,
        address=Address(street_address="55 Curry Ave", city="Pune", state="MH", pincode="411001"),
    )


@pytest.fixture
def store(restaurant: Restaurant) -> AsyncMock:
    store = AsyncMock(spec=RestaurantStore)
    store.session = ConsoleSession(restaurant_id="r1", token="secret")
    store.get_restaurant.return_value = restaurant
    store.list_menu.return_value = [MenuItem(id="1", name="Soup", description="Tomato", price=5)]
    store.fetch_order_events.return_value = []
    return store


@pytest.fixture
def gate() -> DeletionConfirmationGate:
    return DeletionConfirmationGate()
