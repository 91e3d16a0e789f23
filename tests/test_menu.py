import asyncio

import pytest
import pytest_asyncio

from restaurant_console.errors import InvalidStateError, ItemNotFoundError, StoreError
from restaurant_console.menu import MenuCollectionController
from restaurant_console.models import MenuItem, MenuItemDraft


@pytest_asyncio.fixture
async def menu(store, gate):
    controller = MenuCollectionController(store, gate)
    await controller.load()
    return controller


def _ids(controller):
    return [item.id for item in controller.items]


@pytest.mark.asyncio
async def test_load_replaces_collection(menu, store):
    store.list_menu.return_value = [MenuItem(id="2", name="Naan", price=1.5)]

    await menu.load()

    assert _ids(menu) == ["2"]


@pytest.mark.asyncio
async def test_load_failure_sets_error_and_keeps_items(menu, store):
    store.list_menu.side_effect = StoreError("read menu", "HTTP 502", 502)

    assert await menu.load() is False

    assert menu.load_error == "Failed to load menu. Please try again later."
    assert _ids(menu) == ["1"]


@pytest.mark.asyncio
async def test_commit_without_begin_edit_is_not_found(menu, store):
    with pytest.raises(ItemNotFoundError):
        await menu.commit_edit()

    store.update_menu_item.assert_not_awaited()
    assert menu.items == [MenuItem(id="1", name="Soup", description="Tomato", price=5)]


@pytest.mark.asyncio
async def test_add_item_appends_server_copy(menu, store):
    store.create_menu_item.return_value = MenuItem(id="9", name="Tea", description="Hot", price=2)
    draft = MenuItemDraft(name="Tea", description="Hot", price=2)

    assert await menu.add_item(draft) is True

    assert _ids(menu) == ["1", "9"]
    assert [item.id for item in menu.items if item.id == "9"] == ["9"]
    assert draft == MenuItemDraft()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "draft",
    [
        MenuItemDraft(name="", description="Hot", price=2),
        MenuItemDraft(name="Tea", description="", price=2),
        MenuItemDraft(name="Tea", description="Hot", price=0),
        MenuItemDraft(name="Tea", description="Hot", price=-1),
    ],
)
async def test_add_item_is_inert_for_invalid_draft(menu, store, draft):
    assert await menu.add_item(draft) is False

    store.create_menu_item.assert_not_awaited()
    assert _ids(menu) == ["1"]


@pytest.mark.asyncio
async def test_failed_add_keeps_collection_and_draft(menu, store):
    store.create_menu_item.side_effect = StoreError("create menu item", "HTTP 500", 500)
    draft = MenuItemDraft(name="Tea", description="Hot", price=2)

    assert await menu.add_item(draft) is False

    assert _ids(menu) == ["1"]
    assert draft.name == "Tea"
    assert menu.last_error is not None


@pytest.mark.asyncio
async def test_only_one_row_is_edited_at_a_time(menu, store):
    store.list_menu.return_value = [MenuItem(id="1", name="Soup", price=5), MenuItem(id="2", name="Naan", price=1.5)]
    await menu.load()

    menu.begin_edit_item("1")
    menu.update_field("1", "name", "Lentil Soup")
    menu.begin_edit_item("2")

    assert menu.editing_item_id == "2"
    with pytest.raises(InvalidStateError):
        menu.update_field("1", "price", "6")
    # The abandoned row keeps what was typed; it is not saved.
    assert menu.find("1").name == "Lentil Soup"
    store.update_menu_item.assert_not_awaited()


@pytest.mark.asyncio
async def test_commit_edit_replaces_item_with_server_copy(menu, store):
    store.update_menu_item.return_value = MenuItem(id="1", name="Soup of the day", description="Tomato", price=6)
    menu.begin_edit_item("1")
    menu.update_field("1", "name", "Soup of the day")
    menu.update_field("1", "price", "6")

    assert await menu.commit_edit() is True

    sent = store.update_menu_item.await_args.args[0]
    assert (sent.id, sent.name, sent.price) == ("1", "Soup of the day", 6.0)
    assert menu.items == [MenuItem(id="1", name="Soup of the day", description="Tomato", price=6)]
    assert menu.editing_item_id is None


@pytest.mark.asyncio
async def test_failed_commit_edit_stays_in_edit(menu, store):
    store.update_menu_item.side_effect = StoreError("update menu item", "HTTP 500", 500)
    menu.begin_edit_item("1")
    menu.update_field("1", "description", "Spicy tomato")

    assert await menu.commit_edit() is False

    assert menu.editing_item_id == "1"
    assert menu.find("1").description == "Spicy tomato"


@pytest.mark.asyncio
async def test_cancel_edit_keeps_typed_values(menu):
    menu.begin_edit_item("1")
    menu.update_field("1", "name", "Typo Soup")

    menu.cancel_edit()

    assert menu.editing_item_id is None
    assert menu.find("1").name == "Typo Soup"


@pytest.mark.asyncio
async def test_confirmed_delete_removes_item(menu, store, gate):
    menu.request_delete_item("1")
    assert gate.target.item_id == "1"

    assert await gate.confirm() is True

    store.delete_menu_item.assert_awaited_once_with("1")
    assert menu.items == []


@pytest.mark.asyncio
async def test_failed_delete_keeps_item(menu, store):
    store.delete_menu_item.side_effect = StoreError("delete menu item", "HTTP 500", 500)

    assert await menu.confirm_delete_item("1") is False

    assert _ids(menu) == ["1"]


@pytest.mark.asyncio
async def test_cancelled_delete_makes_no_call(menu, store, gate):
    menu.request_delete_item("1")
    gate.cancel()

    store.delete_menu_item.assert_not_awaited()
    assert _ids(menu) == ["1"]


@pytest.fixture
def held_store(store):
    """Store whose calls wait on ``store.release`` before answering."""
    store.release = asyncio.Event()

    async def create(draft):
        await store.release.wait()
        return MenuItem(id="9", name=draft.name, price=draft.price)

    async def update(item):
        await store.release.wait()
        return item

    async def delete(item_id):
        await store.release.wait()

    store.create_menu_item.side_effect = create
    store.update_menu_item.side_effect = update
    store.delete_menu_item.side_effect = delete
    return store


@pytest.mark.asyncio
async def test_second_add_while_in_flight_is_refused(menu, held_store):
    first = asyncio.create_task(menu.add_item(MenuItemDraft(name="Tea", description="Hot", price=2)))
    await asyncio.sleep(0)

    assert menu.busy is True
    assert await menu.add_item(MenuItemDraft(name="Coffee", description="Black", price=3)) is False
    assert "still in progress" in menu.last_error

    held_store.release.set()
    assert await first is True
    assert held_store.create_menu_item.await_count == 1
    assert _ids(menu) == ["1", "9"]
    assert menu.busy is False


@pytest.mark.asyncio
async def test_second_commit_while_in_flight_is_refused(menu, held_store):
    menu.begin_edit_item("1")
    first = asyncio.create_task(menu.commit_edit())
    await asyncio.sleep(0)

    assert await menu.commit_edit() is False

    held_store.release.set()
    assert await first is True
    assert held_store.update_menu_item.await_count == 1
    assert menu.editing_item_id is None


@pytest.mark.asyncio
async def test_delete_refused_while_add_in_flight(menu, held_store):
    adding = asyncio.create_task(menu.add_item(MenuItemDraft(name="Tea", description="Hot", price=2)))
    await asyncio.sleep(0)

    assert await menu.confirm_delete_item("1") is False

    held_store.release.set()
    await adding
    held_store.delete_menu_item.assert_not_awaited()
    assert _ids(menu) == ["1", "9"]


@pytest.mark.asyncio
async def test_gate_confirm_into_busy_menu_reports_error(menu, held_store, gate):
    adding = asyncio.create_task(menu.add_item(MenuItemDraft(name="Tea", description="Hot", price=2)))
    await asyncio.sleep(0)

    menu.request_delete_item("1")
    assert await gate.confirm() is False

    assert not gate.is_open
    assert "Menu delete not sent" in menu.last_error
    held_store.delete_menu_item.assert_not_awaited()
    held_store.release.set()
    await adding


@pytest.mark.asyncio
async def test_infinite_price_is_inert(menu, store):
    assert await menu.add_item(MenuItemDraft(name="Tea", description="Hot", price=float("inf"))) is False

    store.create_menu_item.assert_not_awaited()
    assert _ids(menu) == ["1"]


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["inf", "-inf", "nan"])
async def test_non_finite_field_input_is_rejected(menu, text):
    menu.begin_edit_item("1")

    with pytest.raises(ValueError):
        menu.update_field("1", "price", text)

    assert menu.find("1").price == 5
