import json

import pytest

from storefront.commerce.cart import CART_KEY, CartEntry, CartStore
from storefront.commerce.collection_store import SOURCE_LOCAL, SOURCE_STORAGE
from storefront.commerce.events import CART_UPDATED, EventBus
from storefront.database.storage import LocalStorage, StorageError


def test_add_twice_merges_quantity(view):
    cart = CartStore(view)
    cart.add("p1")
    cart.add("p1", 2)
    entries = cart.get()
    assert len(entries) == 1
    assert entries[0].id == "p1"
    assert entries[0].quantity == 3
    assert cart.item_count() == 3


def test_wire_format_is_stable(view):
    cart = CartStore(view)
    cart.add("p1", 2)
    stored = json.loads(view.get_item(CART_KEY))
    assert set(stored[0]) == {"id", "quantity", "addedAt"}
    assert stored[0]["quantity"] == 2
    assert isinstance(stored[0]["addedAt"], int)


def test_set_quantity_zero_removes(view):
    cart = CartStore(view)
    cart.add("p1")
    cart.add("p2")
    cart.set_quantity("p1", 0)
    assert [e.id for e in cart.get()] == ["p2"]
    cart.set_quantity("p2", 5)
    assert cart.get_item("p2").quantity == 5


def test_set_quantity_does_not_insert_unknown_ids(view):
    cart = CartStore(view)
    cart.set_quantity("ghost", 3)
    assert cart.get() == []


def test_add_rejects_non_positive_quantity(view):
    cart = CartStore(view)
    with pytest.raises(ValueError):
        cart.add("p1", 0)


def test_remove_and_clear(view):
    cart = CartStore(view)
    cart.add("p1")
    cart.add("p2")
    cart.remove("p1")
    assert not cart.is_in_cart("p1")
    assert cart.is_in_cart("p2")
    cart.clear()
    assert cart.get() == []


@pytest.mark.parametrize("payload", ["{not json", '{"id": "p1"}', "42", "null"])
def test_corrupt_payload_reads_as_empty(view, payload):
    view.set_item(CART_KEY, payload)
    assert CartStore(view).get() == []


def test_malformed_entries_are_skipped_and_duplicates_collapse(view):
    view.set_item(
        CART_KEY,
        json.dumps(
            [
                {"id": "p1", "quantity": 2, "addedAt": 1},
                {"id": "p2", "quantity": 0},
                {"quantity": 1},
                "p3",
                {"id": "p1", "quantity": 9, "addedAt": 2},
            ]
        ),
    )
    entries = CartStore(view).get()
    assert entries == [CartEntry(id="p1", quantity=2, added_at=1)]


def test_total_with_missing_price_counts_zero(view):
    cart = CartStore(view)
    cart.add("p1", 2)
    cart.add("p2", 1)
    assert cart.total({"p1": 100}) == 200.0
    assert cart.total([{"_id": "p1", "price": 100}, {"id": "p2", "price": 5.5}]) == 205.5


def test_other_view_is_notified_and_reads_new_state():
    storage = LocalStorage()
    cart_a = CartStore(storage.view("a"))
    cart_b = CartStore(storage.view("b"))
    changes_a, changes_b = [], []
    cart_a.subscribe(changes_a.append)
    cart_b.subscribe(changes_b.append)

    cart_a.add("p1")

    assert [c.source for c in changes_a] == [SOURCE_LOCAL]
    assert [c.source for c in changes_b] == [SOURCE_STORAGE]
    assert cart_b.get()[0].id == "p1"
    assert cart_b.version == 1


def test_same_view_event_bus_and_unsubscribe(view):
    events = EventBus()
    emitted = []
    events.on(CART_UPDATED, emitted.append)
    cart = CartStore(view, events)
    changes = []
    unsubscribe = cart.subscribe(changes.append)

    cart.add("p1")
    unsubscribe()
    cart.add("p2")

    assert len(changes) == 1
    assert len(emitted) == 2
    assert [e.id for e in emitted[-1]] == ["p1", "p2"]
    assert cart.version == 2


def test_failed_write_keeps_previous_state(view, monkeypatch):
    cart = CartStore(view)
    cart.add("p1")

    def failing_set(key, value):
        raise StorageError("quota exceeded")

    monkeypatch.setattr(view, "set_item", failing_set)
    result = cart.add("p2")
    assert [e.id for e in result] == ["p1"]
    assert cart.version == 1
