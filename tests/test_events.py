from storefront.commerce.events import CART_UPDATED, FAVORITES_UPDATED, EventBus


def test_emit_reaches_only_named_handlers():
    bus = EventBus()
    cart_seen, fav_seen = [], []
    bus.on(CART_UPDATED, cart_seen.append)
    bus.on(FAVORITES_UPDATED, fav_seen.append)

    assert bus.emit(CART_UPDATED, ["p1"]) == 1
    assert cart_seen == [["p1"]]
    assert fav_seen == []


def test_off_and_failing_handlers():
    bus = EventBus()
    seen = []

    def broken(payload):
        raise RuntimeError("boom")

    off = bus.on(CART_UPDATED, seen.append)
    bus.on(CART_UPDATED, broken)
    assert bus.emit(CART_UPDATED, 1) == 1
    off()
    assert bus.emit(CART_UPDATED, 2) == 0
    assert seen == [1]
    assert bus.emit("unknown") == 0
