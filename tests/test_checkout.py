import pytest

from storefront.commerce.cart import CART_KEY, CartStore
from storefront.commerce.checkout import build_cart_lines, build_checkout_summary, place_order, validate_checkout_form
from storefront.commerce.shipping import ShippingTable
from storefront.commerce.validation import CheckoutValidationError, normalize_phone


@pytest.fixture
def shipping_table():
    return ShippingTable.from_costs({"Dubai": 10, "Kalba": 60})


@pytest.fixture
def form():
    return {
        "first_name": "Layla",
        "last_name": "Haddad",
        "phone": "+971 50-123-4567",
        "email": "layla@example.com",
        "destination": "dubai",
        "address": "Villa 12, Jumeirah",
        "payment_method": "cash_on_delivery",
        "terms_accepted": "true",
    }


def test_cart_lines_sorted_newest_first_and_missing_products_dropped(catalog, view):
    view.set_item(
        CART_KEY,
        '[{"id": "p1", "quantity": 1, "addedAt": 10},'
        ' {"id": "gone", "quantity": 1, "addedAt": 30},'
        ' {"id": "p2", "quantity": 2, "addedAt": 20}]',
    )
    lines = build_cart_lines(CartStore(view).get(), catalog, "ar")
    assert [line.product.id for line in lines] == ["p2", "p1"]
    assert lines[1].product.name == "سرير"
    assert lines[0].line_total == 100.0


def test_checkout_summary_totals(catalog, view, shipping_table):
    cart = CartStore(view)
    cart.add("p1", 2)
    cart.add("gone", 1)
    summary = build_checkout_summary(cart, catalog, "en", 0.05, shipping_table, "Kalba")
    assert summary.item_count == 3
    assert len(summary.lines) == 1
    assert summary.totals.subtotal == 200.0
    assert summary.totals.vat == 10.0
    assert summary.totals.shipping == 60.0
    assert summary.totals.total == 270.0


def test_validate_checkout_form_reports_every_field(shipping_table):
    with pytest.raises(CheckoutValidationError) as excinfo:
        validate_checkout_form({"email": "nope", "phone": "12ab", "destination": "Muscat"}, shipping_table.destinations())
    errors = excinfo.value.field_errors
    assert set(errors) == {
        "first_name",
        "last_name",
        "phone",
        "email",
        "destination",
        "address",
        "terms_accepted",
    }


def test_validate_checkout_form_defaults_payment_method(form, shipping_table):
    form.pop("payment_method")
    customer = validate_checkout_form(form, shipping_table.destinations())
    assert customer["payment_method"] == "bank_transfer"
    assert customer["order_notes"] == ""


def test_invalid_payment_method(form, shipping_table):
    form["payment_method"] = "crypto"
    with pytest.raises(CheckoutValidationError) as excinfo:
        validate_checkout_form(form, shipping_table.destinations())
    assert "payment_method" in excinfo.value.field_errors


def test_place_order_clears_cart(catalog, view, form, shipping_table):
    cart = CartStore(view)
    cart.add("p1", 1)
    order = place_order(form, cart, catalog, "en", 0.05, shipping_table)
    assert order.payment_method == "cash_on_delivery"
    assert "payment_method" not in order.customer
    assert order.summary.totals.total == 115.0
    assert order.to_dict()["summary"]["lines"][0]["product"]["id"] == "p1"
    assert cart.get() == []


def test_place_order_with_empty_cart(catalog, view, form, shipping_table):
    with pytest.raises(CheckoutValidationError) as excinfo:
        place_order(form, CartStore(view), catalog, "en", 0.05, shipping_table)
    assert "cart" in excinfo.value.field_errors


def test_normalize_phone():
    assert normalize_phone("+971 (50) 123-4567") == "971501234567"
