from decimal import Decimal

import pytest

from storefront.commerce.totals import compute_totals, round2, subtotal


def test_totals_with_vat():
    totals = compute_totals([{"id": "p1", "quantity": 2}], {"p1": 100}, 0.05)
    assert totals.subtotal == 200.0
    assert totals.vat == 10.0
    assert totals.shipping == 0.0
    assert totals.total == 210.0


def test_missing_price_contributes_zero():
    entries = [{"id": "p1", "quantity": 2}, {"id": "p2", "quantity": 3}]
    assert subtotal(entries, {"p1": 100}) == Decimal("200")


def test_shipping_added_after_vat():
    totals = compute_totals([{"id": "p1", "quantity": 1}], {"p1": 100}, 0.05, shipping_cost=60)
    assert totals.to_dict() == {"subtotal": 100.0, "shipping": 60.0, "vat": 5.0, "total": 165.0}


def test_rounding_happens_once_half_up():
    totals = compute_totals([{"id": "p1", "quantity": 3}], {"p1": 0.335}, 0.05)
    assert totals.subtotal == 1.01
    assert totals.vat == 0.05
    assert totals.total == 1.06
    assert round2("2.675") == Decimal("2.68")


@pytest.mark.parametrize("bad", [-10, float("nan"), float("inf"), "abc", None])
def test_invalid_amounts_are_clamped(bad):
    totals = compute_totals([{"id": "p1", "quantity": 1}], {"p1": bad}, bad, shipping_cost=bad)
    assert totals.to_dict() == {"subtotal": 0.0, "shipping": 0.0, "vat": 0.0, "total": 0.0}


def test_empty_cart():
    assert compute_totals([], {}, 0.05).total == 0.0
