"""
Checkout totals: subtotal, VAT, shipping and grand total.

Money is added up as Decimal and rounded half-up to two places once, at the
end, so per-line rounding never accumulates.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Iterable, Mapping

CENT = Decimal("0.01")
ZERO = Decimal("0")


@dataclass(frozen=True)
class Totals:
    subtotal: float
    shipping: float
    vat: float
    total: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def round2(value: Any) -> Decimal:
    return _decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def _decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return ZERO


def _non_negative(value: Any) -> Decimal:
    amount = _decimal(value)
    if not amount.is_finite() or amount < ZERO:
        return ZERO
    return amount


def subtotal(cart_entries: Iterable[Any], price_by_id: Mapping[str, Any]) -> Decimal:
    """Sum of quantity x unit price; entries without a known price add nothing."""
    total = ZERO
    for entry in cart_entries or []:
        product_id = entry.get("id") if isinstance(entry, Mapping) else getattr(entry, "id", None)
        quantity = entry.get("quantity") if isinstance(entry, Mapping) else getattr(entry, "quantity", 0)
        if product_id not in price_by_id:
            continue
        total += _non_negative(price_by_id[product_id]) * _non_negative(quantity)
    return total


def compute_totals(
    cart_entries: Iterable[Any],
    price_by_id: Mapping[str, Any],
    tax_rate: Any,
    shipping_cost: Any = 0,
) -> Totals:
    """Derive the checkout totals.

    `shipping_cost` is chosen upstream (per destination); it is taken as-is
    apart from clamping negatives to zero.
    """
    raw_subtotal = subtotal(cart_entries, price_by_id)
    vat = round2(raw_subtotal * _non_negative(tax_rate))
    shipping = round2(_non_negative(shipping_cost))
    total = round2(raw_subtotal + vat + shipping)

    return Totals(
        subtotal=float(round2(raw_subtotal)),
        shipping=float(shipping),
        vat=float(vat),
        total=float(max(total, ZERO)),
    )
