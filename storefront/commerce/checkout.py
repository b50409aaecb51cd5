"""
Cart lines, checkout summary and order placement.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from storefront.catalog.listing import LocalizedProduct, localize_product
from storefront.catalog.localization import DEFAULT_LANGUAGES, Languages
from storefront.catalog.models import Catalog

from .cart import CartEntry, CartStore
from .shipping import ShippingTable
from .totals import Totals, compute_totals
from .validation import (
    optional_str,
    parse_bool,
    raise_if_errors,
    require_str,
    validate_email,
    validate_in,
    validate_phone,
)

logger = logging.getLogger(__name__)

PAYMENT_BANK_TRANSFER = "bank_transfer"
PAYMENT_CASH_ON_DELIVERY = "cash_on_delivery"
PAYMENT_METHODS = (PAYMENT_BANK_TRANSFER, PAYMENT_CASH_ON_DELIVERY)


@dataclass
class CartLine:
    product: LocalizedProduct
    quantity: int
    added_at: int

    @property
    def line_total(self) -> float:
        return round(self.product.price * self.quantity, 2)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "product": self.product.to_dict(),
            "quantity": self.quantity,
            "added_at": self.added_at,
            "line_total": self.line_total,
        }


@dataclass
class CheckoutSummary:
    lines: List[CartLine]
    item_count: int
    destination: Optional[str]
    totals: Totals

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lines": [line.to_dict() for line in self.lines],
            "item_count": self.item_count,
            "destination": self.destination,
            "totals": self.totals.to_dict(),
        }


@dataclass
class Order:
    order_id: str
    customer: Dict[str, Any]
    payment_method: str
    summary: CheckoutSummary
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "order_id": self.order_id,
            "customer": self.customer,
            "payment_method": self.payment_method,
            "summary": self.summary.to_dict(),
            "created_at": self.created_at.isoformat(),
        }


def build_cart_lines(
    entries: Iterable[CartEntry],
    catalog: Catalog,
    language: str,
    languages: Languages = DEFAULT_LANGUAGES,
) -> List[CartLine]:
    """Join cart entries to products, most recently added first.

    Entries whose product is no longer in the catalog are left out.
    """
    lines = []
    for entry in entries:
        product = catalog.get_product(entry.id)
        if product is None:
            continue
        lines.append(CartLine(product=localize_product(product, language, languages), quantity=entry.quantity, added_at=entry.added_at))
    lines.sort(key=lambda line: line.added_at, reverse=True)
    return lines


def build_checkout_summary(
    cart: CartStore,
    catalog: Catalog,
    language: str,
    tax_rate: float,
    shipping_table: Optional[ShippingTable] = None,
    destination: Optional[str] = None,
    languages: Languages = DEFAULT_LANGUAGES,
) -> CheckoutSummary:
    entries = cart.get()
    shipping_cost = shipping_table.cost_for(destination) if shipping_table else 0.0
    totals = compute_totals(entries, catalog.price_by_id(), tax_rate, shipping_cost)
    return CheckoutSummary(
        lines=build_cart_lines(entries, catalog, language, languages),
        item_count=sum(entry.quantity for entry in entries),
        destination=destination,
        totals=totals,
    )


def validate_checkout_form(form_data: Dict[str, Any], destinations: Iterable[str]) -> Dict[str, Any]:
    """Validate billing details; returns the cleaned customer dict.

    Raises CheckoutValidationError listing every failing field.
    """
    errors: Dict[str, str] = {}
    customer = {
        "first_name": require_str(form_data, "first_name", errors, label="First name"),
        "last_name": require_str(form_data, "last_name", errors, label="Last name"),
        "phone": validate_phone(form_data.get("phone"), errors),
        "email": validate_email(form_data.get("email"), errors),
        "destination": validate_in(form_data.get("destination"), destinations, errors, "destination", casefold=True),
        "address": require_str(form_data, "address", errors, label="Address"),
        "order_notes": optional_str(form_data, "order_notes"),
    }
    payment_method = validate_in(form_data.get("payment_method") or PAYMENT_BANK_TRANSFER, PAYMENT_METHODS, errors, "payment_method")
    if not parse_bool(form_data, "terms_accepted"):
        errors.setdefault("terms_accepted", "You must accept the terms and conditions")

    raise_if_errors(errors)
    customer["payment_method"] = payment_method
    return customer


def place_order(
    form_data: Dict[str, Any],
    cart: CartStore,
    catalog: Catalog,
    language: str,
    tax_rate: float,
    shipping_table: ShippingTable,
    languages: Languages = DEFAULT_LANGUAGES,
) -> Order:
    """Validate the form, freeze the summary and empty the cart."""
    customer = validate_checkout_form(form_data, shipping_table.destinations())
    summary = build_checkout_summary(
        cart,
        catalog,
        language,
        tax_rate,
        shipping_table=shipping_table,
        destination=customer["destination"],
        languages=languages,
    )
    if summary.is_empty:
        raise_if_errors({"cart": "Your cart is empty"}, message="Cart is empty")

    payment_method = customer.pop("payment_method")
    order = Order(order_id=str(uuid.uuid4()), customer=customer, payment_method=payment_method, summary=summary)
    cart.clear()
    logger.info("Order %s placed: %d items, total %.2f", order.order_id, summary.item_count, summary.totals.total)
    return order
