"""
Commerce state: persisted cart and favorites, shipping, totals and checkout.
"""

from .cart import CART_KEY, CartEntry, CartStore
from .checkout import CartLine, CheckoutSummary, Order, build_cart_lines, build_checkout_summary, place_order, validate_checkout_form
from .collection_store import CollectionChange, PersistedCollectionStore
from .events import CART_UPDATED, FAVORITES_UPDATED, EventBus
from .favorites import FAVORITES_KEY, FavoritesStore
from .shipping import ShippingTable
from .totals import Totals, compute_totals, round2
from .validation import CheckoutValidationError

__all__ = [
    "CART_KEY",
    "CART_UPDATED",
    "CartEntry",
    "CartLine",
    "CartStore",
    "CheckoutSummary",
    "CheckoutValidationError",
    "CollectionChange",
    "EventBus",
    "FAVORITES_KEY",
    "FAVORITES_UPDATED",
    "FavoritesStore",
    "Order",
    "PersistedCollectionStore",
    "ShippingTable",
    "Totals",
    "build_cart_lines",
    "build_checkout_summary",
    "compute_totals",
    "place_order",
    "round2",
    "validate_checkout_form",
]
