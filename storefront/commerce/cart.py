"""
Shopping cart persisted under the "cart" storage key.

Wire format (read directly by other pages, keep it stable):

    [{"id": "<product id>", "quantity": 2, "addedAt": 1718000000000}, ...]
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .collection_store import PersistedCollectionStore
from .events import CART_UPDATED
from .totals import subtotal

logger = logging.getLogger(__name__)

CART_KEY = "cart"


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class CartEntry:
    id: str
    quantity: int
    added_at: int

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "quantity": self.quantity, "addedAt": self.added_at}

    @classmethod
    def from_dict(cls, raw: Any) -> Optional["CartEntry"]:
        if not isinstance(raw, dict):
            return None
        product_id = raw.get("id")
        quantity = raw.get("quantity")
        if not isinstance(product_id, str) or not product_id:
            return None
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            return None
        added_at = raw.get("addedAt")
        if isinstance(added_at, bool) or not isinstance(added_at, (int, float)):
            added_at = 0
        return cls(id=product_id, quantity=quantity, added_at=int(added_at))


class CartStore(PersistedCollectionStore[CartEntry]):
    key = CART_KEY
    event_name = CART_UPDATED

    def _parse_item(self, raw: Any) -> Optional[CartEntry]:
        return CartEntry.from_dict(raw)

    def _serialize_item(self, item: CartEntry) -> Any:
        return item.to_dict()

    def _read(self) -> List[CartEntry]:
        # A hand-edited payload may repeat an id; the first entry wins.
        entries = super()._read()
        seen = set()
        unique = []
        for entry in entries:
            if entry.id in seen:
                continue
            seen.add(entry.id)
            unique.append(entry)
        return unique

    # --- Queries -------------------------------------------------------------

    def get(self) -> List[CartEntry]:
        return self._read()

    def get_item(self, product_id: str) -> Optional[CartEntry]:
        for entry in self._read():
            if entry.id == product_id:
                return entry
        return None

    def is_in_cart(self, product_id: str) -> bool:
        return self.get_item(product_id) is not None

    def item_count(self) -> int:
        return sum(entry.quantity for entry in self._read())

    def total(self, products: Union[Mapping[str, float], Iterable[Any]]) -> float:
        """Cart value at the given prices; unknown products count as zero.

        `products` is either a price map or an iterable of objects/dicts with
        an id and a price.
        """
        return float(subtotal(self._read(), _price_map(products)))

    # --- Mutations -----------------------------------------------------------

    def add(self, product_id: str, quantity: int = 1) -> List[CartEntry]:
        quantity = int(quantity)
        if quantity < 1:
            raise ValueError(f"Quantity to add must be at least 1, got {quantity}")

        entries = self._read()
        for entry in entries:
            if entry.id == product_id:
                entry.quantity += quantity
                break
        else:
            entries.append(CartEntry(id=product_id, quantity=quantity, added_at=_now_ms()))

        logger.debug("Cart add: %s x%d", product_id, quantity)
        return self._write(entries)

    def remove(self, product_id: str) -> List[CartEntry]:
        entries = [entry for entry in self._read() if entry.id != product_id]
        return self._write(entries)

    def set_quantity(self, product_id: str, quantity: int) -> List[CartEntry]:
        quantity = int(quantity)
        if quantity <= 0:
            return self.remove(product_id)

        entries = self._read()
        for entry in entries:
            if entry.id == product_id:
                entry.quantity = quantity
        return self._write(entries)

    def clear(self) -> List[CartEntry]:
        return self._write([])


def _price_map(products: Union[Mapping[str, float], Iterable[Any]]) -> Dict[str, float]:
    if isinstance(products, Mapping):
        return dict(products)
    prices = {}
    for product in products or []:
        if isinstance(product, Mapping):
            product_id = product.get("id") or product.get("_id")
            price = product.get("price")
        else:
            product_id = getattr(product, "id", None)
            price = getattr(product, "price", None)
        if product_id is not None and price is not None:
            prices[str(product_id)] = price
    return prices
