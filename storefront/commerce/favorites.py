"""
Favorites persisted under the "favorites" storage key as a JSON array of
product ids, in first-insertion order.
"""

from __future__ import annotations

from typing import Any, List, Optional

from .collection_store import PersistedCollectionStore
from .events import FAVORITES_UPDATED

FAVORITES_KEY = "favorites"


class FavoritesStore(PersistedCollectionStore[str]):
    key = FAVORITES_KEY
    event_name = FAVORITES_UPDATED

    def _parse_item(self, raw: Any) -> Optional[str]:
        return raw if isinstance(raw, str) and raw else None

    def _serialize_item(self, item: str) -> Any:
        return item

    def get(self) -> List[str]:
        ids = []
        for product_id in self._read():
            if product_id not in ids:
                ids.append(product_id)
        return ids

    def is_favorite(self, product_id: str) -> bool:
        return product_id in self._read()

    def toggle(self, product_id: str) -> List[str]:
        """Flip membership of `product_id` and return the new list."""
        current = self.get()
        if product_id in current:
            updated = [fav for fav in current if fav != product_id]
        else:
            updated = [*current, product_id]
        return self._write(updated)

    def clear(self) -> List[str]:
        return self._write([])
