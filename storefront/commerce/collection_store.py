"""
Persisted collection store: the shared base of the cart and favorites.

A store owns one storage key holding a JSON array. It is the only writer of
that key within its view, and it keeps:

- a version counter, bumped on every change it makes or observes
- a list of subscribers, told about every change with its source:
  "local" for writes made here, "storage" for writes made by another view

Reads never raise. Unreadable storage, invalid JSON or a payload that is not
an array all read as an empty collection; the next write replaces it.
Concurrent writers in different views are last-writer-wins.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, List, Optional, TypeVar

from storefront.database.storage import BaseStorageView, StorageError, StorageEvent

from .events import EventBus

logger = logging.getLogger(__name__)

SOURCE_LOCAL = "local"
SOURCE_STORAGE = "storage"

T = TypeVar("T")


@dataclass(frozen=True)
class CollectionChange:
    key: str
    version: int
    source: str


Subscriber = Callable[[CollectionChange], None]


class PersistedCollectionStore(Generic[T]):
    key: str = ""
    event_name: str = ""

    def __init__(self, storage: BaseStorageView, events: Optional[EventBus] = None) -> None:
        if not self.key:
            raise TypeError(f"{type(self).__name__} must define a storage key")
        self.storage = storage
        self.events = events or EventBus()
        self.version = 0
        self._subscribers: List[Subscriber] = []
        self.storage.add_listener(self._on_storage_event)

    # --- Subclass hooks ------------------------------------------------------

    def _parse_item(self, raw: Any) -> Optional[T]:
        """Turn one decoded array element into an item, or None to skip it."""
        raise NotImplementedError

    def _serialize_item(self, item: T) -> Any:
        raise NotImplementedError

    # --- Subscriptions -------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, source: str) -> None:
        change = CollectionChange(key=self.key, version=self.version, source=source)
        for callback in list(self._subscribers):
            try:
                callback(change)
            except Exception:
                logger.exception("Subscriber of %r failed", self.key)

    def _on_storage_event(self, event: StorageEvent) -> None:
        # key None means the whole storage area was cleared.
        if event.key not in (self.key, None):
            return
        self.version += 1
        self._notify(SOURCE_STORAGE)

    # --- Persistence ---------------------------------------------------------

    def _read(self) -> List[T]:
        try:
            raw = self.storage.get_item(self.key)
        except StorageError:
            logger.warning("Could not read %r from storage; treating it as empty", self.key, exc_info=True)
            return []
        if not raw:
            return []
        try:
            decoded = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Stored %r is not valid JSON; treating it as empty", self.key)
            return []
        if not isinstance(decoded, list):
            logger.warning("Stored %r is not an array; treating it as empty", self.key)
            return []

        items = []
        for element in decoded:
            item = self._parse_item(element)
            if item is None:
                logger.debug("Skipping malformed %r element: %r", self.key, element)
                continue
            items.append(item)
        return items

    def _write(self, items: List[T]) -> List[T]:
        """Persist the full collection as a single value and announce it."""
        payload = json.dumps([self._serialize_item(item) for item in items], ensure_ascii=False)
        try:
            self.storage.set_item(self.key, payload)
        except StorageError:
            logger.error("Could not persist %r; keeping the previous state", self.key, exc_info=True)
            return self._read()

        self.version += 1
        if self.event_name:
            self.events.emit(self.event_name, items)
        self._notify(SOURCE_LOCAL)
        return items

    def close(self) -> None:
        self.storage.remove_listener(self._on_storage_event)
        self._subscribers.clear()
