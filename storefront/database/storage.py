"""
In-memory client storage for local development and tests.

Models the browser's local storage: one shared key/value area with several
open views (tabs) attached to it. A write made through one view is readable
by every view immediately, and every *other* view receives a StorageEvent.
The view that made the write is not notified, exactly like the native
storage event.

`storefront.database.storage_real` implements the same interface on Redis.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the storage backend cannot be read or written."""


@dataclass(frozen=True)
class StorageEvent:
    key: Optional[str]                   # None when the whole area was cleared
    old_value: Optional[str]
    new_value: Optional[str]
    origin: str                          # id of the view that made the change


StorageListener = Callable[[StorageEvent], None]


class BaseStorageView:
    """Listener bookkeeping shared by the storage view implementations."""

    def __init__(self, view_id: Optional[str] = None) -> None:
        self.id = view_id or uuid.uuid4().hex
        self._listeners: List[StorageListener] = []

    def add_listener(self, listener: StorageListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: StorageListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _deliver(self, event: StorageEvent) -> None:
        if event.origin == self.id:
            return
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Storage listener failed for key %r", event.key)

    def dispatch_pending(self) -> int:
        """Deliver queued notifications; in-memory views are notified synchronously."""
        return 0

    # --- Storage API ---------------------------------------------------------

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError

    def close(self) -> None:
        self._listeners.clear()


class LocalStorage:
    """Shared in-memory key/value area; hand out one view per open tab."""

    def __init__(self) -> None:
        self._items: Dict[str, str] = {}
        self._views: List["MemoryStorageView"] = []

    def view(self, view_id: Optional[str] = None) -> "MemoryStorageView":
        v = MemoryStorageView(self, view_id)
        self._views.append(v)
        return v

    def detach(self, view: "MemoryStorageView") -> None:
        if view in self._views:
            self._views.remove(view)

    # --- Operations used by views --------------------------------------------

    def get(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set(self, origin: str, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise StorageError(f"Storage values must be strings, got {type(value).__name__}")
        old = self._items.get(key)
        self._items[key] = value
        if old != value:
            self._broadcast(StorageEvent(key=key, old_value=old, new_value=value, origin=origin))

    def remove(self, origin: str, key: str) -> None:
        old = self._items.pop(key, None)
        if old is not None:
            self._broadcast(StorageEvent(key=key, old_value=old, new_value=None, origin=origin))

    def clear(self, origin: str) -> None:
        if not self._items:
            return
        self._items.clear()
        self._broadcast(StorageEvent(key=None, old_value=None, new_value=None, origin=origin))

    def _broadcast(self, event: StorageEvent) -> None:
        for v in list(self._views):
            v._deliver(event)

    def ping(self) -> bool:
        return True


class MemoryStorageView(BaseStorageView):
    def __init__(self, storage: LocalStorage, view_id: Optional[str] = None) -> None:
        super().__init__(view_id)
        self._storage = storage

    def get_item(self, key: str) -> Optional[str]:
        return self._storage.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._storage.set(self.id, key, value)

    def remove_item(self, key: str) -> None:
        self._storage.remove(self.id, key)

    def clear(self) -> None:
        self._storage.clear(self.id)

    def close(self) -> None:
        super().close()
        self._storage.detach(self)
