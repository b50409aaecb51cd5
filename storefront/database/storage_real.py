"""
Redis-backed client storage, used when REDIS_URL is set. Implements the same
interface as storefront.database.storage (in-memory).

Each value lives under "<namespace>:<key>". Every write is a single SET, so
a collection is never left half-written. Change notifications go out on the
"<namespace>:storage" pub/sub channel; a view picks them up when it calls
dispatch_pending() and ignores the ones it published itself.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import redis

from .storage import BaseStorageView, StorageError, StorageEvent

logger = logging.getLogger(__name__)


class RedisStorage:
    """
    Redis storage area shared by every view created from it.
    """

    def __init__(self, url: Optional[str] = None, namespace: str = "storefront", client: Any = None) -> None:
        if client is None:
            if not url:
                raise ValueError("RedisStorage needs either a url or a client")
            client = redis.from_url(url, decode_responses=True)
        self._client = client
        self.namespace = namespace

    @property
    def channel(self) -> str:
        return f"{self.namespace}:storage"

    def view(self, view_id: Optional[str] = None) -> "RedisStorageView":
        return RedisStorageView(self, view_id)

    def item_key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def ping(self) -> bool:
        try:
            return self._client.ping()
        except redis.RedisError:
            return False


class RedisStorageView(BaseStorageView):
    def __init__(self, storage: RedisStorage, view_id: Optional[str] = None) -> None:
        super().__init__(view_id)
        self._storage = storage
        self._client = storage._client
        self._pubsub = None

    def get_item(self, key: str) -> Optional[str]:
        try:
            return self._client.get(self._storage.item_key(key))
        except redis.RedisError as exc:
            raise StorageError(f"Could not read {key!r} from Redis: {exc}") from exc

    def set_item(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise StorageError(f"Storage values must be strings, got {type(value).__name__}")
        try:
            old = self._client.set(self._storage.item_key(key), value, get=True)
        except redis.RedisError as exc:
            raise StorageError(f"Could not write {key!r} to Redis: {exc}") from exc
        if old != value:
            self._publish(StorageEvent(key=key, old_value=old, new_value=value, origin=self.id))

    def remove_item(self, key: str) -> None:
        try:
            old = self._client.get(self._storage.item_key(key))
            self._client.delete(self._storage.item_key(key))
        except redis.RedisError as exc:
            raise StorageError(f"Could not delete {key!r} from Redis: {exc}") from exc
        if old is not None:
            self._publish(StorageEvent(key=key, old_value=old, new_value=None, origin=self.id))

    def clear(self) -> None:
        try:
            keys = list(self._client.scan_iter(match=f"{self._storage.namespace}:*"))
            keys = [k for k in keys if k != self._storage.channel]
            if keys:
                self._client.delete(*keys)
        except redis.RedisError as exc:
            raise StorageError(f"Could not clear Redis namespace {self._storage.namespace!r}: {exc}") from exc
        if keys:
            self._publish(StorageEvent(key=None, old_value=None, new_value=None, origin=self.id))

    # --- Change notification -------------------------------------------------

    def add_listener(self, listener) -> None:
        super().add_listener(listener)
        if self._pubsub is None:
            self._pubsub = self._client.pubsub(ignore_subscribe_messages=True)
            self._pubsub.subscribe(self._storage.channel)

    def dispatch_pending(self) -> int:
        """Deliver every queued change notification; returns how many arrived."""
        if self._pubsub is None:
            return 0
        delivered = 0
        while True:
            try:
                message = self._pubsub.get_message()
            except redis.RedisError:
                logger.warning("Redis pub/sub read failed on %s", self._storage.channel, exc_info=True)
                break
            if not message:
                break
            if message.get("type") != "message":
                continue
            event = _decode_event(message.get("data"))
            if event is None:
                continue
            self._deliver(event)
            delivered += 1
        return delivered

    def _publish(self, event: StorageEvent) -> None:
        payload = json.dumps(
            {"key": event.key, "old_value": event.old_value, "new_value": event.new_value, "origin": event.origin}
        )
        try:
            self._client.publish(self._storage.channel, payload)
        except redis.RedisError:
            # The value itself is stored; other views will see it on their next read.
            logger.warning("Could not publish storage change for %r", event.key, exc_info=True)

    def close(self) -> None:
        super().close()
        if self._pubsub is not None:
            try:
                self._pubsub.close()
            except redis.RedisError:
                pass
            self._pubsub = None


def _decode_event(raw: Any) -> Optional[StorageEvent]:
    try:
        data = json.loads(raw)
        return StorageEvent(
            key=data.get("key"),
            old_value=data.get("old_value"),
            new_value=data.get("new_value"),
            origin=str(data.get("origin", "")),
        )
    except (TypeError, ValueError, AttributeError):
        logger.warning("Ignoring malformed storage notification: %r", raw)
        return None
