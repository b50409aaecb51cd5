"""
Per-client sessions for the API.

Each X-Storefront-Client value gets its own storage view and the stores
built on it. The registry is bounded: the least recently used session is
closed once `max_sessions` is exceeded, and sessions idle for longer than
`idle_seconds` are closed on the next lookup. Closing only detaches the
view; the persisted cart, favorites and language stay in storage and are
read back when the client returns.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable, Optional

from storefront.commerce import CartStore, EventBus, FavoritesStore
from storefront.database import BaseStorageView
from storefront.language_preference import LanguagePreference

logger = logging.getLogger(__name__)


@dataclass
class ClientSession:
    """Everything one browser client (one storage view) works with."""

    view: BaseStorageView
    events: EventBus
    cart: CartStore
    favorites: FavoritesStore
    language: LanguagePreference
    last_used: float = field(default_factory=time.monotonic)

    def close(self) -> None:
        self.cart.close()
        self.favorites.close()
        self.language.close()
        self.view.close()


class SessionRegistry:
    """LRU map of client id -> ClientSession with an idle timeout.

    Not thread-safe: call it from the event loop only.
    """

    def __init__(
        self,
        factory: Callable[[str], ClientSession],
        max_sessions: int = 1000,
        idle_seconds: Optional[float] = 1800.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self.factory = factory
        self.max_sessions = max_sessions
        self.idle_seconds = idle_seconds
        self.clock = clock
        self._sessions: "OrderedDict[str, ClientSession]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, client_id: object) -> bool:
        return client_id in self._sessions

    def get(self, client_id: str) -> ClientSession:
        now = self.clock()
        self._expire_idle(now)

        session = self._sessions.get(client_id)
        if session is None:
            session = self.factory(client_id)
            self._sessions[client_id] = session
            logger.info("Opened storage view for client %s", client_id)
            while len(self._sessions) > self.max_sessions:
                oldest_id, _ = next(iter(self._sessions.items()))
                self._close(oldest_id, "evicted")
        else:
            self._sessions.move_to_end(client_id)

        session.last_used = now
        return session

    def _expire_idle(self, now: float) -> None:
        if self.idle_seconds is None:
            return
        # Oldest first; stop at the first session still in use.
        while self._sessions:
            client_id, session = next(iter(self._sessions.items()))
            if now - session.last_used <= self.idle_seconds:
                break
            self._close(client_id, "expired")

    def _close(self, client_id: str, reason: str) -> None:
        session = self._sessions.pop(client_id)
        try:
            session.close()
        except Exception:
            logger.exception("Closing session for client %s failed", client_id)
        logger.info("Closed storage view for client %s (%s)", client_id, reason)

    def close_all(self) -> None:
        for client_id in list(self._sessions):
            self._close(client_id, "shutdown")
