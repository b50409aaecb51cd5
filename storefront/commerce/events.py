"""
Same-process event bus.

The native storage change notification never reaches the view that made the
write, so stores also emit an application event ("cartUpdated",
"favoritesUpdated") here for listeners living in the same view.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

CART_UPDATED = "cartUpdated"
FAVORITES_UPDATED = "favoritesUpdated"

Handler = Callable[[Any], None]


class EventBus:
    def __init__(self) -> None:
        self._handlers: Dict[str, List[Handler]] = defaultdict(list)

    def on(self, name: str, handler: Handler) -> Callable[[], None]:
        """Register `handler` for `name`; returns a function that unregisters it."""
        self._handlers[name].append(handler)

        def off() -> None:
            self.off(name, handler)

        return off

    def off(self, name: str, handler: Handler) -> None:
        handlers = self._handlers.get(name, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, name: str, payload: Any = None) -> int:
        """Call every handler for `name`; returns how many ran successfully."""
        called = 0
        for handler in list(self._handlers.get(name, [])):
            try:
                handler(payload)
                called += 1
            except Exception:
                logger.exception("Event handler for %s failed", name)
        return called
