"""
The shopper's chosen language, persisted under the "language" storage key.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from storefront.catalog.localization import DEFAULT_LANGUAGES, Languages
from storefront.database.storage import BaseStorageView, StorageError, StorageEvent

logger = logging.getLogger(__name__)

LANGUAGE_KEY = "language"
RTL_LANGUAGES = frozenset({"ar", "fa", "he", "ur"})


class LanguagePreference:
    def __init__(
        self,
        storage: BaseStorageView,
        languages: Languages = DEFAULT_LANGUAGES,
        default: Optional[str] = None,
    ) -> None:
        self.storage = storage
        self.languages = languages
        self.default = default if default in languages.codes else languages.primary
        self._listeners: List[Callable[[str, str], None]] = []
        self._current = self._load()
        self.storage.add_listener(self._on_storage_event)

    @property
    def current(self) -> str:
        return self._current

    @property
    def is_rtl(self) -> bool:
        return self._current in RTL_LANGUAGES

    def on_change(self, listener: Callable[[str, str], None]) -> None:
        """Register listener(previous, current) for language switches."""
        self._listeners.append(listener)

    def change(self, language: str) -> str:
        if language not in self.languages.codes:
            raise ValueError(f"Unsupported language {language!r}; expected one of {self.languages.codes}")
        try:
            self.storage.set_item(LANGUAGE_KEY, language)
        except StorageError:
            logger.warning("Could not persist language %r; using it for this view only", language, exc_info=True)
        self._switch(language)
        return self._current

    def _load(self) -> str:
        try:
            stored = self.storage.get_item(LANGUAGE_KEY)
        except StorageError:
            logger.warning("Could not read stored language; using %r", self.default, exc_info=True)
            return self.default
        if stored in self.languages.codes:
            return stored
        return self.default

    def _switch(self, language: str) -> None:
        previous = self._current
        self._current = language
        if previous == language:
            return
        for listener in list(self._listeners):
            try:
                listener(previous, language)
            except Exception:
                logger.exception("Language change listener failed")

    def _on_storage_event(self, event: StorageEvent) -> None:
        if event.key not in (LANGUAGE_KEY, None):
            return
        self._switch(self._load())

    def close(self) -> None:
        self.storage.remove_listener(self._on_storage_event)
        self._listeners.clear()
