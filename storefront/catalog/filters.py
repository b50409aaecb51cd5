"""
Filter selection <-> query string synchronization.

The active filter is kept as a human-readable label and mirrored in the
query string as either `category=<label>` or `subcategory=<label>`. Since
labels depend on the language, a language switch has to translate the
selection: the label is traced back to the catalog entity that produced it
and replaced by that entity's label in the new language.

Known gap: when two entities share a label in one language the reverse
lookup cannot tell them apart and picks the first one found (categories
before subcategories, catalog order within each).
"""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import parse_qs, urlencode

from .hierarchy import ALL, CATEGORY, SUBCATEGORY, classify_label
from .localization import DEFAULT_LANGUAGES, Languages, matches_any_language, resolve
from .models import Category, Subcategory

logger = logging.getLogger(__name__)

QueryInput = Union[str, Mapping[str, str], None]


def parse_query(query: QueryInput) -> Dict[str, str]:
    """Read the filter parameters out of a query string or mapping."""
    if not query:
        return {}
    if isinstance(query, str):
        parsed = parse_qs(query.lstrip("?"), keep_blank_values=False)
        params = {key: values[0] for key, values in parsed.items() if values}
    else:
        params = {key: value for key, value in query.items() if value}
    return {key: params[key] for key in (CATEGORY, SUBCATEGORY) if params.get(key)}


class FilterSynchronizer:
    """Keeps one filter selection consistent with the query string and language."""

    def __init__(
        self,
        categories: Sequence[Category],
        subcategories: Sequence[Subcategory],
        language: str,
        query: QueryInput = None,
        languages: Languages = DEFAULT_LANGUAGES,
    ):
        self.categories = list(categories or [])
        self.subcategories = list(subcategories or [])
        self.language = language
        self.languages = languages
        self.selection = ALL
        self.params: Dict[str, str] = {}
        self.on_query_change(query)

    # --- Inputs --------------------------------------------------------------

    def on_query_change(self, query: QueryInput) -> str:
        """Adopt the selection carried by the query string."""
        self.params = parse_query(query)
        if self.params.get(SUBCATEGORY):
            self.selection = self.params[SUBCATEGORY]
        elif self.params.get(CATEGORY):
            self.selection = self.params[CATEGORY]
        else:
            self.selection = ALL
        return self.selection

    def on_language_change(self, language: str) -> str:
        """Translate the current selection into `language`.

        A selection that cannot be traced to a category or subcategory (for
        instance a free-text product label) is left as it is.
        """
        previous = self.language
        self.language = language

        if self.selection == ALL or previous == language:
            return self.selection

        match = self._find_entity(self.selection, previous)
        if match is None:
            logger.debug("No catalog entity for selection %r; keeping it unchanged", self.selection)
            return self.selection

        kind, entity = match
        translated = resolve(entity.name, language, self.languages)
        if not translated:
            return self.selection

        self.selection = translated
        self.params = {kind: translated}
        return self.selection

    def select(self, label: str) -> Dict[str, str]:
        """Apply a user-chosen selection and return the new query parameters."""
        if not label or label == ALL:
            self.selection = ALL
            self.params = {}
            return dict(self.params)

        self.selection = label
        kind = classify_label(label, self.categories, self.subcategories, self.language, self.languages)
        # Labels that are neither (product-only labels) route as subcategories.
        self.params = {kind or SUBCATEGORY: label}
        return dict(self.params)

    # --- Output --------------------------------------------------------------

    def query_string(self) -> str:
        return urlencode(self.params)

    # --- Internals -----------------------------------------------------------

    def _find_entity(self, label: str, language: str) -> Optional[Tuple[str, Union[Category, Subcategory]]]:
        for entity in self.categories:
            if resolve(entity.name, language, self.languages) == label:
                return CATEGORY, entity
        for entity in self.subcategories:
            if resolve(entity.name, language, self.languages) == label:
                return SUBCATEGORY, entity

        # A label taken straight from a shared URL may be in either language.
        for entity in self.categories:
            if matches_any_language(entity.name, label, self.languages):
                return CATEGORY, entity
        for entity in self.subcategories:
            if matches_any_language(entity.name, label, self.languages):
                return SUBCATEGORY, entity
        return None
