"""
Local Catalog Client (Mock/Local).

Serves the catalog from a JSON file shaped like the catalog API responses:

    {"categories": [...], "subcategories": [...], "products": [...], "shipping": [...]}

Used during development and in tests when no catalog API is configured.
Swap for clients/real_http/catalog_api.py by setting CATALOG_API_URL.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from storefront.catalog.localization import DEFAULT_LANGUAGES, Languages
from storefront.integrations.contracts.catalog import COLLECTIONS, CatalogClient, CatalogUnavailable

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent.parent.parent.parent.parent / "data" / "catalog.json"


class LocalCatalogClient(CatalogClient):
    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        data: Optional[Dict[str, List[Any]]] = None,
        languages: Languages = DEFAULT_LANGUAGES,
    ) -> None:
        self.path = Path(path) if path else DEFAULT_CATALOG_PATH
        self.languages = languages
        self._data = data

    def _load(self) -> Dict[str, List[Any]]:
        if self._data is not None:
            return self._data
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise CatalogUnavailable(f"Catalog file not found: {self.path}") from e
        except json.JSONDecodeError as e:
            raise CatalogUnavailable(f"Catalog file is not valid JSON: {self.path}") from e
        if not isinstance(data, dict):
            raise CatalogUnavailable(f"Catalog file must hold an object of collections: {self.path}")
        logger.info("Loaded local catalog from %s", self.path)
        self._data = data
        return data

    async def fetch_collection(self, name: str) -> List[Any]:
        if name not in COLLECTIONS:
            raise ValueError(f"Unknown catalog collection {name!r}")
        records = self._load().get(name) or []
        if not isinstance(records, list):
            logger.warning("Local catalog collection %s is not a list; ignoring it", name)
            return []
        return records
