"""
Catalog source contract.

Both the HTTP client (clients/real_http/catalog_api.py) and the local file
client (clients/mocks/local_catalog.py) return the raw record collections
served by the catalog API: `products`, `categories`, `subcategories` and
`shipping`. Normalization into the Catalog aggregate happens here, once,
so the two sources cannot drift apart.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, List

from storefront.catalog.localization import DEFAULT_LANGUAGES, Languages
from storefront.catalog.models import Catalog, ShippingOption
from storefront.catalog.normalizer import normalize_catalog, normalize_shipping_option

logger = logging.getLogger(__name__)

PRODUCTS = "products"
CATEGORIES = "categories"
SUBCATEGORIES = "subcategories"
SHIPPING = "shipping"

COLLECTIONS = (PRODUCTS, CATEGORIES, SUBCATEGORIES, SHIPPING)


class CatalogUnavailable(Exception):
    """The catalog source could not be reached or returned unusable data."""


class CatalogClient(ABC):
    """Every catalog source must implement this interface."""

    languages: Languages = DEFAULT_LANGUAGES

    @abstractmethod
    async def fetch_collection(self, name: str) -> List[Any]:
        """Return the raw records of one collection; raise CatalogUnavailable on failure."""

    async def load_catalog(self) -> Catalog:
        categories = await self.fetch_collection(CATEGORIES)
        subcategories = await self.fetch_collection(SUBCATEGORIES)
        products = await self.fetch_collection(PRODUCTS)
        return normalize_catalog(categories, subcategories, products, self.languages)

    async def list_shipping_options(self) -> List[ShippingOption]:
        raw = await self.fetch_collection(SHIPPING)
        options = [option for option in (normalize_shipping_option(r) for r in raw) if option]
        logger.debug("Loaded %d shipping options", len(options))
        return options
