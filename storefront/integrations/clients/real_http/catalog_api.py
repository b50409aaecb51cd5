"""
Real Catalog HTTP Client.

Used when CATALOG_API_URL (or catalog.base_url in the storefront config) is set.
"""

from __future__ import annotations

import logging
import os
from typing import Any, List, Optional

import httpx

from storefront.catalog.localization import DEFAULT_LANGUAGES, Languages
from storefront.integrations.contracts.catalog import COLLECTIONS, CatalogClient, CatalogUnavailable

logger = logging.getLogger(__name__)


class HttpCatalogClient(CatalogClient):
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout_seconds: float = 20.0,
        languages: Languages = DEFAULT_LANGUAGES,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or os.getenv("CATALOG_API_URL", "")).rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.languages = languages
        self._transport = transport

    async def fetch_collection(self, name: str) -> List[Any]:
        if name not in COLLECTIONS:
            raise ValueError(f"Unknown catalog collection {name!r}")
        if not self.base_url:
            raise CatalogUnavailable("CATALOG_API_URL is not configured.")

        url = f"{self.base_url}/{name}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
                response = await client.get(url, headers={"Accept": "application/json"})
                response.raise_for_status()
                data = response.json() if response.content else []
        except httpx.HTTPError as e:
            logger.warning("Catalog request %s failed: %s", url, e)
            raise CatalogUnavailable(f"Could not fetch {name}: {e}") from e
        except ValueError as e:
            raise CatalogUnavailable(f"Catalog returned invalid JSON for {name}") from e

        return _unwrap(data, name)


def _unwrap(data: Any, name: str) -> List[Any]:
    """Accept a bare array or an envelope such as {"data": [...]} / {"products": [...]}."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in ("data", name, "items", "results"):
            value = data.get(key)
            if isinstance(value, list):
                return value
    raise CatalogUnavailable(f"Catalog returned an unexpected payload for {name}")
