"""
Catalog clients.

Selection happens in create_catalog_client: an HTTP base URL (CATALOG_API_URL
or catalog.base_url with source "http") picks the real client, otherwise the
local JSON catalog is used.
"""

import os
from typing import Optional

from storefront.catalog.localization import DEFAULT_LANGUAGES, Languages

from .mocks.local_catalog import LocalCatalogClient
from .real_http.catalog_api import HttpCatalogClient


def create_catalog_client(
    source: str = "local",
    base_url: Optional[str] = None,
    local_path: Optional[str] = None,
    timeout_seconds: float = 20.0,
    languages: Languages = DEFAULT_LANGUAGES,
):
    env_url = os.getenv("CATALOG_API_URL")
    if env_url or (source == "http" and base_url):
        return HttpCatalogClient(base_url=env_url or base_url, timeout_seconds=timeout_seconds, languages=languages)
    return LocalCatalogClient(path=local_path, languages=languages)


__all__ = ["HttpCatalogClient", "LocalCatalogClient", "create_catalog_client"]
