"""
Mock catalog clients.

They follow the same CatalogClient interface as the real HTTP client and
serve data shaped like the catalog API responses.
"""
