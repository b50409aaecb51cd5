from .catalog import COLLECTIONS, CatalogClient, CatalogUnavailable

__all__ = ["COLLECTIONS", "CatalogClient", "CatalogUnavailable"]
