"""
Client storage backends: in-memory (default) and Redis (when REDIS_URL is set).
"""

import os
from typing import Optional

from .storage import BaseStorageView, LocalStorage, MemoryStorageView, StorageError, StorageEvent


def create_storage(backend: str = "memory", url: Optional[str] = None, namespace: str = "storefront"):
    """Pick the storage backend; REDIS_URL wins over the configured backend."""
    url = url or os.getenv("REDIS_URL")
    if backend == "redis" or url:
        from .storage_real import RedisStorage

        return RedisStorage(url=url, namespace=namespace)
    return LocalStorage()


__all__ = [
    "BaseStorageView",
    "LocalStorage",
    "MemoryStorageView",
    "StorageError",
    "StorageEvent",
    "create_storage",
]
