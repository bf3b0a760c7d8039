from connect3.store_backends.base import (
    StoreBackend,
    StoreNotFoundError,
    StoreReadError,
    StoreWriteError,
)
from connect3.store_backends.local import LocalStoreBackend, ensure_parent_directory

__all__ = [
    "LocalStoreBackend",
    "StoreBackend",
    "StoreNotFoundError",
    "StoreReadError",
    "StoreWriteError",
    "ensure_parent_directory",
]
