"""Adapter layer package for external storage integration boundaries."""

from .firebase_storage import FirebaseStorageAdapter
from .interfaces import StoragePort, StorageResult
from .storage_errors import (
    StorageAdapterError,
    StorageAuthenticationError,
    StorageConnectionError,
    StorageFileAccessError,
    StorageObjectNotFoundError,
)

__all__ = [
    "FirebaseStorageAdapter",
    "StorageAdapterError",
    "StorageAuthenticationError",
    "StorageConnectionError",
    "StorageFileAccessError",
    "StorageObjectNotFoundError",
    "StoragePort",
    "StorageResult",
]
