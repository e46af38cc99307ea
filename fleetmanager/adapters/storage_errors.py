"""Project-native typed exceptions for photo storage adapter failures."""

from __future__ import annotations


class StorageAdapterError(Exception):
    """Base exception for adapter-level storage failures.

    Attributes:
        status_code: Optional upstream HTTP status code.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class StorageAuthenticationError(StorageAdapterError, PermissionError):
    """Missing user identity or permission denied by storage rules."""


class StorageFileAccessError(StorageAdapterError, ValueError):
    """Local source file is missing, unreadable or empty."""


class StorageConnectionError(StorageAdapterError, ConnectionError):
    """Transport-level connectivity failure or timeout."""


class StorageObjectNotFoundError(StorageAdapterError, LookupError):
    """Remote object does not exist at the resolved location."""
