"""Typed interfaces for adapter-layer responsibilities."""

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


@dataclass(frozen=True)
class StorageResult:
    """Outcome of one storage operation.

    Attributes:
        success: Whether the operation completed.
        url: Download URL of the affected object, when known.
        error: Human-readable failure message, None on success.
    """

    success: bool
    url: str | None = None
    error: str | None = None


class StoragePort(Protocol):
    """Port definition for storing and removing record photos."""

    def storage_upload_photo(self, local_path: Path, file_name: str) -> StorageResult:
        """Upload one local photo into the user's photo folder.

        Args:
            local_path: Path of the local image file.
            file_name: Object name prefix, usually the owning record id.

        Returns:
            StorageResult: Download URL on success, message on failure.

        Raises:
            RuntimeError: Failures are reported in the result.
        """

    def storage_delete_photo(self, url: str) -> StorageResult:
        """Delete one previously uploaded photo by its download URL.

        Args:
            url: Download URL returned by an upload.

        Returns:
            StorageResult: Success flag with a message on failure.

        Raises:
            RuntimeError: Failures are reported in the result.
        """
