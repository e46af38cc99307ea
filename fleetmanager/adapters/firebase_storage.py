"""Firebase Storage REST adapter for record photo uploads."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Callable, Final
from urllib.parse import quote, unquote, urlsplit

import httpx

from .interfaces import StoragePort, StorageResult
from .storage_errors import (
    StorageAdapterError,
    StorageAuthenticationError,
    StorageConnectionError,
    StorageFileAccessError,
    StorageObjectNotFoundError,
)

logger = logging.getLogger(__name__)


class FirebaseStorageAdapter(StoragePort):
    """Adapter for the Firebase Storage v0 REST API.

    Objects live under `users/{user_id}/photos/` so storage rules can restrict
    each user to their own folder.
    """

    _PHOTO_CONTENT_TYPE: Final[str] = "image/jpeg"
    _UPLOAD_MESSAGES: Final[dict[str, str]] = {
        "unauthenticated": "Please sign in to upload photos",
        "permission": "Permission denied. Please make sure you're signed in and try again.",
        "not_found": "Selected photo cannot be found. Please try selecting the photo again.",
        "network": "Network error. Please check your internet connection and try again.",
        "unavailable": "Storage service unavailable. Please try again later.",
        "failed": "Failed to upload photo",
    }
    _DELETE_MESSAGES: Final[dict[str, str]] = {
        "unauthenticated": "Please sign in to delete photos",
        "permission": "Permission denied. Please make sure you're signed in.",
        "not_found": "Photo already deleted or doesn't exist",
        "network": "Network error. Please check your internet connection and try again.",
        "unavailable": "Storage service unavailable. Please try again later.",
        "failed": "Failed to delete photo",
    }

    def __init__(  # pylint: disable=too-many-arguments
        self,
        bucket: str,
        user_id: str,
        token: str = "",
        base_url: str = "https://firebasestorage.googleapis.com/v0",
        request_timeout_seconds: float = 30.0,
        transport: httpx.BaseTransport | None = None,
        object_suffix_provider: Callable[[], str] | None = None,
    ):
        """Initialize Firebase Storage adapter.

        Args:
            bucket: Storage bucket name, e.g. `my-project.appspot.com`.
            user_id: Signed-in user identifier; blank means unauthenticated.
            token: Optional Firebase ID token sent as bearer credentials.
            base_url: Base endpoint URL for the Storage REST API.
            request_timeout_seconds: HTTP request timeout in seconds.
            transport: Optional httpx transport, used by tests.
            object_suffix_provider: Optional provider of unique object name suffixes.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when required config values are invalid.
        """

        normalized_bucket = bucket.strip()
        normalized_base_url = base_url.strip()
        if not normalized_bucket:
            raise ValueError("bucket must not be blank")
        if not normalized_base_url:
            raise ValueError("base_url must not be blank")
        if request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be > 0")

        self._bucket = normalized_bucket
        self._user_id = user_id.strip()
        self._token = token.strip()
        self._base_url = normalized_base_url.rstrip("/")
        self._request_timeout_seconds = request_timeout_seconds
        self._transport = transport
        self._object_suffix_provider = object_suffix_provider or (lambda: str(uuid.uuid4()))

    def storage_upload_photo(self, local_path: Path, file_name: str) -> StorageResult:
        """Upload one local photo as `users/{user_id}/photos/{file_name}_{suffix}.jpg`.

        Args:
            local_path: Path of the local image file.
            file_name: Object name prefix, usually the owning record id.

        Returns:
            StorageResult: Tokenised download URL on success, message on failure.

        Raises:
            RuntimeError: Failures are reported in the result.
        """

        try:
            user_id = self._storage_require_user(self._UPLOAD_MESSAGES)
            payload_bytes = self._storage_read_local_file(Path(local_path))
            object_name = f"{file_name.strip()}_{self._object_suffix_provider()}.jpg"
            object_path = f"users/{user_id}/photos/{object_name}"
            logger.debug("photo upload started object_path=%s bytes=%d", object_path, len(payload_bytes))

            response = self._storage_request(
                "POST",
                f"{self._base_url}/b/{self._bucket}/o",
                messages=self._UPLOAD_MESSAGES,
                params={"name": object_path},
                content=payload_bytes,
                headers={"Content-Type": self._PHOTO_CONTENT_TYPE},
            )
            download_url = self._storage_build_download_url(object_path, self._storage_parse_download_token(response))
        except StorageAdapterError as error:
            logger.error("photo upload failed file_name=%s error=%s", file_name, error)
            return StorageResult(success=False, error=str(error))

        logger.info("photo uploaded object_path=%s", object_path)
        return StorageResult(success=True, url=download_url)

    def storage_delete_photo(self, url: str) -> StorageResult:
        """Delete one photo by download URL; a missing object counts as deleted.

        Args:
            url: Download URL returned by an upload.

        Returns:
            StorageResult: Success flag with a message on failure.

        Raises:
            RuntimeError: Failures are reported in the result.
        """

        try:
            self._storage_require_user(self._DELETE_MESSAGES)
            object_path = self._storage_resolve_object_path(url)
            self._storage_request(
                "DELETE",
                f"{self._base_url}/b/{self._bucket}/o/{quote(object_path, safe='')}",
                messages=self._DELETE_MESSAGES,
            )
        except StorageObjectNotFoundError as error:
            logger.warning("photo delete skipped url=%s reason=%s", url, error)
            return StorageResult(success=True, url=url)
        except StorageAdapterError as error:
            logger.error("photo delete failed url=%s error=%s", url, error)
            return StorageResult(success=False, url=url, error=str(error))

        logger.info("photo deleted object_path=%s", object_path)
        return StorageResult(success=True, url=url)

    def _storage_require_user(self, messages: dict[str, str]) -> str:
        if not self._user_id:
            raise StorageAuthenticationError(messages["unauthenticated"])
        return self._user_id

    @staticmethod
    def _storage_read_local_file(local_path: Path) -> bytes:
        """Read the photo bytes, rejecting missing or empty files.

        Raises:
            StorageFileAccessError: Raised when the file cannot be used.
        """

        try:
            payload_bytes = local_path.read_bytes()
        except PermissionError as error:
            raise StorageFileAccessError(
                "Permission denied to access selected photo. Please grant storage permissions and try again."
            ) from error
        except OSError as error:
            raise StorageFileAccessError(
                "Cannot access selected photo. Please try selecting the photo again."
            ) from error
        if not payload_bytes:
            raise StorageFileAccessError("Selected file is empty or not accessible")
        return payload_bytes

    def _storage_request(self, method: str, url: str, messages: dict[str, str], **kwargs) -> httpx.Response:
        """Send one request and map transport and status failures to typed errors.

        Raises:
            StorageConnectionError: Raised on network failures and timeouts.
            StorageAuthenticationError: Raised on 401 and 403 responses.
            StorageObjectNotFoundError: Raised on 404 responses.
            StorageAdapterError: Raised on any other error status.
        """

        headers = dict(kwargs.pop("headers", {}))
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        try:
            with httpx.Client(timeout=self._request_timeout_seconds, transport=self._transport) as client:
                response = client.request(method, url, headers=headers, **kwargs)
        except httpx.TransportError as error:
            raise StorageConnectionError(messages["network"]) from error

        status_code = response.status_code
        if status_code in (401, 403):
            raise StorageAuthenticationError(messages["permission"], status_code=status_code)
        if status_code == 404:
            raise StorageObjectNotFoundError(messages["not_found"], status_code=status_code)
        if status_code >= 500:
            raise StorageAdapterError(messages["unavailable"], status_code=status_code)
        if status_code >= 400:
            raise StorageAdapterError(f"{messages['failed']}: HTTP {status_code}", status_code=status_code)
        return response

    def _storage_parse_download_token(self, response: httpx.Response) -> str:
        try:
            metadata = response.json()
        except ValueError as error:
            raise StorageAdapterError(f"{self._UPLOAD_MESSAGES['failed']}: invalid upload response") from error
        if not isinstance(metadata, dict):
            raise StorageAdapterError(f"{self._UPLOAD_MESSAGES['failed']}: invalid upload response")
        download_tokens = str(metadata.get("downloadTokens") or "").strip()
        if not download_tokens:
            raise StorageAdapterError(f"{self._UPLOAD_MESSAGES['failed']}: missing download token")
        return download_tokens.split(",")[0]

    def _storage_build_download_url(self, object_path: str, download_token: str) -> str:
        return (
            f"{self._base_url}/b/{self._bucket}/o/{quote(object_path, safe='')}"
            f"?alt=media&token={quote(download_token, safe='')}"
        )

    def _storage_resolve_object_path(self, url: str) -> str:
        """Extract the object path from a download or `gs://` URL.

        Raises:
            StorageAdapterError: Raised when the URL does not point into this bucket.
        """

        split_url = urlsplit(url.strip())
        if split_url.scheme == "gs":
            if split_url.netloc == self._bucket and split_url.path.strip("/"):
                return split_url.path.lstrip("/")
        else:
            bucket_marker = f"/b/{self._bucket}/o/"
            _, marker, encoded_object_path = split_url.path.partition(bucket_marker)
            if marker and encoded_object_path:
                return unquote(encoded_object_path)
        raise StorageAdapterError(f"{self._DELETE_MESSAGES['failed']}: unrecognized photo URL")


__all__ = ["FirebaseStorageAdapter"]
