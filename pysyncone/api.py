"""API client for Supabase Storage."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .exceptions import (
    SynconeConfigError,
    SynconeDownloadError,
    SynconeInvalidResponseError,
    SynconeNetworkError,
    SynconeUploadError,
)
from .models import RemoteObjectMeta

logger = logging.getLogger(__name__)


class SupabaseStorageClient:
    """Client for the object endpoints of a single Supabase Storage bucket.

    Requests are not retried. Any non-2xx response or transport failure
    raises immediately.
    """

    def __init__(
        self,
        url: str,
        key: str,
        bucket: str,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize storage client.

        Args:
            url: Supabase project URL (e.g. https://xxx.supabase.co)
            key: API key, sent both as bearer token and as ``apikey`` header
            bucket: Bucket holding the archives
            timeout: Request timeout in seconds (httpx default if not provided)
            transport: Optional httpx transport (used by tests)
        """
        if not url or not key or not bucket:
            raise SynconeConfigError("Supabase URL, key and bucket are required")

        self.url = url.rstrip("/")
        self.key = key
        self.bucket = bucket
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.Client | None = None

    def __enter__(self) -> SupabaseStorageClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _get_client(self) -> httpx.Client:
        """Get or create the httpx client."""
        if self._client is None or self._client.is_closed:
            kwargs: dict[str, Any] = {
                "headers": {
                    "Authorization": f"Bearer {self.key}",
                    "apikey": self.key,
                },
            }
            if self.timeout is not None:
                kwargs["timeout"] = httpx.Timeout(self.timeout)
            if self._transport is not None:
                kwargs["transport"] = self._transport
            self._client = httpx.Client(**kwargs)
        return self._client

    def close(self) -> None:
        """Close the client and release connections."""
        if self._client is not None and not self._client.is_closed:
            self._client.close()
            self._client = None

    def object_url(self, object_name: str) -> str:
        """URL of an object in the bucket."""
        return f"{self.url}/storage/v1/object/{self.bucket}/{object_name}"

    def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request, mapping transport failures to SynconeNetworkError."""
        logger.debug(f"{method} {url}")
        try:
            response = self._get_client().request(method, url, **kwargs)
        except httpx.RequestError as e:
            raise SynconeNetworkError(f"Network error: {e}") from e
        logger.debug(f"{method} {url} -> {response.status_code}")
        return response

    # =========================
    # Object Operations
    # =========================

    def upload(self, object_name: str, data: bytes) -> None:
        """Upload an archive, replacing any existing object of the same name.

        Args:
            object_name: Name of the object (e.g. "Save.zip")
            data: Zip archive bytes

        Raises:
            SynconeUploadError: If the server rejects the upload
            SynconeNetworkError: If the request cannot be sent
        """
        response = self._send(
            "POST",
            self.object_url(object_name),
            content=data,
            headers={"Content-Type": "application/zip", "x-upsert": "true"},
        )
        if not response.is_success:
            body = response.text
            raise SynconeUploadError(
                f"Upload failed: {response.status_code} {body}",
                status_code=response.status_code,
                body=body,
            )

    def download(self, object_name: str) -> bytes:
        """Download an object's bytes.

        Args:
            object_name: Name of the object (e.g. "Save.zip")

        Returns:
            The archive bytes

        Raises:
            SynconeDownloadError: If the server does not return the object
            SynconeNetworkError: If the request cannot be sent
        """
        response = self._send("GET", self.object_url(object_name))
        if not response.is_success:
            raise SynconeDownloadError(
                f"Download failed: {response.status_code}",
                status_code=response.status_code,
            )
        return response.content

    def list_objects(self) -> list[RemoteObjectMeta]:
        """List all objects at the bucket root.

        Returns:
            Object names with their last-modified timestamps

        Raises:
            SynconeNetworkError: If listing fails
            SynconeInvalidResponseError: If the body is not a JSON array
        """
        response = self._send(
            "POST",
            f"{self.url}/storage/v1/object/list/{self.bucket}",
            json={"prefix": ""},
        )
        if not response.is_success:
            raise SynconeNetworkError(
                f"List failed: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            records = response.json()
        except ValueError as e:
            raise SynconeInvalidResponseError(
                "Invalid JSON response from storage listing"
            ) from e
        if not isinstance(records, list):
            raise SynconeInvalidResponseError(
                f"Unexpected listing response: {type(records).__name__}"
            )

        return [
            RemoteObjectMeta.from_dict(record)
            for record in records
            if isinstance(record, dict)
        ]
