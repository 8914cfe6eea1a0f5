"""S3 object storage.

The boto3 client is built on first use so that deployments storing on local
disk never touch the SDK. Construction happens at most once per backend; a
failed construction is remembered and reported to every later caller.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional
from urllib.parse import quote

from domains.gallery.core.constants import REMOTE_LIST_PAGE_SIZE
from domains.gallery.core.exceptions import StorageUnavailableError, StorageWriteError
from domains.gallery.services.sniffer import ImageType
from domains.gallery.storage.base import StorageBackend

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], Any]


def _error_code(exc: Exception) -> Optional[str]:
    response = getattr(exc, "response", None)
    if isinstance(response, dict):
        return response.get("Error", {}).get("Code")
    return None


class S3StorageBackend(StorageBackend):
    backend_name = "s3"

    def __init__(
        self,
        bucket: str,
        region: str,
        *,
        public_base_url: Optional[str] = None,
        object_acl: Optional[str] = None,
        client_factory: Optional[ClientFactory] = None,
    ) -> None:
        self.bucket = bucket
        self.region = region
        self.base_url = (
            public_base_url or f"https://{bucket}.s3.{region}.amazonaws.com"
        ).rstrip("/")
        self.object_acl = object_acl
        self._client_factory = client_factory or self._create_boto3_client
        self._client: Any = None
        self._client_error: Optional[StorageUnavailableError] = None
        self._client_lock = asyncio.Lock()

    def _create_boto3_client(self) -> Any:
        try:
            import boto3
        except ImportError as exc:
            raise StorageUnavailableError(
                "S3 storage requires boto3. Install it or unset the bucket to store locally."
            ) from exc
        return boto3.client("s3", region_name=self.region)

    async def _get_client(self) -> Any:
        if self._client is not None:
            return self._client

        async with self._client_lock:
            if self._client is None and self._client_error is None:
                try:
                    self._client = await asyncio.to_thread(self._client_factory)
                except StorageUnavailableError as exc:
                    self._client_error = exc
                except Exception as exc:
                    self._client_error = StorageUnavailableError(
                        f"Could not create S3 client for bucket '{self.bucket}': {exc}"
                    )
                    self._client_error.__cause__ = exc

                if self._client_error is not None:
                    logger.error(
                        "S3 client initialization failed",
                        extra={"bucket": self.bucket, "region": self.region},
                        exc_info=self._client_error,
                    )
                else:
                    logger.info(
                        "S3 client initialized",
                        extra={"bucket": self.bucket, "region": self.region},
                    )

        if self._client_error is not None:
            raise StorageUnavailableError(self._client_error.message) from self._client_error
        return self._client

    def _location_for(self, key: str) -> str:
        return f"{self.base_url}/{quote(key, safe='')}"

    async def store(self, data: bytes, image_type: ImageType, name: str) -> str:
        client = await self._get_client()
        params: dict[str, Any] = {
            "Bucket": self.bucket,
            "Key": name,
            "Body": data,
            "ContentType": image_type.mime_type,
        }
        if self.object_acl:
            params["ACL"] = self.object_acl

        with self._observe("store"):
            try:
                await asyncio.to_thread(client.put_object, **params)
            except Exception as exc:
                logger.error(
                    "Failed to put object",
                    extra={
                        "operation": "store",
                        "bucket": self.bucket,
                        "file_name": name,
                        "error_code": _error_code(exc),
                    },
                    exc_info=exc,
                )
                raise StorageWriteError() from exc

        return self._location_for(name)

    async def list(self) -> list[str]:
        client = await self._get_client()
        with self._observe("list"):
            try:
                response = await asyncio.to_thread(
                    client.list_objects_v2,
                    Bucket=self.bucket,
                    MaxKeys=REMOTE_LIST_PAGE_SIZE,
                )
            except Exception as exc:
                logger.error(
                    "Failed to list objects",
                    extra={
                        "operation": "list",
                        "bucket": self.bucket,
                        "error_code": _error_code(exc),
                    },
                    exc_info=exc,
                )
                raise StorageUnavailableError("Failed to list stored images.") from exc

        contents = response.get("Contents") or []
        return [self._location_for(item["Key"]) for item in contents]
