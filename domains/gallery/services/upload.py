from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import AsyncIterable, Optional
from uuid import uuid4

from domains.gallery.core.constants import IMAGE_FIELD_NAME, MAX_UPLOAD_SIZE
from domains.gallery.core.exceptions import (
    GalleryError,
    MalformedMultipartError,
    MissingImageFieldError,
    UnsupportedFormatError,
)
from domains.gallery.metrics import UPLOAD_BYTES, UPLOAD_COUNTER
from domains.gallery.services.body_reader import check_declared_length, read_body
from domains.gallery.services.multipart import (
    extract_boundary,
    parse_multipart,
    select_image_part,
)
from domains.gallery.services.sniffer import ImageType, sniff_image_type
from domains.gallery.storage import StorageBackend

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredImage:
    file_name: str
    path: str
    mime_type: str
    size: int


def generate_object_name(image_type: ImageType) -> str:
    return f"{uuid4()}{image_type.extension}"


class UploadService:
    """Runs one multipart image upload from raw stream to stored object.

    Every failure surfaces as a GalleryError subclass; the API layer turns it
    into the matching status code.
    """

    def __init__(
        self,
        storage: StorageBackend,
        *,
        max_upload_size: int = MAX_UPLOAD_SIZE,
        field_name: str = IMAGE_FIELD_NAME,
    ) -> None:
        self.storage = storage
        self.max_upload_size = max_upload_size
        self.field_name = field_name

    async def upload(
        self,
        *,
        content_type: Optional[str],
        content_length: Optional[str],
        chunks: AsyncIterable[bytes],
    ) -> StoredImage:
        try:
            stored = await self._upload(content_type, content_length, chunks)
        except GalleryError as exc:
            UPLOAD_COUNTER.labels(result=exc.code.lower()).inc()
            raise
        UPLOAD_COUNTER.labels(result="success").inc()
        UPLOAD_BYTES.observe(stored.size)
        return stored

    async def _upload(
        self,
        content_type: Optional[str],
        content_length: Optional[str],
        chunks: AsyncIterable[bytes],
    ) -> StoredImage:
        boundary = extract_boundary(content_type)
        if boundary is None:
            logger.warning(
                "Upload rejected: no multipart boundary",
                extra={"operation": "upload", "content_type": content_type},
            )
            raise MalformedMultipartError()

        check_declared_length(content_length, self.max_upload_size)
        body = await read_body(chunks, self.max_upload_size)

        parts = parse_multipart(body, boundary)
        image_part = select_image_part(parts, self.field_name)
        if image_part is None:
            logger.warning(
                "Upload rejected: image field missing",
                extra={
                    "operation": "upload",
                    "field_name": self.field_name,
                    "part_count": len(parts),
                },
            )
            raise MissingImageFieldError(self.field_name)

        image_type = sniff_image_type(image_part.data)
        if image_type is None:
            logger.warning(
                "Upload rejected: unrecognized image signature",
                extra={
                    "operation": "upload",
                    "client_filename": image_part.filename,
                    "declared_content_type": image_part.declared_content_type,
                    "size": len(image_part.data),
                },
            )
            raise UnsupportedFormatError()

        file_name = generate_object_name(image_type)
        path = await self.storage.store(image_part.data, image_type, file_name)

        logger.info(
            "Image stored",
            extra={
                "operation": "upload",
                "file_name": file_name,
                "client_filename": image_part.filename,
                "mime_type": image_type.mime_type,
                "size": len(image_part.data),
                "backend": self.storage.backend_name,
            },
        )
        return StoredImage(
            file_name=file_name,
            path=path,
            mime_type=image_type.mime_type,
            size=len(image_part.data),
        )

    async def list_images(self) -> list[str]:
        return await self.storage.list()
