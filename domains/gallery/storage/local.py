"""Local filesystem storage."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from domains.gallery.core.constants import IMAGE_EXTENSIONS, UPLOADS_URL_PREFIX
from domains.gallery.core.exceptions import StorageUnavailableError, StorageWriteError
from domains.gallery.services.sniffer import ImageType
from domains.gallery.storage.base import StorageBackend

logger = logging.getLogger(__name__)


class LocalStorageBackend(StorageBackend):
    """Writes images into a directory served under ``url_prefix``."""

    backend_name = "local"

    def __init__(self, upload_dir: Path, url_prefix: str = UPLOADS_URL_PREFIX) -> None:
        self.upload_dir = Path(upload_dir)
        self.url_prefix = url_prefix.rstrip("/")
        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error(
                "Upload directory could not be created",
                extra={"operation": "init", "upload_dir": str(self.upload_dir)},
                exc_info=exc,
            )
            raise StorageUnavailableError(
                f"Upload directory {self.upload_dir} is not writable."
            ) from exc
        logger.info("Local storage ready", extra={"upload_dir": str(self.upload_dir)})

    def _location_for(self, name: str) -> str:
        return f"{self.url_prefix}/{name}"

    async def store(self, data: bytes, image_type: ImageType, name: str) -> str:
        destination = self.upload_dir / name
        with self._observe("store"):
            try:
                await asyncio.to_thread(destination.write_bytes, data)
            except OSError as exc:
                logger.error(
                    "Failed to write upload",
                    extra={
                        "operation": "store",
                        "file_name": name,
                        "mime_type": image_type.mime_type,
                    },
                    exc_info=exc,
                )
                raise StorageWriteError() from exc
        return self._location_for(name)

    def _scan(self) -> list[str]:
        return sorted(
            entry.name
            for entry in self.upload_dir.iterdir()
            if entry.is_file() and entry.suffix.lower() in IMAGE_EXTENSIONS
        )

    async def list(self) -> list[str]:
        with self._observe("list"):
            try:
                names = await asyncio.to_thread(self._scan)
            except OSError as exc:
                logger.error(
                    "Failed to list uploads",
                    extra={"operation": "list", "upload_dir": str(self.upload_dir)},
                    exc_info=exc,
                )
                raise StorageUnavailableError("Failed to list stored images.") from exc
        return [self._location_for(name) for name in names]
