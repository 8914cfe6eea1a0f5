"""Dependency injection for Gallery API."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from domains.gallery.core.config import Settings, get_settings
from domains.gallery.services.upload import UploadService
from domains.gallery.storage import StorageBackend, build_storage_backend


@lru_cache
def get_storage_backend() -> StorageBackend:
    """Build the configured backend once per process."""
    return build_storage_backend(get_settings())


def get_upload_service(
    storage: StorageBackend = Depends(get_storage_backend),
    settings: Settings = Depends(get_settings),
) -> UploadService:
    return UploadService(storage, max_upload_size=settings.max_upload_size)
