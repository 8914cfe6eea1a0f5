"""Storage backends and backend selection."""

from domains.gallery.core.config import Settings
from domains.gallery.storage.base import StorageBackend
from domains.gallery.storage.local import LocalStorageBackend
from domains.gallery.storage.s3 import S3StorageBackend


def uses_remote_storage(settings: Settings) -> bool:
    """Object storage is selected by the presence of a bucket name."""
    return bool(settings.s3_bucket)


def build_storage_backend(settings: Settings) -> StorageBackend:
    if uses_remote_storage(settings):
        return S3StorageBackend(
            settings.s3_bucket,
            settings.aws_region,
            public_base_url=settings.public_base_url,
            object_acl=settings.s3_object_acl,
        )
    return LocalStorageBackend(settings.upload_dir)


__all__ = [
    "LocalStorageBackend",
    "S3StorageBackend",
    "StorageBackend",
    "build_storage_backend",
    "uses_remote_storage",
]
