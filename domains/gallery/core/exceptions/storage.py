"""Storage backend exceptions."""

from domains.gallery.core.exceptions.base import GalleryError


class StorageError(GalleryError):
    status_code = 500
    code = "STORAGE_ERROR"
    default_message = "Failed to store upload."


class StorageUnavailableError(StorageError):
    """Backend client could not be constructed or reached."""

    code = "STORAGE_UNAVAILABLE"
    default_message = "Storage backend is unavailable."


class StorageWriteError(StorageError):
    """Backend accepted the request but the write failed."""

    code = "STORAGE_WRITE_FAILED"
    default_message = "Failed to store upload."
