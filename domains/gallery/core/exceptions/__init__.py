"""Core Exceptions."""

from domains.gallery.core.exceptions.base import GalleryError
from domains.gallery.core.exceptions.http import (
    AccessDeniedError,
    MethodNotAllowedError,
    NotFoundError,
    StaticFileReadError,
)
from domains.gallery.core.exceptions.storage import (
    StorageError,
    StorageUnavailableError,
    StorageWriteError,
)
from domains.gallery.core.exceptions.upload import (
    EntityTooLargeError,
    IOFailureError,
    MalformedMultipartError,
    MissingImageFieldError,
    UnsupportedFormatError,
)

__all__ = [
    "AccessDeniedError",
    "EntityTooLargeError",
    "GalleryError",
    "IOFailureError",
    "MalformedMultipartError",
    "MethodNotAllowedError",
    "MissingImageFieldError",
    "NotFoundError",
    "StaticFileReadError",
    "StorageError",
    "StorageUnavailableError",
    "StorageWriteError",
    "UnsupportedFormatError",
]
