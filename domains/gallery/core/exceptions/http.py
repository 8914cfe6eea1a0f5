"""Routing and static file exceptions."""

from domains.gallery.core.exceptions.base import GalleryError


class MethodNotAllowedError(GalleryError):
    status_code = 405
    code = "METHOD_NOT_ALLOWED"
    default_message = "Method not allowed"

    def __init__(self, allow: str | None = None) -> None:
        self.allow = allow
        super().__init__()


class NotFoundError(GalleryError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Not found"


class AccessDeniedError(GalleryError):
    """Requested path resolves outside the static root."""

    status_code = 403
    code = "ACCESS_DENIED"
    default_message = "Access denied"


class StaticFileReadError(GalleryError):
    status_code = 500
    code = "FILE_READ_ERROR"
    default_message = "File read error"
