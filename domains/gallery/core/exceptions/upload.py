"""Upload pipeline exceptions."""

from domains.gallery.core.constants import IMAGE_FIELD_NAME, MAX_UPLOAD_SIZE
from domains.gallery.core.exceptions.base import GalleryError


class EntityTooLargeError(GalleryError):
    """Request body exceeded the upload ceiling."""

    status_code = 413
    code = "ENTITY_TOO_LARGE"

    def __init__(self, limit: int = MAX_UPLOAD_SIZE) -> None:
        self.limit = limit
        megabytes = limit / (1024 * 1024)
        size = f"{megabytes:g}MB" if megabytes >= 1 else f"{limit} bytes"
        super().__init__(f"Upload too large. Maximum size is {size}.")


class MalformedMultipartError(GalleryError):
    """Content-Type carries no multipart boundary."""

    status_code = 400
    code = "MALFORMED_MULTIPART"
    default_message = "Multipart form data with a boundary is required."


class MissingImageFieldError(GalleryError):
    """No part named after the image field with a non-empty filename."""

    status_code = 400
    code = "MISSING_IMAGE_FIELD"

    def __init__(self, field_name: str = IMAGE_FIELD_NAME) -> None:
        self.field_name = field_name
        super().__init__(f'No image file provided in field "{field_name}".')


class UnsupportedFormatError(GalleryError):
    """Payload bytes match none of the accepted image signatures."""

    status_code = 400
    code = "UNSUPPORTED_FORMAT"
    default_message = "Only PNG, JPEG, GIF and WebP images are allowed."


class IOFailureError(GalleryError):
    """Upload stream broke off before it was fully received."""

    status_code = 500
    code = "IO_FAILURE"
    default_message = "Failed to read upload stream."
