"""Gallery service base exception."""


class GalleryError(Exception):
    """Base class for failures that map onto an HTTP error response."""

    status_code = 500
    code = "INTERNAL_ERROR"
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)
