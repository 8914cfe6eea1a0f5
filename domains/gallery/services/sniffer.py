"""Image type detection from leading bytes.

Client supplied filenames and Content-Type headers are never consulted; the
stored extension comes from the signature alone.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ImageType:
    mime_type: str
    extension: str


PNG = ImageType("image/png", ".png")
JPEG = ImageType("image/jpeg", ".jpg")
GIF = ImageType("image/gif", ".gif")
WEBP = ImageType("image/webp", ".webp")

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
JPEG_SIGNATURE = b"\xff\xd8"
GIF_SIGNATURES = (b"GIF87a", b"GIF89a")
RIFF_SIGNATURE = b"RIFF"
WEBP_SIGNATURE = b"WEBP"
WEBP_HEADER_LENGTH = 12


def _is_webp(data: bytes) -> bool:
    return (
        len(data) >= WEBP_HEADER_LENGTH
        and data[0:4] == RIFF_SIGNATURE
        and data[8:12] == WEBP_SIGNATURE
    )


def sniff_image_type(data: bytes) -> Optional[ImageType]:
    """Classify ``data`` as PNG, JPEG, GIF or WebP, or return None.

    A buffer shorter than a format's signature never matches that format.
    """
    if data.startswith(PNG_SIGNATURE):
        return PNG
    if data.startswith(JPEG_SIGNATURE):
        return JPEG
    if data.startswith(GIF_SIGNATURES):
        return GIF
    if _is_webp(data):
        return WEBP
    return None
