"""Pytest fixtures for Gallery service tests."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import AsyncIterator, Iterable, Optional

import pytest

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).resolve().parents[3]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

BOUNDARY = "----GalleryFormBoundary7MA4YWxkTrZu0gW"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR" + bytes(range(32))
JPEG_BYTES = b"\xff\xd8" + bytes(8)
GIF_BYTES = b"GIF89a" + b"\x01\x00\x01\x00\x80\x00\x00"
WEBP_BYTES = b"RIFF" + b"\x24\x00\x00\x00" + b"WEBP" + b"VP8 " + bytes(8)


def encode_part(
    data: bytes,
    *,
    name: str = "image",
    filename: Optional[str] = "drawing.png",
    content_type: Optional[str] = "image/png",
) -> tuple[str, bytes]:
    disposition = f'Content-Disposition: form-data; name="{name}"'
    if filename is not None:
        disposition += f'; filename="{filename}"'
    headers = [disposition]
    if content_type is not None:
        headers.append(f"Content-Type: {content_type}")
    return "\r\n".join(headers), data


def encode_multipart(parts: Iterable[tuple[str, bytes]], boundary: str = BOUNDARY) -> bytes:
    delimiter = f"--{boundary}".encode()
    body = b""
    for headers, data in parts:
        body += delimiter + b"\r\n" + headers.encode() + b"\r\n\r\n" + data + b"\r\n"
    return body + delimiter + b"--\r\n"


async def iterate_chunks(data: bytes, chunk_size: int = 64 * 1024) -> AsyncIterator[bytes]:
    for offset in range(0, len(data), chunk_size):
        yield data[offset : offset + chunk_size]


@pytest.fixture
def static_root(tmp_path: Path) -> Path:
    root = tmp_path / "public"
    root.mkdir()
    (root / "index.html").write_text("<!doctype html><title>sketch</title>", encoding="utf-8")
    (root / "sketch.js").write_text("function setup() {}", encoding="utf-8")
    return root


@pytest.fixture
def test_settings(static_root: Path):
    from domains.gallery.core.config import Settings

    return Settings(static_root=static_root, s3_bucket=None)


@pytest.fixture
def local_storage(test_settings):
    from domains.gallery.storage import LocalStorageBackend

    return LocalStorageBackend(test_settings.upload_dir)


@pytest.fixture
def client(test_settings, local_storage):
    """FastAPI TestClient wired to a temporary static root."""
    from fastapi.testclient import TestClient

    from domains.gallery.api.v1.dependencies import get_storage_backend
    from domains.gallery.core.config import get_settings
    from domains.gallery.main import app

    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_storage_backend] = lambda: local_storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
