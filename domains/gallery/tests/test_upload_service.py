"""Unit tests for UploadService."""

import re
from unittest.mock import AsyncMock, MagicMock

import pytest

from conftest import (
    BOUNDARY,
    GIF_BYTES,
    JPEG_BYTES,
    PNG_BYTES,
    WEBP_BYTES,
    encode_multipart,
    encode_part,
    iterate_chunks,
)
from domains.gallery.core.exceptions import (
    EntityTooLargeError,
    MalformedMultipartError,
    MissingImageFieldError,
    StorageWriteError,
    UnsupportedFormatError,
)
from domains.gallery.metrics import REGISTRY
from domains.gallery.services.sniffer import JPEG
from domains.gallery.services.upload import UploadService, generate_object_name

CONTENT_TYPE = f"multipart/form-data; boundary={BOUNDARY}"
UUID_NAME = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}\.\w+$")


async def _never_read():
    raise AssertionError("body must not be read")
    yield b""  # pragma: no cover


@pytest.fixture
def service(local_storage):
    return UploadService(local_storage)


@pytest.fixture
def mock_storage():
    storage = MagicMock()
    storage.backend_name = "mock"
    storage.store = AsyncMock(side_effect=lambda data, image_type, name: f"/uploads/{name}")
    storage.list = AsyncMock(return_value=["/uploads/a.png"])
    return storage


class TestUpload:
    @pytest.mark.asyncio
    async def test_truncated_jpeg_is_stored_with_jpg_extension(self, service, local_storage):
        body = encode_multipart([encode_part(JPEG_BYTES, filename="photo.jpg")])

        stored = await service.upload(
            content_type=CONTENT_TYPE,
            content_length=str(len(body)),
            chunks=iterate_chunks(body),
        )

        assert UUID_NAME.match(stored.file_name)
        assert stored.file_name.endswith(".jpg")
        assert stored.path == f"/uploads/{stored.file_name}"
        assert stored.mime_type == "image/jpeg"
        assert stored.size == 10
        assert (local_storage.upload_dir / stored.file_name).read_bytes() == JPEG_BYTES

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("data", "extension"),
        [(PNG_BYTES, ".png"), (JPEG_BYTES, ".jpg"), (GIF_BYTES, ".gif"), (WEBP_BYTES, ".webp")],
    )
    async def test_extension_comes_from_signature_not_client(self, service, data, extension):
        body = encode_multipart(
            [encode_part(data, filename="evil.html", content_type="text/html")]
        )

        stored = await service.upload(
            content_type=CONTENT_TYPE, content_length=None, chunks=iterate_chunks(body)
        )

        assert stored.file_name.endswith(extension)
        assert stored.path.endswith(extension)

    @pytest.mark.asyncio
    async def test_picks_image_field_among_other_fields(self, mock_storage):
        service = UploadService(mock_storage)
        body = encode_multipart(
            [
                encode_part(b"caption", name="title", filename=None, content_type=None),
                encode_part(GIF_BYTES, name="thumbnail", filename="t.gif"),
                encode_part(PNG_BYTES, filename="drawing.png"),
            ]
        )

        await service.upload(content_type=CONTENT_TYPE, content_length=None, chunks=iterate_chunks(body))

        data, image_type, name = mock_storage.store.await_args.args
        assert data == PNG_BYTES
        assert image_type.mime_type == "image/png"
        assert name.endswith(".png")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content_type", [None, "", "multipart/form-data", "application/json"])
    async def test_missing_boundary_rejected_before_reading(self, service, content_type):
        with pytest.raises(MalformedMultipartError) as exc_info:
            await service.upload(content_type=content_type, content_length=None, chunks=_never_read())

        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_declared_size_over_limit_rejected_before_reading(self, service, local_storage):
        with pytest.raises(EntityTooLargeError):
            await service.upload(
                content_type=CONTENT_TYPE,
                content_length=str(10 * 1024 * 1024 + 1),
                chunks=_never_read(),
            )

        assert list(local_storage.upload_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_streamed_size_over_limit_writes_nothing(self, mock_storage):
        service = UploadService(mock_storage, max_upload_size=1024)
        body = encode_multipart([encode_part(PNG_BYTES + bytes(2048))])

        with pytest.raises(EntityTooLargeError):
            await service.upload(
                content_type=CONTENT_TYPE,
                content_length=None,
                chunks=iterate_chunks(body, chunk_size=256),
            )

        mock_storage.store.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_filename_is_missing_field(self, service):
        body = encode_multipart([encode_part(PNG_BYTES, filename="")])

        with pytest.raises(MissingImageFieldError) as exc_info:
            await service.upload(content_type=CONTENT_TYPE, content_length=None, chunks=iterate_chunks(body))

        assert exc_info.value.message == 'No image file provided in field "image".'

    @pytest.mark.asyncio
    async def test_boundary_mismatch_is_missing_field(self, service):
        body = encode_multipart([encode_part(PNG_BYTES)], boundary="other-boundary")

        with pytest.raises(MissingImageFieldError):
            await service.upload(content_type=CONTENT_TYPE, content_length=None, chunks=iterate_chunks(body))

    @pytest.mark.asyncio
    async def test_declared_image_type_does_not_rescue_unknown_bytes(self, mock_storage):
        service = UploadService(mock_storage)
        body = encode_multipart([encode_part(b"<svg></svg>", filename="a.png", content_type="image/png")])

        with pytest.raises(UnsupportedFormatError):
            await service.upload(content_type=CONTENT_TYPE, content_length=None, chunks=iterate_chunks(body))

        mock_storage.store.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_storage_failure_propagates(self, mock_storage):
        mock_storage.store = AsyncMock(side_effect=StorageWriteError())
        service = UploadService(mock_storage)
        body = encode_multipart([encode_part(PNG_BYTES)])

        with pytest.raises(StorageWriteError):
            await service.upload(content_type=CONTENT_TYPE, content_length=None, chunks=iterate_chunks(body))

        mock_storage.store.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_outcomes_are_counted(self, mock_storage):
        service = UploadService(mock_storage)
        body = encode_multipart([encode_part(PNG_BYTES)])

        def sample(result):
            return REGISTRY.get_sample_value("gallery_upload_total", {"result": result}) or 0.0

        success_before = sample("success")
        missing_before = sample("missing_image_field")

        await service.upload(content_type=CONTENT_TYPE, content_length=None, chunks=iterate_chunks(body))
        with pytest.raises(MissingImageFieldError):
            await service.upload(
                content_type=CONTENT_TYPE,
                content_length=None,
                chunks=iterate_chunks(encode_multipart([])),
            )

        assert sample("success") == success_before + 1
        assert sample("missing_image_field") == missing_before + 1


class TestListImages:
    @pytest.mark.asyncio
    async def test_delegates_to_backend(self, mock_storage):
        service = UploadService(mock_storage)

        assert await service.list_images() == ["/uploads/a.png"]
        mock_storage.list.assert_awaited_once()


def test_generated_names_are_unique():
    names = {generate_object_name(JPEG) for _ in range(1000)}

    assert len(names) == 1000
    assert all(UUID_NAME.match(name) for name in names)
