"""Unit tests for static path resolution."""

import os

import pytest

from domains.gallery.core.exceptions import (
    AccessDeniedError,
    NotFoundError,
    StaticFileReadError,
)
from domains.gallery.services.static_files import media_type_for, resolve_static_path


class TestResolveStaticPath:
    def test_empty_path_maps_to_index(self, static_root):
        assert resolve_static_path(static_root, "/") == (static_root / "index.html").resolve()
        assert resolve_static_path(static_root, "") == (static_root / "index.html").resolve()

    def test_nested_file(self, static_root):
        (static_root / "assets").mkdir()
        (static_root / "assets" / "app.css").write_text("body {}")

        resolved = resolve_static_path(static_root, "/assets/app.css")

        assert resolved.read_text() == "body {}"

    @pytest.mark.parametrize(
        "request_path",
        ["/../secret.txt", "../secret.txt", "/uploads/../../secret.txt"],
    )
    def test_parent_traversal_is_denied(self, static_root, request_path):
        (static_root.parent / "secret.txt").write_text("nope")

        with pytest.raises(AccessDeniedError) as exc_info:
            resolve_static_path(static_root, request_path)

        assert exc_info.value.status_code == 403

    def test_traversal_is_denied_even_when_target_is_missing(self, static_root):
        with pytest.raises(AccessDeniedError):
            resolve_static_path(static_root, "/../../does/not/exist")

    def test_dotdot_that_stays_inside_root_is_allowed(self, static_root):
        resolved = resolve_static_path(static_root, "/uploads/../sketch.js")

        assert resolved.name == "sketch.js"

    def test_symlink_out_of_root_is_denied(self, static_root):
        outside = static_root.parent / "outside.txt"
        outside.write_text("outside")
        (static_root / "link.txt").symlink_to(outside)

        with pytest.raises(AccessDeniedError):
            resolve_static_path(static_root, "/link.txt")

    def test_missing_file(self, static_root):
        with pytest.raises(NotFoundError):
            resolve_static_path(static_root, "/nothing-here.png")

    @pytest.mark.parametrize("request_path", ["/a\x00b.png", "/\x00", "/" + "x" * 4096])
    def test_unnameable_path_is_not_found(self, static_root, request_path):
        with pytest.raises(NotFoundError):
            resolve_static_path(static_root, request_path)

    def test_directory_is_not_found(self, static_root):
        (static_root / "uploads").mkdir()

        with pytest.raises(NotFoundError):
            resolve_static_path(static_root, "/uploads")

    def test_unreadable_file(self, static_root, monkeypatch):
        monkeypatch.setattr(os, "access", lambda path, mode: False)

        with pytest.raises(StaticFileReadError) as exc_info:
            resolve_static_path(static_root, "/sketch.js")

        assert exc_info.value.message == "File read error"


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("index.html", "text/html; charset=utf-8"),
        ("sketch.JS", "application/javascript; charset=utf-8"),
        ("photo.jpeg", "image/jpeg"),
        ("clip.webp", "image/webp"),
        ("archive.tar.gz", "application/octet-stream"),
        ("README", "application/octet-stream"),
    ],
)
def test_media_type_for(tmp_path, name, expected):
    assert media_type_for(tmp_path / name) == expected
