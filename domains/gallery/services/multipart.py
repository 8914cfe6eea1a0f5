"""multipart/form-data parsing.

The parser is lenient: it recovers whatever well-formed parts it
can and stops at the first structural problem instead of raising. Validation
of the recovered parts is the caller's job (see ``select_image_part``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional

from domains.gallery.core.constants import IMAGE_FIELD_NAME

CRLF = b"\r\n"
LF = b"\n"
HEADER_SEPARATOR = b"\r\n\r\n"

_PARAM_RE = re.compile(
    r"""
    ;\s*
    (?P<key>[^\s;=]+)
    \s*=\s*
    (?P<value>"(?:[^"\\]|\\.)*"|[^;]*)
    """,
    re.VERBOSE,
)
_ESCAPE_RE = re.compile(r"\\(.)")


@dataclass(frozen=True)
class RawPart:
    headers: str
    data: bytes


@dataclass(frozen=True)
class ImagePart:
    """A part carrying a file for the image field."""

    part: RawPart
    field_name: str
    filename: str
    declared_content_type: Optional[str] = None

    @property
    def data(self) -> bytes:
        return self.part.data


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return _ESCAPE_RE.sub(r"\1", value[1:-1])
    return value


def parse_header_params(value: str) -> tuple[str, dict[str, str]]:
    """Split a header value into its main token and attribute mapping.

    >>> parse_header_params('form-data; name="image"; filename="a.png"')
    ('form-data', {'name': 'image', 'filename': 'a.png'})

    Attribute names are lower-cased, values are unquoted. The first
    occurrence of an attribute wins.
    """
    main, _, rest = value.partition(";")
    params: dict[str, str] = {}
    for match in _PARAM_RE.finditer(";" + rest):
        key = match.group("key").lower()
        params.setdefault(key, _unquote(match.group("value")))
    return main.strip().lower(), params


def parse_part_headers(block: str) -> dict[str, str]:
    """Map lower-cased header names of a part to their raw values."""
    headers: dict[str, str] = {}
    for line in block.splitlines():
        name, sep, value = line.partition(":")
        if not sep:
            continue
        headers.setdefault(name.strip().lower(), value.strip())
    return headers


def extract_boundary(content_type: Optional[str]) -> Optional[str]:
    """Return the ``boundary`` parameter of a request Content-Type, if any."""
    if not content_type:
        return None
    _, params = parse_header_params(content_type)
    return params.get("boundary") or None


def _strip_line_terminator(body: bytes, start: int, end: int) -> int:
    # Only an actual terminator is removed; data ending flush against the
    # delimiter is kept whole.
    if end - start >= 2 and body[end - 2 : end] == CRLF:
        return end - 2
    if end - start >= 1 and body[end - 1 : end] == LF:
        return end - 1
    return end


def parse_multipart(body: bytes, boundary: str) -> list[RawPart]:
    """Split ``body`` into parts delimited by ``--boundary``.

    Parts are returned in body order. Parsing stops after the part closed by
    ``--boundary--``, or early when no further delimiter or header separator
    can be found; the parts recovered until then are returned.
    """
    if not boundary:
        return []

    delimiter = b"--" + boundary.encode("utf-8")
    closing = delimiter + b"--"
    parts: list[RawPart] = []

    position = body.find(delimiter)
    while position != -1:
        if body.startswith(closing, position):
            break

        header_start = position + len(delimiter)
        if body.startswith(CRLF, header_start):
            header_start += len(CRLF)

        header_end = body.find(HEADER_SEPARATOR, header_start)
        if header_end == -1:
            break

        data_start = header_end + len(HEADER_SEPARATOR)
        next_delimiter = body.find(delimiter, data_start)
        if next_delimiter == -1:
            break

        data_end = _strip_line_terminator(body, data_start, next_delimiter)
        parts.append(
            RawPart(
                headers=body[header_start:header_end].decode("utf-8", errors="replace"),
                data=body[data_start:data_end],
            )
        )
        position = next_delimiter

    return parts


def select_image_part(
    parts: Iterable[RawPart], field_name: str = IMAGE_FIELD_NAME
) -> Optional[ImagePart]:
    """Return the first part holding a named file for ``field_name``."""
    for part in parts:
        headers = parse_part_headers(part.headers)
        disposition = headers.get("content-disposition")
        if disposition is None:
            continue
        kind, params = parse_header_params(disposition)
        if kind != "form-data" or params.get("name") != field_name:
            continue
        filename = params.get("filename")
        if not filename:
            continue
        return ImagePart(
            part=part,
            field_name=field_name,
            filename=filename,
            declared_content_type=headers.get("content-type"),
        )
    return None
