"""Static file lookup confined to a root directory."""

from __future__ import annotations

import os
from pathlib import Path

from domains.gallery.core.constants import (
    STATIC_DEFAULT_MEDIA_TYPE,
    STATIC_INDEX_FILE,
    STATIC_MEDIA_TYPES,
)
from domains.gallery.core.exceptions import (
    AccessDeniedError,
    NotFoundError,
    StaticFileReadError,
)


def resolve_static_path(root: Path, request_path: str) -> Path:
    """Map an already percent-decoded URL path onto a readable file below ``root``.

    Raises AccessDeniedError when the path escapes ``root`` (``..`` segments or
    symlinks), NotFoundError when nothing regular is there or the path cannot
    name a file, and StaticFileReadError when the file exists but cannot be read.
    """
    root = Path(root).resolve()
    relative = request_path.lstrip("/") or STATIC_INDEX_FILE
    try:
        candidate = (root / relative).resolve()
        if candidate != root and not candidate.is_relative_to(root):
            raise AccessDeniedError()
        is_file = candidate.is_file()
    except (ValueError, OSError) as exc:
        # NUL bytes and over-long names cannot name a file.
        raise NotFoundError() from exc
    if not is_file:
        raise NotFoundError()
    if not os.access(candidate, os.R_OK):
        raise StaticFileReadError()
    return candidate


def media_type_for(path: Path) -> str:
    return STATIC_MEDIA_TYPES.get(path.suffix.lower(), STATIC_DEFAULT_MEDIA_TYPE)
