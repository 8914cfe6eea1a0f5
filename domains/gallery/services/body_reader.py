"""Size-bounded request body accumulation."""

from __future__ import annotations

import logging
from typing import AsyncIterable, Optional

from starlette.requests import ClientDisconnect

from domains.gallery.core.constants import MAX_UPLOAD_SIZE
from domains.gallery.core.exceptions import EntityTooLargeError, IOFailureError

logger = logging.getLogger(__name__)


def check_declared_length(content_length: Optional[str], limit: int = MAX_UPLOAD_SIZE) -> None:
    """Reject a request whose Content-Length already exceeds ``limit``.

    A missing or non-numeric header is left to the streaming check.
    """
    if not content_length:
        return
    try:
        declared = int(content_length)
    except ValueError:
        return
    if declared > limit:
        logger.warning(
            "Declared upload size over limit",
            extra={"operation": "read_body", "declared_size": declared, "limit": limit},
        )
        raise EntityTooLargeError(limit)


async def read_body(chunks: AsyncIterable[bytes], limit: int = MAX_UPLOAD_SIZE) -> bytes:
    """Accumulate ``chunks`` into one buffer of at most ``limit`` bytes.

    Raises EntityTooLargeError as soon as the next chunk would cross the limit;
    nothing after that chunk is read. Raises IOFailureError if the stream
    breaks off, in which case the partial buffer is dropped.
    """
    buffer = bytearray()
    try:
        async for chunk in chunks:
            if len(buffer) + len(chunk) > limit:
                logger.warning(
                    "Streamed upload size over limit",
                    extra={
                        "operation": "read_body",
                        "received": len(buffer) + len(chunk),
                        "limit": limit,
                    },
                )
                raise EntityTooLargeError(limit)
            buffer.extend(chunk)
    except (ClientDisconnect, OSError) as exc:
        logger.warning(
            "Upload stream interrupted",
            extra={"operation": "read_body", "received": len(buffer)},
        )
        raise IOFailureError() from exc
    return bytes(buffer)
