"""Storage backend interface."""

from __future__ import annotations

import abc
from contextlib import contextmanager
from typing import Iterator

from domains.gallery.metrics import STORAGE_OPERATION_LATENCY
from domains.gallery.services.sniffer import ImageType


class StorageBackend(abc.ABC):
    """Persists validated images and lists what has been stored."""

    backend_name = "base"

    @abc.abstractmethod
    async def store(self, data: bytes, image_type: ImageType, name: str) -> str:
        """Persist ``data`` under ``name`` and return its public location."""

    @abc.abstractmethod
    async def list(self) -> list[str]:
        """Return the public locations of stored images."""

    @contextmanager
    def _observe(self, operation: str) -> Iterator[None]:
        with STORAGE_OPERATION_LATENCY.labels(self.backend_name, operation).time():
            yield
