"""Gallery service Prometheus metrics"""

from fastapi import FastAPI
from fastapi.responses import Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry(auto_describe=True)
METRICS_PATH = "/metrics/status"


def register_metrics(app: FastAPI) -> None:
    """Register the Prometheus scrape endpoint."""

    @app.get(METRICS_PATH, include_in_schema=False)
    async def metrics_endpoint() -> Response:
        return Response(content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)


# ─────────────────────────────────────────────────────────────────────────────
# Upload pipeline metrics
# ─────────────────────────────────────────────────────────────────────────────

UPLOAD_COUNTER = Counter(
    "gallery_upload_total",
    "Total count of upload attempts by outcome",
    labelnames=["result"],  # success, entity_too_large, missing_image_field, ...
    registry=REGISTRY,
)

UPLOAD_BYTES = Histogram(
    "gallery_upload_bytes",
    "Size of stored images in bytes",
    registry=REGISTRY,
    buckets=(
        1024,
        16 * 1024,
        64 * 1024,
        256 * 1024,
        1024 * 1024,
        2 * 1024 * 1024,
        5 * 1024 * 1024,
        10 * 1024 * 1024,
    ),
)

STORAGE_OPERATION_LATENCY = Histogram(
    "gallery_storage_operation_duration_seconds",
    "Duration of storage backend operations",
    labelnames=["backend", "operation"],
    registry=REGISTRY,
    buckets=(0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)
