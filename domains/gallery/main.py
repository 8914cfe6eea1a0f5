import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from domains.gallery.api.errors import register_exception_handlers
from domains.gallery.api.v1.dependencies import get_storage_backend
from domains.gallery.api.v1.routers import api_router, health_router, static_router
from domains.gallery.core.config import get_settings
from domains.gallery.core.constants import SERVICE_VERSION
from domains.gallery.core.logging import configure_logging
from domains.gallery.metrics import register_metrics

logger = logging.getLogger(__name__)

# Structured logging (ECS JSON format)
configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Pick the storage backend once at startup; the local backend creates its
    # upload directory here.
    provider = app.dependency_overrides.get(get_storage_backend, get_storage_backend)
    storage = provider()
    logger.info("Storage backend selected", extra={"backend": storage.backend_name})
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Image upload, listing and static asset service",
        version=SERVICE_VERSION,
        docs_url="/api/docs",
        openapi_url="/api/openapi.json",
        redoc_url=None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(api_router)
    register_metrics(app)
    # Catch-all static route goes last so it never shadows the API.
    app.include_router(static_router)
    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
