from fastapi import APIRouter

from domains.gallery.api.v1.endpoints import health, static, upload

api_router = APIRouter()
api_router.include_router(upload.router)

health_router = APIRouter()
health_router.include_router(health.router)

static_router = APIRouter()
static_router.include_router(static.router)

__all__ = ["api_router", "health_router", "static_router"]
