"""Health/Readiness probe endpoints."""

from fastapi import APIRouter

from domains.gallery.core.constants import SERVICE_NAME

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    return {"status": "healthy", "service": SERVICE_NAME}


@router.get("/ready")
async def readiness():
    return {"status": "ready", "service": SERVICE_NAME}
