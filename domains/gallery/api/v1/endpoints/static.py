"""Static asset serving (catch-all, must be mounted last).

Only GET and HEAD are routed here; any other method on an unowned path is
answered with 405 by the router.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from domains.gallery.core.config import Settings, get_settings
from domains.gallery.core.constants import STATIC_ALLOWED_METHODS, STATIC_ROUTE_NAME
from domains.gallery.services.static_files import media_type_for, resolve_static_path

router = APIRouter(tags=["static"])


@router.api_route(
    "/{path:path}",
    methods=list(STATIC_ALLOWED_METHODS),
    name=STATIC_ROUTE_NAME,
    include_in_schema=False,
)
async def serve_static(path: str, settings: Settings = Depends(get_settings)):
    file_path = resolve_static_path(settings.static_root, path)
    return FileResponse(file_path, media_type=media_type_for(file_path))
