"""Exception Handlers.

Turns domain/service exceptions into JSON error responses. Internal details
stay in the logs; clients only see ``{"error", "code"}``.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.routing import Route

from domains.gallery.core.constants import (
    HTTP_METHOD_ORDER,
    STATIC_ALLOWED_METHODS,
    STATIC_ROUTE_NAME,
    UPLOAD_GUARD_ROUTE_NAME,
)
from domains.gallery.core.exceptions import (
    EntityTooLargeError,
    GalleryError,
    MethodNotAllowedError,
)

logger = logging.getLogger(__name__)

_FALLBACK_ROUTE_NAMES = frozenset({STATIC_ROUTE_NAME, UPLOAD_GUARD_ROUTE_NAME})


def allowed_methods(request: Request) -> str:
    """Build the Allow value for the request path from the app's routes.

    Catch-all routes are skipped; a path no other route owns is a static
    path and allows GET and HEAD.
    """
    path = request.scope["path"]
    methods: set[str] = set()
    for route in request.app.routes:
        if not isinstance(route, Route) or route.name in _FALLBACK_ROUTE_NAMES:
            continue
        if route.methods and route.path_regex.match(path):
            methods.update(route.methods)
    if not methods:
        methods.update(STATIC_ALLOWED_METHODS)

    ordered = [method for method in HTTP_METHOD_ORDER if method in methods]
    return ", ".join(ordered + sorted(methods.difference(HTTP_METHOD_ORDER)))


def _error_response(exc: GalleryError, headers: Optional[dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "code": exc.code},
        headers=headers,
    )


def _log_failure(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    cause: Optional[BaseException] = None,
) -> None:
    extra = {
        "code": code,
        "status_code": status_code,
        "method": request.method,
        "path": request.url.path,
    }
    if status_code >= 500:
        logger.error(message, extra=extra, exc_info=cause)
    else:
        logger.info(message, extra=extra)


def _method_not_allowed(request: Request, exc: MethodNotAllowedError) -> JSONResponse:
    allow = exc.allow or allowed_methods(request)
    _log_failure(request, exc.status_code, exc.code, exc.message)
    return _error_response(exc, headers={"Allow": allow})


def register_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers."""

    @app.exception_handler(EntityTooLargeError)
    async def entity_too_large_handler(request: Request, exc: EntityTooLargeError):
        _log_failure(request, exc.status_code, exc.code, exc.message)
        # Close instead of draining the rest of an oversized body.
        return _error_response(exc, headers={"Connection": "close"})

    @app.exception_handler(MethodNotAllowedError)
    async def method_not_allowed_handler(request: Request, exc: MethodNotAllowedError):
        return _method_not_allowed(request, exc)

    @app.exception_handler(GalleryError)
    async def gallery_error_handler(request: Request, exc: GalleryError):
        _log_failure(request, exc.status_code, exc.code, exc.message, exc.__cause__ or exc)
        return _error_response(exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # The router raises 405 for methods no route accepts on a path.
        if exc.status_code == 405:
            return _method_not_allowed(request, MethodNotAllowedError())

        code = f"HTTP_{exc.status_code}"
        _log_failure(request, exc.status_code, code, str(exc.detail))
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail), "code": code},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled error",
            extra={"method": request.method, "path": request.url.path},
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "code": "INTERNAL_ERROR"},
        )
