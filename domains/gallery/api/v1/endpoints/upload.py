from fastapi import APIRouter, Depends, Request, status

from domains.gallery.api.v1.dependencies import get_upload_service
from domains.gallery.core.constants import UPLOAD_GUARD_ROUTE_NAME
from domains.gallery.core.exceptions import MethodNotAllowedError
from domains.gallery.schemas.upload import ErrorResponse, ImageUploadResponse
from domains.gallery.services.upload import UploadService

router = APIRouter(tags=["images"])


@router.post(
    "/upload",
    status_code=status.HTTP_201_CREATED,
    response_model=ImageUploadResponse,
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Upload an image as multipart/form-data",
)
async def upload_image(
    request: Request,
    service: UploadService = Depends(get_upload_service),
):
    # The body is read straight off the ASGI stream so the size ceiling
    # applies before anything is buffered.
    stored = await service.upload(
        content_type=request.headers.get("content-type"),
        content_length=request.headers.get("content-length"),
        chunks=request.stream(),
    )
    return ImageUploadResponse(file_name=stored.file_name, path=stored.path)


# GET and HEAD would otherwise reach the static catch-all.
@router.api_route(
    "/upload",
    methods=["GET", "HEAD"],
    name=UPLOAD_GUARD_ROUTE_NAME,
    include_in_schema=False,
)
async def upload_method_guard():
    raise MethodNotAllowedError()


@router.api_route(
    "/images",
    methods=["GET", "HEAD"],
    response_model=list[str],
    summary="List stored image locations",
)
async def list_images(service: UploadService = Depends(get_upload_service)):
    return await service.list_images()
