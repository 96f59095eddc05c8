from __future__ import annotations

from fastapi import APIRouter, Depends, File, Request, Response, UploadFile, status
from starlette.datastructures import UploadFile as StarletteUploadFile

from app.api.dependencies import UnitOfWork, get_current_user, get_uow
from app.api.dependencies.content_payload import to_uploaded_file
from app.api.error_mapping import to_http_error
from app.api.openapi_responses import (
    media_error_responses,
    merge_responses,
    not_found_response,
    rate_limited_response,
    unauthorized_response,
    validation_error_response,
)
from app.api.schemas.base import ApiResponse
from app.api.schemas.file_response_models import FileResponse
from app.core.rate_limit import UPLOAD_RATE_LIMIT, limit
from app.db.models.user import User
from app.media.codec import MediaError, media_response
from app.media.schemas import UploadedFile
from app.services.errors import ServiceError
from app.services.file_service import MAX_FILES_PER_REQUEST, UPLOAD_FIELD_LIMITS

router = APIRouter()


@router.post(
    "/upload",
    summary="Upload a file",
    description="Store one image (multipart field `file`) and return it with its URL.",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[FileResponse],
    responses=merge_responses(
        media_error_responses(), unauthorized_response(), rate_limited_response()
    ),
)
@limit(UPLOAD_RATE_LIMIT)
async def upload_file(
    request: Request,
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> ApiResponse[FileResponse]:
    """Upload a single file."""
    try:
        blob = await uow.file_service.store_upload(await to_uploaded_file(file), current_user)
    except (ServiceError, MediaError) as e:
        raise to_http_error(e) from e
    return ApiResponse(message="File uploaded successfully", data=FileResponse.from_blob(blob))


@router.post(
    "/upload-multiple",
    summary="Upload several files",
    description=f"Store up to {MAX_FILES_PER_REQUEST} images (multipart field `files`).",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[list[FileResponse]],
    responses=merge_responses(
        validation_error_response(
            message=f"At most {MAX_FILES_PER_REQUEST} files can be uploaded at once"
        ),
        media_error_responses(),
        unauthorized_response(),
        rate_limited_response(),
    ),
)
@limit(UPLOAD_RATE_LIMIT)
async def upload_files(
    request: Request,
    files: list[UploadFile] = File(...),
    current_user: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> ApiResponse[list[FileResponse]]:
    """Upload several files in one request; all are stored or none."""
    try:
        uploads = [await to_uploaded_file(file) for file in files]
        blobs = await uow.file_service.store_uploads(uploads, current_user)
    except (ServiceError, MediaError) as e:
        raise to_http_error(e) from e
    return ApiResponse(
        message=f"{len(blobs)} files uploaded successfully",
        data=[FileResponse.from_blob(blob) for blob in blobs],
    )


@router.post(
    "/upload-fields",
    summary="Upload files by field",
    description=(
        "Store images sent under named multipart fields: "
        + ", ".join(f"`{name}` (max {count})" for name, count in UPLOAD_FIELD_LIMITS.items())
        + ". The response groups the stored files by field."
    ),
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[dict[str, list[FileResponse]]],
    responses=merge_responses(
        validation_error_response(message="No files uploaded"),
        media_error_responses(),
        unauthorized_response(),
        rate_limited_response(),
    ),
)
@limit(UPLOAD_RATE_LIMIT)
async def upload_field_files(
    request: Request,
    current_user: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> ApiResponse[dict[str, list[FileResponse]]]:
    """Upload files under several named fields; all are stored or none."""
    form = await request.form()
    uploads: dict[str, list[UploadedFile]] = {}
    for key, value in form.multi_items():
        if isinstance(value, StarletteUploadFile):
            uploads.setdefault(key, []).append(await to_uploaded_file(value))
    try:
        stored = await uow.file_service.store_field_uploads(uploads, current_user)
    except (ServiceError, MediaError) as e:
        raise to_http_error(e) from e
    return ApiResponse(
        message="Files uploaded successfully",
        data={
            field_name: [FileResponse.from_blob(blob) for blob in blobs]
            for field_name, blobs in stored.items()
        },
    )


@router.get(
    "/{file_id}",
    summary="Download a file",
    response_class=Response,
    responses={
        **not_found_response(description="File not found", message="File not found"),
        status.HTTP_200_OK: {"content": {"image/*": {}}},
    },
)
async def get_file(file_id: int, uow: UnitOfWork = Depends(get_uow)) -> Response:
    try:
        blob = await uow.file_service.get_file(file_id)
    except ServiceError as e:
        raise to_http_error(e) from e
    return media_response(blob)
