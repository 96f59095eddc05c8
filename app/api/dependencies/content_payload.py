"""Parse content create/update bodies sent either as JSON or as multipart forms."""

from __future__ import annotations

import json
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from app.api.schemas.content_request_models import ContentPayload
from app.core.errors import build_http_error
from app.media.schemas import UploadedFile

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")
LIST_FIELDS = ("tags", "references", "seoKeywords")
MEDIA_FIELDS = ("featuredImage", "profilePicture")


async def to_uploaded_file(upload: UploadFile) -> UploadedFile:
    return UploadedFile(
        filename=upload.filename or "",
        content_type=upload.content_type or "",
        data=await upload.read(),
    )


def _form_media_value(value: str) -> Any:
    """Media sent as a text form field: JSON object, base64 string, or null to remove."""
    stripped = value.strip()
    if stripped in ("", "null"):
        return None
    if stripped.startswith("{"):
        try:
            return json.loads(stripped)
        except ValueError:
            return value
    return value


async def read_form_fields(request: Request) -> dict[str, Any]:
    form = await request.form()
    raw: dict[str, Any] = {}
    for key in form.keys():
        values = form.getlist(key)
        value = values[-1]
        if isinstance(value, UploadFile):
            raw[key] = await to_uploaded_file(value)
        elif key in MEDIA_FIELDS:
            raw[key] = _form_media_value(value)
        elif key in LIST_FIELDS and len(values) > 1:
            raw[key] = [item for item in values if isinstance(item, str)]
        else:
            raw[key] = value
    return raw


async def read_request_fields(request: Request) -> dict[str, Any]:
    """Raw camelCase fields from a JSON object or a form body."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        return await read_form_fields(request)

    body = await request.body()
    if not body.strip():
        return {}
    try:
        raw = json.loads(body)
    except ValueError:
        raise build_http_error(
            status_code=status.HTTP_400_BAD_REQUEST,
            error="validation_error",
            message="Request body must be valid JSON",
        ) from None
    if not isinstance(raw, dict):
        raise build_http_error(
            status_code=status.HTTP_400_BAD_REQUEST,
            error="validation_error",
            message="Request body must be a JSON object",
        )
    return raw


async def get_content_fields(request: Request) -> dict[str, Any]:
    """Validated content fields keyed by snake_case name; only keys the client sent."""
    raw = await read_request_fields(request)
    try:
        payload = ContentPayload.model_validate(raw)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False)) from e
    return {name: getattr(payload, name) for name in payload.model_fields_set}
