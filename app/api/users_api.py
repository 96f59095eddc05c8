from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from app.api.dependencies import UnitOfWork, get_uow
from app.api.error_mapping import to_http_error
from app.api.openapi_responses import not_found_response
from app.media.codec import media_response
from app.services.errors import ServiceError

router = APIRouter()


@router.get(
    "/{user_id}/profile-picture",
    summary="Profile picture",
    description="Raw image bytes of a user's profile picture.",
    response_class=Response,
    responses={
        **not_found_response(
            description="User or picture not found", message="Profile picture not found"
        ),
        status.HTTP_200_OK: {"content": {"image/*": {}}},
    },
)
async def get_profile_picture(user_id: int, uow: UnitOfWork = Depends(get_uow)) -> Response:
    try:
        blob = await uow.auth_service.get_profile_picture(user_id)
    except ServiceError as e:
        raise to_http_error(e) from e
    return media_response(blob)
