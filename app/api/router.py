from __future__ import annotations

from fastapi import APIRouter, Request

from app.api.auth_api import router as auth_router
from app.api.categories_api import router as categories_router
from app.api.content_api import build_content_router
from app.api.files_api import router as files_router
from app.api.openapi_responses import rate_limited_response
from app.api.schemas.meta_response_models import HealthResponse
from app.api.users_api import router as users_router
from app.core.rate_limit import HEALTH_RATE_LIMIT, limit, rate_limit_ip_key
from app.services.content_kinds import CONTENT_KINDS

router = APIRouter()


@router.get(
    "/health",
    tags=["meta"],
    summary="Health check",
    response_model=HealthResponse,
    responses=rate_limited_response(),
)
@limit(HEALTH_RATE_LIMIT, key_func=rate_limit_ip_key)
def health(request: Request) -> HealthResponse:
    """Check the health of the application."""
    return HealthResponse(status="ok", version=request.app.version)


# Include sub-routers
router.include_router(auth_router, prefix="/auth", tags=["auth"])
router.include_router(users_router, prefix="/users", tags=["users"])
router.include_router(categories_router, prefix="/categories", tags=["categories"])
router.include_router(files_router, prefix="/files", tags=["files"])
for kind in CONTENT_KINDS.values():
    router.include_router(
        build_content_router(kind), prefix=kind.route_prefix, tags=[kind.plural_label]
    )
