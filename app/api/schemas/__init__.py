"""API request and response schemas.

Import request/response models from the submodules (e.g. auth_request_models,
content_response_models) or from this package for a single entry point.
"""

from __future__ import annotations

from app.api.schemas.auth_request_models import (
    ForgotPasswordRequest,
    LoginUserRequest,
    RegisterUserRequest,
    UpdateProfileRequest,
    VerifyOneTimeCodeRequest,
)
from app.api.schemas.auth_response_models import LoginResponse, StatisticsResponse, UserResponse
from app.api.schemas.base import ApiResponse, CountResponse, PaginationMeta
from app.api.schemas.category_request_models import CategoryCreateRequest, CategoryUpdateRequest
from app.api.schemas.category_response_models import CategoryResponse
from app.api.schemas.content_request_models import CommentRequest, ContentPayload
from app.api.schemas.content_response_models import (
    CommentResponse,
    ContentBrief,
    ContentDetail,
    ContentSummary,
    LikeResponse,
    ShareResponse,
)
from app.api.schemas.file_response_models import FileResponse
from app.api.schemas.meta_response_models import HealthResponse

__all__ = [
    "ApiResponse",
    "CategoryCreateRequest",
    "CategoryResponse",
    "CategoryUpdateRequest",
    "CommentRequest",
    "CommentResponse",
    "ContentBrief",
    "ContentDetail",
    "ContentPayload",
    "ContentSummary",
    "CountResponse",
    "FileResponse",
    "ForgotPasswordRequest",
    "HealthResponse",
    "LikeResponse",
    "LoginResponse",
    "LoginUserRequest",
    "PaginationMeta",
    "RegisterUserRequest",
    "ShareResponse",
    "StatisticsResponse",
    "UpdateProfileRequest",
    "UserResponse",
    "VerifyOneTimeCodeRequest",
]
