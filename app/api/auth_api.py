from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query, Request, status

from app.api.dependencies import (
    UnitOfWork,
    get_current_admin,
    get_current_user,
    get_uow,
    read_request_fields,
)
from app.api.error_mapping import to_http_error
from app.api.openapi_responses import (
    ErrorExample,
    error_responses,
    forbidden_response,
    media_error_responses,
    merge_responses,
    not_found_response,
    rate_limited_response,
    unauthorized_response,
    validation_error_response,
)
from app.api.schemas.auth_request_models import (
    ForgotPasswordRequest,
    LoginUserRequest,
    RegisterUserRequest,
    UpdateProfileRequest,
    VerifyOneTimeCodeRequest,
)
from app.api.schemas.auth_response_models import (
    LoginResponse,
    StatisticsResponse,
    UserResponse,
)
from app.api.schemas.base import ApiResponse, PaginationMeta
from app.core.auth import create_access_token
from app.core.rate_limit import (
    AUTH_LOGIN_RATE_LIMIT,
    AUTH_PASSWORD_RESET_RATE_LIMIT,
    AUTH_REGISTER_RATE_LIMIT,
    UPLOAD_RATE_LIMIT,
    limit,
    rate_limit_ip_key,
)
from app.db.models.user import User
from app.mail.client import MailDeliveryError
from app.media.codec import MediaError
from app.services.errors import AuthenticationError, InvalidInputError, ServiceError

router = APIRouter()

admin_only = forbidden_response(
    description="Caller is not an admin", message="Access denied. Admin privileges required."
)


@router.post(
    "/register",
    summary="Register user",
    description="Create a new user account.",
    response_model=ApiResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
    responses=merge_responses(
        error_responses(
            ErrorExample(
                status_code=status.HTTP_400_BAD_REQUEST,
                error="user_exists",
                message="User with this email already exists",
                description="Email already registered or invalid input",
                summary="User already exists",
            ),
            ErrorExample(
                status_code=status.HTTP_400_BAD_REQUEST,
                error="validation_error",
                message="Request validation failed",
                description="Email already registered or invalid input",
                summary="Invalid registration input",
            ),
        ),
        rate_limited_response(),
    ),
)
@limit(AUTH_REGISTER_RATE_LIMIT, key_func=rate_limit_ip_key)
async def register(
    request: Request,
    user_data: RegisterUserRequest,
    uow: UnitOfWork = Depends(get_uow),
) -> ApiResponse[UserResponse]:
    """Register a new user."""
    try:
        new_user = await uow.auth_service.register_user(
            user_data.name, user_data.email, user_data.password, user_data.phone
        )
    except AuthenticationError as e:
        raise to_http_error(e) from e
    return ApiResponse(
        message="User registered successfully", data=UserResponse.from_user(new_user)
    )


@router.post(
    "/login",
    summary="Log in",
    description="Authenticate credentials and return the user with a bearer access token.",
    response_model=ApiResponse[LoginResponse],
    responses=merge_responses(
        error_responses(
            ErrorExample(
                status_code=status.HTTP_401_UNAUTHORIZED,
                error="invalid_credentials",
                message="Invalid email or password",
                description="Invalid credentials or disabled account",
                summary="Invalid email or password",
            ),
            ErrorExample(
                status_code=status.HTTP_401_UNAUTHORIZED,
                error="account_disabled",
                message="Account is deactivated",
                description="Invalid credentials or disabled account",
                summary="Account disabled",
            ),
        ),
        rate_limited_response(),
    ),
)
@limit(AUTH_LOGIN_RATE_LIMIT, key_func=rate_limit_ip_key)
async def login(
    request: Request,
    credentials: LoginUserRequest,
    uow: UnitOfWork = Depends(get_uow),
) -> ApiResponse[LoginResponse]:
    """Authenticate user and return JWT token."""
    try:
        user = await uow.auth_service.authenticate_user(credentials.email, credentials.password)
    except AuthenticationError as e:
        raise to_http_error(e) from e

    access_token = create_access_token(data={"sub": str(user.id)})
    return ApiResponse(
        message="Login successful",
        data=LoginResponse(user=UserResponse.from_user(user), access_token=access_token),
    )


@router.post(
    "/logout",
    summary="Log out",
    description="Tokens are stateless; clients discard theirs. Kept for API symmetry.",
    response_model=ApiResponse[None],
    responses=unauthorized_response(),
)
async def logout(current_user: User = Depends(get_current_user)) -> ApiResponse[None]:
    return ApiResponse(message="Logout successful")


@router.get(
    "/profile",
    summary="Get current user",
    description="Return the user for the provided bearer token.",
    response_model=ApiResponse[UserResponse],
    responses=unauthorized_response(),
)
async def get_profile(
    current_user: User = Depends(get_current_user),
) -> ApiResponse[UserResponse]:
    """Get current authenticated user information."""
    return ApiResponse(
        message="Profile retrieved successfully", data=UserResponse.from_user(current_user)
    )


@router.put(
    "/profile",
    summary="Update current user",
    response_model=ApiResponse[UserResponse],
    responses=merge_responses(validation_error_response(), unauthorized_response()),
)
async def update_profile(
    profile: UpdateProfileRequest,
    current_user: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> ApiResponse[UserResponse]:
    try:
        user = await uow.auth_service.update_profile(
            current_user, name=profile.name, phone=profile.phone
        )
    except ServiceError as e:
        raise to_http_error(e) from e
    return ApiResponse(message="Profile updated successfully", data=UserResponse.from_user(user))


@router.put(
    "/profile-picture",
    summary="Replace profile picture",
    description=(
        "Multipart field `profilePicture`, or a JSON body whose `profilePicture` is a base64 "
        "string, data URI, embedded media object or {objectURL}. Limited to 5 MB."
    ),
    response_model=ApiResponse[UserResponse],
    responses=merge_responses(
        validation_error_response(message="Profile picture is required"),
        media_error_responses(),
        unauthorized_response(),
        rate_limited_response(),
    ),
)
@limit(UPLOAD_RATE_LIMIT)
async def update_profile_picture(
    request: Request,
    current_user: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> ApiResponse[UserResponse]:
    fields = await read_request_fields(request)
    try:
        raw = fields.get("profilePicture")
        if raw is None:
            raise InvalidInputError(
                "Profile picture is required", details={"field": "profilePicture"}
            )
        user = await uow.auth_service.update_profile_picture(current_user, raw)
    except (ServiceError, MediaError) as e:
        raise to_http_error(e) from e
    return ApiResponse(
        message="Profile picture updated successfully", data=UserResponse.from_user(user)
    )


@router.post(
    "/forgot-password",
    summary="Request a password reset code",
    description="Emails a six digit one-time code that expires after a few minutes.",
    response_model=ApiResponse[None],
    responses=merge_responses(
        not_found_response(
            description="No account with this email", message="User not found with this email"
        ),
        error_responses(
            ErrorExample(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                error="mail_delivery_failed",
                message="Failed to send OTP email",
                description="Mail server unavailable",
            )
        ),
        rate_limited_response(),
    ),
)
@limit(AUTH_PASSWORD_RESET_RATE_LIMIT, key_func=rate_limit_ip_key)
async def forgot_password(
    request: Request,
    payload: ForgotPasswordRequest,
    uow: UnitOfWork = Depends(get_uow),
) -> ApiResponse[None]:
    try:
        await uow.auth_service.request_password_reset(payload.email)
    except (ServiceError, MailDeliveryError) as e:
        raise to_http_error(e) from e
    return ApiResponse(message="OTP sent to your email address")


@router.post(
    "/verify-otp",
    summary="Reset password with a one-time code",
    response_model=ApiResponse[None],
    responses=merge_responses(
        error_responses(
            ErrorExample(
                status_code=status.HTTP_400_BAD_REQUEST,
                error="invalid_otp",
                message="Invalid or expired OTP",
                description="Code is wrong or expired",
            )
        ),
        rate_limited_response(),
    ),
)
@limit(AUTH_PASSWORD_RESET_RATE_LIMIT, key_func=rate_limit_ip_key)
async def verify_otp(
    request: Request,
    payload: VerifyOneTimeCodeRequest,
    uow: UnitOfWork = Depends(get_uow),
) -> ApiResponse[None]:
    try:
        await uow.auth_service.reset_password(payload.email, payload.otp, payload.new_password)
    except ServiceError as e:
        raise to_http_error(e) from e
    return ApiResponse(message="Password reset successfully")


@router.get(
    "/users",
    summary="List users (admin)",
    response_model=ApiResponse[list[UserResponse]],
    responses=merge_responses(unauthorized_response(), admin_only),
)
async def list_users(
    search: str | None = Query(None, max_length=200),
    role: Literal["admin", "user"] | None = Query(None),
    is_active: bool | None = Query(None, alias="isActive"),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100, alias="limit"),
    admin: User = Depends(get_current_admin),
    uow: UnitOfWork = Depends(get_uow),
) -> ApiResponse[list[UserResponse]]:
    result = await uow.auth_service.list_users(
        search=search, role=role, is_active=is_active, page=page, limit=page_size
    )
    return ApiResponse(
        message="Users retrieved successfully",
        data=[UserResponse.from_user(user) for user in result.items],
        pagination=PaginationMeta.from_page(result),
    )


@router.get(
    "/statistics",
    summary="Content statistics (admin)",
    description="Totals, published totals and the last 7 days of activity per content kind.",
    response_model=ApiResponse[StatisticsResponse],
    responses=merge_responses(unauthorized_response(), admin_only),
)
async def statistics(
    admin: User = Depends(get_current_admin),
    uow: UnitOfWork = Depends(get_uow),
) -> ApiResponse[StatisticsResponse]:
    stats = await uow.auth_service.statistics()
    return ApiResponse(
        message="Statistics retrieved successfully",
        data=StatisticsResponse.from_stats(stats),
    )
