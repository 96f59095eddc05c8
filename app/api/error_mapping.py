"""Translate service-layer exceptions into the HTTP error envelope."""

from __future__ import annotations

from fastapi import HTTPException, status

from app.core.errors import build_http_error
from app.mail.client import MailDeliveryError
from app.media.codec import MediaError
from app.services.errors import (
    AccountDisabledError,
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    InvalidCredentialsError,
    InvalidInputError,
    NotFoundError,
    PasswordTooLongError,
    ServiceError,
)

STATUS_BY_ERROR: tuple[tuple[type[Exception], int], ...] = (
    (InvalidInputError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (ConflictError, status.HTTP_409_CONFLICT),
    (InvalidCredentialsError, status.HTTP_401_UNAUTHORIZED),
    (AccountDisabledError, status.HTTP_401_UNAUTHORIZED),
    (PasswordTooLongError, status.HTTP_400_BAD_REQUEST),
    (AuthenticationError, status.HTTP_400_BAD_REQUEST),
    (MediaError, status.HTTP_400_BAD_REQUEST),
    (MailDeliveryError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def to_http_error(exc: ServiceError | MediaError | MailDeliveryError) -> HTTPException:
    status_code = status.HTTP_400_BAD_REQUEST
    for error_type, mapped_status in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            status_code = mapped_status
            break
    headers = (
        {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    )
    return build_http_error(
        status_code=status_code,
        error=exc.error_code,
        message=str(exc),
        details=getattr(exc, "details", None),
        headers=headers,
    )
