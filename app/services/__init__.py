"""Service layer. Service classes live in their own modules (e.g. content_service)."""

from app.services.errors import (
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    ServiceError,
)

__all__ = [
    "ServiceError",
    "AuthenticationError",
    "InvalidInputError",
    "NotFoundError",
    "ForbiddenError",
    "ConflictError",
]
