"""Error hierarchy raised by the service layer and mapped to HTTP by the API layer."""

from __future__ import annotations

from typing import Any


class ServiceError(Exception):
    """Base error for business-rule failures."""

    def __init__(self, message: str, error_code: str, details: Any | None = None) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.details = details


class InvalidInputError(ServiceError):
    """A required field is missing or a value is malformed."""

    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(message, "validation_error", details)


class NotFoundError(ServiceError):
    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, "not_found")


class ForbiddenError(ServiceError):
    """Authenticated, but neither the owner nor an admin."""

    def __init__(self, message: str = "Not authorized") -> None:
        super().__init__(message, "forbidden")


class ConflictError(ServiceError):
    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(message, "conflict", details)


class CategoryInUseError(ConflictError):
    """Raised when deleting a category that content items still reference."""

    def __init__(self, blocking_count: int) -> None:
        self.blocking_count = blocking_count
        super().__init__(
            f"Cannot delete category. It has {blocking_count} associated content items. "
            "Please reassign or delete them first.",
            details={"itemCount": blocking_count},
        )
        self.error_code = "category_in_use"


class AuthenticationError(ServiceError):
    """Base error for authentication-related failures."""


class UserAlreadyExistsError(AuthenticationError):
    """Raised when attempting to register a user that already exists."""

    def __init__(self, message: str = "User with this email already exists") -> None:
        super().__init__(message, "user_exists")


class InvalidCredentialsError(AuthenticationError):
    """Raised when login credentials are invalid."""

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message, "invalid_credentials")


class AccountDisabledError(AuthenticationError):
    def __init__(self, message: str = "Account is deactivated") -> None:
        super().__init__(message, "account_disabled")


class PasswordTooLongError(AuthenticationError):
    """Raised when password exceeds the maximum allowed length (72 bytes)."""

    def __init__(
        self, message: str = "Password must not exceed 72 bytes when UTF-8 encoded"
    ) -> None:
        super().__init__(message, "password_too_long")


class InvalidOneTimeCodeError(AuthenticationError):
    def __init__(self, message: str = "Invalid or expired OTP") -> None:
        super().__init__(message, "invalid_otp")
