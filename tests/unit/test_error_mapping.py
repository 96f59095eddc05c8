"""Unit tests for access checks and the service-error to HTTP translation."""

from __future__ import annotations

import pytest
from fastapi import status

from app.api.error_mapping import to_http_error
from app.core.access import ensure_admin, ensure_author_or_admin, is_author_or_admin
from app.db.models.user import User, UserRole
from app.mail.client import MailDeliveryError
from app.media.codec import PayloadTooLargeError, UnsupportedMediaTypeError
from app.services.errors import (
    AccountDisabledError,
    CategoryInUseError,
    ConflictError,
    ForbiddenError,
    InvalidCredentialsError,
    InvalidInputError,
    InvalidOneTimeCodeError,
    NotFoundError,
    PasswordTooLongError,
    UserAlreadyExistsError,
)


def _user(user_id: int, role: str = UserRole.USER.value) -> User:
    return User(id=user_id, name="Alex", email=f"u{user_id}@example.com", role=role)


class TestAccessPolicy:
    def test_author_is_allowed(self) -> None:
        assert is_author_or_admin(5, _user(5)) is True

    def test_admin_is_allowed(self) -> None:
        assert is_author_or_admin(5, _user(9, UserRole.ADMIN.value)) is True

    def test_other_user_is_refused(self) -> None:
        with pytest.raises(ForbiddenError, match="Not authorized to update this article"):
            ensure_author_or_admin(5, _user(9), "update this article")

    def test_ensure_admin(self) -> None:
        ensure_admin(_user(1, UserRole.ADMIN.value))
        with pytest.raises(ForbiddenError):
            ensure_admin(_user(1))


class TestToHttpError:
    @pytest.mark.parametrize(
        ("error", "expected_status", "expected_code"),
        [
            (InvalidInputError("Title is required"), 400, "validation_error"),
            (NotFoundError("Article not found"), 404, "not_found"),
            (ForbiddenError(), 403, "forbidden"),
            (ConflictError("Category exists"), 409, "conflict"),
            (UserAlreadyExistsError(), 400, "user_exists"),
            (InvalidCredentialsError(), 401, "invalid_credentials"),
            (AccountDisabledError(), 401, "account_disabled"),
            (PasswordTooLongError(), 400, "password_too_long"),
            (InvalidOneTimeCodeError(), 400, "invalid_otp"),
            (PayloadTooLargeError(1024), 400, "payload_too_large"),
            (UnsupportedMediaTypeError("text/plain"), 400, "unsupported_media_type"),
            (MailDeliveryError(), 503, "mail_delivery_failed"),
        ],
    )
    def test_status_and_code(
        self, error: Exception, expected_status: int, expected_code: str
    ) -> None:
        http_error = to_http_error(error)  # type: ignore[arg-type]

        assert http_error.status_code == expected_status
        assert http_error.detail["error"] == expected_code
        assert http_error.detail["message"] == str(error)
        assert http_error.detail["success"] is False

    def test_unauthorized_sets_bearer_challenge(self) -> None:
        http_error = to_http_error(InvalidCredentialsError())

        assert http_error.headers == {"WWW-Authenticate": "Bearer"}

    def test_category_in_use_carries_count(self) -> None:
        http_error = to_http_error(CategoryInUseError(3))

        assert http_error.status_code == status.HTTP_409_CONFLICT
        assert http_error.detail["error"] == "category_in_use"
        assert http_error.detail["details"] == {"itemCount": 3}
        assert "3 associated content items" in http_error.detail["message"]

    def test_details_are_omitted_when_absent(self) -> None:
        http_error = to_http_error(NotFoundError())

        assert "details" not in http_error.detail
