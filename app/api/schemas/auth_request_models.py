"""Request models for auth API endpoints."""

from __future__ import annotations

import re

from pydantic import EmailStr, Field, field_validator

from app.api.schemas.base import CamelModel

PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 50
PASSWORD_POLICY_MESSAGE = (
    "Password must contain at least one lowercase letter, one uppercase letter, and one number"
)


def _validate_password(password: str) -> str:
    """Enforce the password policy and the 72-byte bcrypt limit.

    The 50 character limit normally keeps us under 72 bytes, but multi-byte
    UTF-8 characters can still exceed it.
    """
    if len(password.encode("utf-8")) > 72:
        raise ValueError("Password must not exceed 72 bytes when UTF-8 encoded")
    if not (
        re.search(r"[a-z]", password)
        and re.search(r"[A-Z]", password)
        and re.search(r"\d", password)
    ):
        raise ValueError(PASSWORD_POLICY_MESSAGE)
    return password


class RegisterUserRequest(CamelModel):
    """Request model for user registration."""

    name: str = Field(..., min_length=2, max_length=50, examples=["Alex Doe"])
    email: EmailStr = Field(..., max_length=320, description="Valid email address")
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LENGTH,
        max_length=PASSWORD_MAX_LENGTH,
        description="Password between 6 and 50 characters with lower, upper and digit",
        examples=["Password123"],
    )
    phone: str | None = Field(None, max_length=30, examples=["+1 555 0100"])

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name cannot be blank")
        return v.strip()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return _validate_password(v)


class LoginUserRequest(CamelModel):
    """Request model for user login."""

    email: EmailStr = Field(..., max_length=320, description="Valid email address")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LENGTH)


class UpdateProfileRequest(CamelModel):
    name: str | None = Field(None, min_length=2, max_length=50)
    phone: str | None = Field(None, max_length=30)


class ForgotPasswordRequest(CamelModel):
    email: EmailStr = Field(..., max_length=320)


class VerifyOneTimeCodeRequest(CamelModel):
    """Reset a password with the emailed six digit code."""

    email: EmailStr = Field(..., max_length=320)
    otp: str = Field(..., pattern=r"^\d{6}$", examples=["042137"])
    new_password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LENGTH,
        max_length=PASSWORD_MAX_LENGTH,
        examples=["NewPassword123"],
    )

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v: str) -> str:
        return _validate_password(v)
