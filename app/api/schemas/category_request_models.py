"""Request models for category endpoints."""

from __future__ import annotations

from pydantic import Field, field_validator

from app.api.schemas.base import CamelModel
from app.core.html_text import is_hex_color


def _validate_color(value: str | None) -> str | None:
    if value is not None and not is_hex_color(value):
        raise ValueError("Color must be a valid hex color code")
    return value


class CategoryCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=50, examples=["Tech"])
    slug: str | None = Field(None, max_length=60, examples=["tech"])
    description: str | None = Field(None, max_length=200)
    color: str | None = Field(None, examples=["#3B82F6"])
    icon: str | None = Field(None, max_length=50, examples=["folder"])
    is_active: bool = True

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str | None) -> str | None:
        return _validate_color(v)


class CategoryUpdateRequest(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=50)
    slug: str | None = Field(None, max_length=60)
    description: str | None = Field(None, max_length=200)
    color: str | None = None
    icon: str | None = Field(None, max_length=50)
    is_active: bool | None = None

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str | None) -> str | None:
        return _validate_color(v)
