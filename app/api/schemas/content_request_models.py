"""Request models for news, blog and article endpoints."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from app.api.schemas.base import CamelModel


def _string_list(value: Any) -> Any:
    """Accept a JSON array or a comma separated string (multipart form fields)."""
    if not isinstance(value, str):
        return value
    stripped = value.strip()
    if not stripped:
        return []
    if stripped.startswith("["):
        try:
            return json.loads(stripped)
        except ValueError:
            return value
    return [part.strip() for part in stripped.split(",") if part.strip()]


class ContentPayload(CamelModel):
    """Create/update body for every content kind.

    Every field is optional here; required fields are enforced on create so
    that JSON and multipart submissions report missing values the same way.
    Extension fields a kind does not support are ignored.
    """

    category_id: int | None = Field(None, alias="category", examples=[1])
    title: str | None = Field(None, max_length=200, examples=["Local team wins the cup"])
    subtitle: str | None = Field(None, max_length=500)
    html_data: str | None = Field(None, examples=["<p>Full story...</p>"])
    publish_date: datetime | None = None
    is_published: bool | None = None
    tags: list[str] | None = None
    featured_image: Any | None = Field(
        None,
        description=(
            "Uploaded file, base64 string or data URI, {data, contentType, originalName} "
            "object, or {objectURL}; null removes the current image"
        ),
    )
    read_time: int | None = Field(None, ge=0)
    references: list[Any] | None = None
    seo_keywords: list[str] | None = None
    seo_description: str | None = Field(None, max_length=300)

    @field_validator("tags", "references", "seo_keywords", mode="before")
    @classmethod
    def parse_lists(cls, v: Any) -> Any:
        return _string_list(v)

    @field_validator("category_id", "read_time", mode="before")
    @classmethod
    def blank_as_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class CommentRequest(CamelModel):
    text: str | None = Field(None, max_length=2000, examples=["Great read!"])
