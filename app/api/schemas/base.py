"""Shared response envelope and camelCase base model."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.services.content_query import Page

T = TypeVar("T")


class CamelModel(BaseModel):
    """Fields are snake_case in Python and camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class PaginationMeta(CamelModel):
    current_page: int = Field(..., examples=[1])
    total_pages: int = Field(..., examples=[3])
    total_items: int = Field(..., examples=[25])
    items_per_page: int = Field(..., examples=[10])

    @classmethod
    def from_page(cls, page: Page[object]) -> PaginationMeta:
        return cls(
            current_page=page.page,
            total_pages=page.total_pages,
            total_items=page.total,
            items_per_page=page.limit,
        )


class ApiResponse(CamelModel, Generic[T]):
    """Success envelope wrapping every non-binary response."""

    success: bool = True
    message: str
    data: T | None = None
    pagination: PaginationMeta | None = None


class CountResponse(CamelModel):
    count: int = Field(..., ge=0, examples=[42])
