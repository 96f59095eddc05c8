"""Response models for category endpoints."""

from __future__ import annotations

from datetime import datetime

from app.api.schemas.base import CamelModel
from app.api.schemas.content_response_models import AuthorSummary
from app.db.models.category import Category


class CategoryResponse(CamelModel):
    id: int
    name: str
    slug: str
    description: str | None = None
    color: str
    icon: str
    is_active: bool
    item_count: int
    display_name: str
    created_by: AuthorSummary | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_category(cls, category: Category) -> CategoryResponse:
        return cls(
            id=category.id,
            name=category.name,
            slug=category.slug,
            description=category.description,
            color=category.color,
            icon=category.icon,
            is_active=category.is_active,
            item_count=category.item_count,
            display_name=category.display_name,
            created_by=(
                AuthorSummary.from_user(category.created_by) if category.created_by else None
            ),
            created_at=category.created_at,
            updated_at=category.updated_at,
        )
