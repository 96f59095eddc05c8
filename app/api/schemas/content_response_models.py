"""Response models for news, blog and article endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from app.api.schemas.base import CamelModel
from app.core.html_text import brief_content
from app.db.models.category import Category
from app.db.models.comment import ContentComment
from app.db.models.content_item import ContentItem
from app.db.models.user import User
from app.media.codec import encode_media
from app.media.schemas import EncodedMedia
from app.services.content_kinds import (
    READ_TIME,
    REFERENCES,
    SEO_DESCRIPTION,
    SEO_KEYWORDS,
    ContentKind,
)


class AuthorSummary(CamelModel):
    id: int
    name: str
    email: str

    @classmethod
    def from_user(cls, user: User) -> AuthorSummary:
        return cls(id=user.id, name=user.name, email=user.email)


class CategorySummary(CamelModel):
    id: int
    name: str
    slug: str
    color: str
    icon: str
    display_name: str

    @classmethod
    def from_category(cls, category: Category) -> CategorySummary:
        return cls(
            id=category.id,
            name=category.name,
            slug=category.slug,
            color=category.color,
            icon=category.icon,
            display_name=category.display_name,
        )


def featured_image_url(kind: ContentKind, item: ContentItem) -> str:
    return f"/api{kind.route_prefix}/{item.id}/featured-image"


class ContentSummary(CamelModel):
    """List projection without ``htmlData``.

    Extension fields are null for kinds that do not carry them.
    """

    id: int
    kind: str
    title: str
    subtitle: str | None = None
    category: CategorySummary
    author: AuthorSummary
    publish_date: datetime
    is_published: bool
    views: int
    likes: int = Field(..., ge=0)
    shares: int | None = None
    tags: list[str] = Field(default_factory=list)
    read_time: int | None = None
    references: list[Any] | None = None
    seo_keywords: list[str] | None = None
    seo_description: str | None = None
    featured_image_url: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def summary_fields(cls, kind: ContentKind, item: ContentItem) -> dict[str, Any]:
        image_url = None
        if item.featured_image is not None:
            image_url = item.featured_image.source_url or featured_image_url(kind, item)
        return {
            "id": item.id,
            "kind": item.kind,
            "title": item.title,
            "subtitle": item.subtitle,
            "category": CategorySummary.from_category(item.category),
            "author": AuthorSummary.from_user(item.author),
            "publish_date": item.publish_date,
            "is_published": item.is_published,
            "views": item.views,
            "likes": max(item.likes, 0),
            "shares": item.shares if kind.supports_shares else None,
            "tags": list(item.tags or []),
            "read_time": item.read_time if kind.has_field(READ_TIME) else None,
            "references": item.references if kind.has_field(REFERENCES) else None,
            "seo_keywords": item.seo_keywords if kind.has_field(SEO_KEYWORDS) else None,
            "seo_description": item.seo_description if kind.has_field(SEO_DESCRIPTION) else None,
            "featured_image_url": image_url,
            "created_at": item.created_at,
            "updated_at": item.updated_at,
        }

    @classmethod
    def from_item(cls, kind: ContentKind, item: ContentItem) -> ContentSummary:
        return cls(**cls.summary_fields(kind, item))


class ContentBrief(ContentSummary):
    brief_content: str = Field(..., description="Tag-stripped text, at most 150 characters + ...")

    @classmethod
    def from_item(cls, kind: ContentKind, item: ContentItem) -> ContentBrief:
        return cls(**cls.summary_fields(kind, item), brief_content=brief_content(item.html_data))


class ContentDetail(ContentSummary):
    html_data: str
    featured_image: EncodedMedia | None = None

    @classmethod
    def from_item(cls, kind: ContentKind, item: ContentItem) -> ContentDetail:
        image = None
        if item.featured_image is not None:
            image = encode_media(item.featured_image, featured_image_url(kind, item))
        return cls(
            **cls.summary_fields(kind, item),
            html_data=item.html_data,
            featured_image=image,
        )


class LikeResponse(CamelModel):
    liked: bool
    likes: int = Field(..., ge=0)


class ShareResponse(CamelModel):
    shares: int = Field(..., ge=0)


class CommentResponse(CamelModel):
    id: int
    text: str
    author: AuthorSummary
    created_at: datetime

    @classmethod
    def from_comment(cls, comment: ContentComment) -> CommentResponse:
        return cls(
            id=comment.id,
            text=comment.text,
            author=AuthorSummary.from_user(comment.author),
            created_at=comment.created_at,
        )
