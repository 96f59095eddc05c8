"""Filtering, sorting and pagination shared by content and category listings."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, Literal, TypeVar

from sqlalchemy import ColumnElement, Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.content_item import ContentItem
from app.services.errors import InvalidInputError

T = TypeVar("T")

SortOrder = Literal["asc", "desc"]

CONTENT_SORT_FIELDS: Mapping[str, Any] = {
    "publishDate": ContentItem.publish_date,
    "createdAt": ContentItem.created_at,
    "updatedAt": ContentItem.updated_at,
    "title": ContentItem.title,
    "views": ContentItem.views,
    "likes": ContentItem.likes,
    "shares": ContentItem.shares,
}


@dataclass
class Page(Generic[T]):
    items: Sequence[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


@dataclass
class ContentQuery:
    category_id: int | None = None
    published: bool | None = None
    search: str | None = None
    sort_by: str = "publishDate"
    sort_order: SortOrder = "desc"
    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


LIKE_ESCAPE = "\\"


def contains_pattern(text: str) -> str:
    """``ilike`` pattern matching ``text`` literally anywhere; pair with ``LIKE_ESCAPE``."""
    escaped = text.strip()
    for special in (LIKE_ESCAPE, "%", "_"):
        escaped = escaped.replace(special, LIKE_ESCAPE + special)
    return f"%{escaped}%"


def resolve_sort(
    sort_fields: Mapping[str, Any], sort_by: str, sort_order: SortOrder
) -> ColumnElement[Any]:
    column = sort_fields.get(sort_by)
    if column is None:
        allowed = ", ".join(sorted(sort_fields))
        raise InvalidInputError(
            f"Cannot sort by '{sort_by}'", details={"allowed": allowed.split(", ")}
        )
    return column.desc() if sort_order == "desc" else column.asc()


def content_filters(
    kind: str | None, query: ContentQuery, include_drafts: bool
) -> list[ColumnElement[bool]]:
    """WHERE clauses for a content listing.

    ``include_drafts`` only applies when the caller did not ask for a published state.
    """
    filters: list[ColumnElement[bool]] = []
    if kind is not None:
        filters.append(ContentItem.kind == kind)
    if query.published is not None:
        filters.append(ContentItem.is_published.is_(query.published))
    elif not include_drafts:
        filters.append(ContentItem.is_published.is_(True))
    if query.category_id is not None:
        filters.append(ContentItem.category_id == query.category_id)
    if query.search:
        pattern = contains_pattern(query.search)
        filters.append(
            or_(
                ContentItem.title.ilike(pattern, escape=LIKE_ESCAPE),
                ContentItem.subtitle.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )
    return filters


async def fetch_page(
    session: AsyncSession,
    statement: Select[Any],
    filters: Sequence[ColumnElement[bool]],
    order_by: ColumnElement[Any],
    tiebreaker: Any,
    page: int,
    limit: int,
) -> Page[Any]:
    """Run a filtered, ordered slice of ``statement`` and count the full result set."""
    entity = statement.column_descriptions[0]["entity"]
    total = await session.scalar(select(func.count()).select_from(entity).where(*filters))
    result = await session.execute(
        statement.where(*filters)
        .order_by(order_by, tiebreaker)
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return Page(items=list(result.scalars().all()), total=total or 0, page=page, limit=limit)
