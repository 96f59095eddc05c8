"""Query-string parsing shared by the listing endpoints."""

from __future__ import annotations

from collections.abc import Callable
from typing import Literal

from fastapi import Query

from app.services.content_query import ContentQuery

MAX_PAGE_SIZE = 100


def content_query_dependency(default_limit: int = 10) -> Callable[..., ContentQuery]:
    """Build a dependency that turns list query parameters into a ``ContentQuery``."""

    def dependency(
        category: int | None = Query(None, description="Filter by category id"),
        published: bool | None = Query(None, description="Filter by publish state"),
        search: str | None = Query(None, max_length=200, description="Title/subtitle search"),
        sort_by: str = Query("publishDate", alias="sortBy"),
        sort_order: Literal["asc", "desc"] = Query("desc", alias="sortOrder"),
        page: int = Query(1, ge=1),
        limit: int = Query(default_limit, ge=1, le=MAX_PAGE_SIZE),
    ) -> ContentQuery:
        return ContentQuery(
            category_id=category,
            published=published,
            search=search,
            sort_by=sort_by,
            sort_order=sort_order,
            page=page,
            limit=limit,
        )

    return dependency


list_query = content_query_dependency()
brief_query = content_query_dependency(default_limit=20)
