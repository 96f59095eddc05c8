"""Category service - CRUD plus the denormalized item count."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.access import ensure_author_or_admin
from app.core.html_text import slugify
from app.db.models.category import Category
from app.db.models.content_item import ContentItem
from app.db.models.media_blob import MediaBlob
from app.db.models.user import User
from app.services.content_query import (
    CONTENT_SORT_FIELDS,
    LIKE_ESCAPE,
    ContentQuery,
    Page,
    SortOrder,
    contains_pattern,
    content_filters,
    fetch_page,
    resolve_sort,
)
from app.services.errors import (
    CategoryInUseError,
    ConflictError,
    InvalidInputError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

CATEGORY_SORT_FIELDS: Mapping[str, Any] = {
    "name": Category.name,
    "createdAt": Category.created_at,
    "updatedAt": Category.updated_at,
    "itemCount": Category.item_count,
}

UPDATABLE_FIELDS = ("description", "color", "icon", "is_active")
DUPLICATE_MESSAGE = "Category with this name or slug already exists"


class CategoryService:
    """Category CRUD. Mutations are restricted to the creator or an admin."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def count(self) -> int:
        return await self._session.scalar(select(func.count()).select_from(Category)) or 0

    async def list_categories(
        self,
        *,
        is_active: bool | None = True,
        search: str | None = None,
        sort_by: str = "name",
        sort_order: SortOrder = "asc",
        page: int = 1,
        limit: int = 50,
    ) -> Page[Category]:
        filters = []
        if is_active is not None:
            filters.append(Category.is_active.is_(is_active))
        if search:
            pattern = contains_pattern(search)
            filters.append(
                or_(
                    Category.name.ilike(pattern, escape=LIKE_ESCAPE),
                    Category.description.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )
        return await fetch_page(
            self._session,
            select(Category).options(selectinload(Category.created_by)),
            filters,
            resolve_sort(CATEGORY_SORT_FIELDS, sort_by, sort_order),
            Category.id,
            page,
            limit,
        )

    async def get_category(self, category_id: int) -> Category:
        category = await self._session.scalar(
            select(Category)
            .where(Category.id == category_id)
            .options(selectinload(Category.created_by))
            .execution_options(populate_existing=True)
        )
        if category is None:
            raise NotFoundError("Category not found")
        return category

    async def get_category_by_slug(self, slug: str) -> Category:
        category = await self._session.scalar(
            select(Category)
            .where(Category.slug == slug.lower())
            .options(selectinload(Category.created_by))
        )
        if category is None:
            raise NotFoundError("Category not found")
        return category

    async def exists(self, category_id: int) -> bool:
        found = await self._session.scalar(select(Category.id).where(Category.id == category_id))
        return found is not None

    async def _ensure_unique(self, name: str, slug: str, exclude_id: int | None = None) -> None:
        statement = select(Category.id).where(or_(Category.name == name, Category.slug == slug))
        if exclude_id is not None:
            statement = statement.where(Category.id != exclude_id)
        if await self._session.scalar(statement.limit(1)) is not None:
            raise ConflictError(DUPLICATE_MESSAGE)

    async def _flush_unique(self) -> None:
        try:
            await self._session.flush()
        except IntegrityError as e:
            # Lost a race against a concurrent write with the same name or slug
            raise ConflictError(DUPLICATE_MESSAGE) from e

    async def create_category(
        self,
        creator: User,
        *,
        name: str,
        slug: str | None = None,
        description: str | None = None,
        color: str | None = None,
        icon: str | None = None,
        is_active: bool = True,
    ) -> Category:
        """Create a category owned by ``creator``.

        Raises:
            InvalidInputError: If the name is blank or yields an empty slug
            ConflictError: If the lowercased name or the slug is already taken
        """
        normalized_name = (name or "").strip().lower()
        if not normalized_name:
            raise InvalidInputError("Category name is required")
        normalized_slug = slugify(slug) if slug else slugify(normalized_name)
        if not normalized_slug:
            raise InvalidInputError("Category slug must contain letters or digits")

        await self._ensure_unique(normalized_name, normalized_slug)

        category = Category(
            name=normalized_name,
            slug=normalized_slug,
            description=description,
            is_active=is_active,
            created_by_id=creator.id,
            item_count=0,
        )
        if color:
            category.color = color
        if icon:
            category.icon = icon
        self._session.add(category)
        await self._flush_unique()
        logger.info("Category created", extra={"category_id": category.id, "slug": category.slug})
        return await self.get_category(category.id)

    async def update_category(
        self, category_id: int, user: User, fields: Mapping[str, Any]
    ) -> Category:
        """Apply a partial update. ``created_by`` and ``item_count`` are never changed here."""
        category = await self.get_category(category_id)
        ensure_author_or_admin(category.created_by_id, user, "update this category")

        new_name = category.name
        new_slug = category.slug
        if fields.get("name") is not None:
            new_name = str(fields["name"]).strip().lower()
            if not new_name:
                raise InvalidInputError("Category name is required")
        if fields.get("slug"):
            new_slug = slugify(str(fields["slug"]))
            if not new_slug:
                raise InvalidInputError("Category slug must contain letters or digits")
        if new_name != category.name or new_slug != category.slug:
            await self._ensure_unique(new_name, new_slug, exclude_id=category.id)

        category.name = new_name
        category.slug = new_slug
        for field_name in UPDATABLE_FIELDS:
            if field_name in fields and fields[field_name] is not None:
                setattr(category, field_name, fields[field_name])
        if "description" in fields and fields["description"] is None:
            category.description = None

        await self._flush_unique()
        return await self.get_category(category.id)

    async def delete_category(self, category_id: int, user: User) -> None:
        """Delete an unreferenced category.

        Raises:
            NotFoundError: No such category
            ForbiddenError: Caller is neither the creator nor an admin
            CategoryInUseError: Content items still reference it; carries the count
        """
        category = await self.get_category(category_id)
        ensure_author_or_admin(category.created_by_id, user, "delete this category")

        blocking = await self._count_items(category_id)
        if blocking > 0:
            raise CategoryInUseError(blocking)

        await self._session.delete(category)
        await self._session.flush()
        logger.info("Category deleted", extra={"category_id": category_id})

    async def _count_items(self, category_id: int) -> int:
        count = await self._session.scalar(
            select(func.count())
            .select_from(ContentItem)
            .where(ContentItem.category_id == category_id)
        )
        return count or 0

    async def refresh_item_count(self, category_id: int) -> int:
        """Recount the content items referencing ``category_id`` and store the result."""
        count = await self._count_items(category_id)
        await self._session.execute(
            update(Category).where(Category.id == category_id).values(item_count=count)
        )
        return count

    async def list_items(
        self, category_id: int, query: ContentQuery, kind: str | None, include_drafts: bool
    ) -> tuple[Category, Page[ContentItem]]:
        """A category together with one page of the content filed under it."""
        category = await self.get_category(category_id)
        query.category_id = category_id
        page = await fetch_page(
            self._session,
            select(ContentItem).options(
                selectinload(ContentItem.author),
                selectinload(ContentItem.category),
                selectinload(ContentItem.featured_image).load_only(
                    MediaBlob.id, MediaBlob.source_url
                ),
            ),
            content_filters(kind, query, include_drafts),
            resolve_sort(CONTENT_SORT_FIELDS, query.sort_by, query.sort_order),
            ContentItem.id,
            query.page,
            query.limit,
        )
        return category, page


def category_service_factory_provider() -> Any:
    def factory(session: AsyncSession) -> CategoryService:
        return CategoryService(session)

    return factory
