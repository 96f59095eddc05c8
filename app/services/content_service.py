"""Content service - news, blog posts and articles behind one generic store."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import defer, selectinload

from app.core.access import ensure_author_or_admin
from app.core.config import settings
from app.db.base import ensure_utc
from app.db.models.comment import ContentComment
from app.db.models.content_item import ContentItem
from app.db.models.like import ContentLike
from app.db.models.media_blob import MediaBlob
from app.db.models.user import User
from app.media.codec import coerce_media_input, decode_media
from app.services.category_service import CategoryService
from app.services.content_kinds import (
    EXTENSION_FIELDS,
    REFERENCES,
    SEO_KEYWORDS,
    ContentKind,
)
from app.services.content_query import (
    CONTENT_SORT_FIELDS,
    ContentQuery,
    Page,
    content_filters,
    fetch_page,
    resolve_sort,
)
from app.services.errors import ConflictError, InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = {
    "category_id": "Category is required",
    "title": "Title is required",
    "html_data": "Content (htmlData) is required",
}
COMMON_FIELDS = ("subtitle", "publish_date", "is_published", "tags")
# Stored as empty lists rather than null when the kind carries them
LIST_EXTENSION_FIELDS = (REFERENCES, SEO_KEYWORDS)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class ContentService:
    """CRUD and engagement operations for a single content kind."""

    def __init__(
        self, session: AsyncSession, kind: ContentKind, categories: CategoryService
    ) -> None:
        self._session = session
        self._kind = kind
        self._categories = categories

    @property
    def kind(self) -> ContentKind:
        return self._kind

    def _not_found(self) -> NotFoundError:
        return NotFoundError(f"{self._kind.label.capitalize()} not found")

    def _in_kind(self, item_id: int) -> Any:
        return (ContentItem.id == item_id) & (ContentItem.kind == self._kind.name.value)

    async def _ensure_exists(self, item_id: int) -> None:
        found = await self._session.scalar(select(ContentItem.id).where(self._in_kind(item_id)))
        if found is None:
            raise self._not_found()

    async def _load(self, item_id: int, *, with_image: bool = False) -> ContentItem:
        options = [selectinload(ContentItem.author), selectinload(ContentItem.category)]
        if with_image:
            options.append(selectinload(ContentItem.featured_image))
        item = await self._session.scalar(
            select(ContentItem)
            .where(self._in_kind(item_id))
            .options(*options)
            .execution_options(populate_existing=True)
        )
        if item is None:
            raise self._not_found()
        return item

    async def count(self) -> int:
        count = await self._session.scalar(
            select(func.count())
            .select_from(ContentItem)
            .where(ContentItem.kind == self._kind.name.value)
        )
        return count or 0

    async def list_items(self, query: ContentQuery) -> Page[ContentItem]:
        """One page of summaries; ``html_data`` is not loaded."""
        return await self._fetch(query, brief=False)

    async def list_brief(self, query: ContentQuery) -> Page[ContentItem]:
        """One page including ``html_data`` so the caller can derive brief text."""
        return await self._fetch(query, brief=True)

    async def _fetch(self, query: ContentQuery, *, brief: bool) -> Page[ContentItem]:
        order_by = resolve_sort(CONTENT_SORT_FIELDS, query.sort_by, query.sort_order)
        statement = select(ContentItem).options(
            selectinload(ContentItem.author),
            selectinload(ContentItem.category),
            selectinload(ContentItem.featured_image).load_only(
                MediaBlob.id, MediaBlob.source_url
            ),
        )
        if not brief:
            statement = statement.options(defer(ContentItem.html_data, raiseload=True))
        return await fetch_page(
            self._session,
            statement,
            content_filters(self._kind.name.value, query, settings.list_includes_drafts),
            order_by,
            ContentItem.id,
            query.page,
            query.limit,
        )

    async def get_item(self, item_id: int) -> ContentItem:
        """Fetch one item and count the view.

        The increment is a single ``views = views + 1`` statement so concurrent
        readers never lose an update.
        """
        result = await self._session.execute(
            update(ContentItem)
            .where(self._in_kind(item_id))
            .values(views=ContentItem.views + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise self._not_found()
        return await self._load(item_id, with_image=True)

    def _apply_fields(self, item: ContentItem, fields: Mapping[str, Any]) -> None:
        for field_name in COMMON_FIELDS:
            if field_name in fields:
                value = fields[field_name]
                if field_name == "publish_date":
                    if value is None:
                        continue
                    value = ensure_utc(value)
                elif field_name in ("tags", "is_published") and value is None:
                    continue
                setattr(item, field_name, value)
        for field_name in EXTENSION_FIELDS:
            if field_name not in fields or not self._kind.has_field(field_name):
                continue
            value = fields[field_name]
            if value is None and field_name in LIST_EXTENSION_FIELDS:
                continue
            setattr(item, field_name, value)

    def _decode_image(self, raw: Any) -> MediaBlob:
        decoded = decode_media(coerce_media_input(raw), settings.featured_image_max_bytes)
        return MediaBlob(
            data=decoded.data,
            content_type=decoded.content_type,
            original_name=decoded.original_name,
            size=decoded.size,
            uploaded_at=decoded.uploaded_at,
            source_url=decoded.source_url,
        )

    async def create_item(self, author: User, fields: Mapping[str, Any]) -> ContentItem:
        """Create an item authored by ``author``.

        Raises:
            InvalidInputError: A required field is missing or blank, or the category does not exist
            MediaError: The featured image could not be decoded or was rejected
        """
        for field_name, message in REQUIRED_FIELDS.items():
            if _is_blank(fields.get(field_name)):
                raise InvalidInputError(message, details={"field": field_name})

        category_id = int(fields["category_id"])
        if not await self._categories.exists(category_id):
            raise InvalidInputError("Category not found", details={"field": "category_id"})

        item = ContentItem(
            kind=self._kind.name.value,
            category_id=category_id,
            author_id=author.id,
            title=str(fields["title"]).strip(),
            html_data=fields["html_data"],
            views=0,
            likes=0,
            shares=0,
            tags=[],
            is_published=False,
        )
        for field_name in LIST_EXTENSION_FIELDS:
            if self._kind.has_field(field_name):
                setattr(item, field_name, [])
        self._apply_fields(item, fields)
        if fields.get("featured_image") is not None:
            item.featured_image = self._decode_image(fields["featured_image"])

        self._session.add(item)
        await self._session.flush()
        await self._categories.refresh_item_count(category_id)
        logger.info(
            "Content item created",
            extra={"kind": self._kind.name.value, "item_id": item.id, "author_id": author.id},
        )
        return await self._load(item.id, with_image=True)

    async def update_item(
        self, item_id: int, user: User, fields: Mapping[str, Any]
    ) -> ContentItem:
        """Partial update; only keys present in ``fields`` are touched.

        ``featured_image`` set to None removes the stored image. The author never changes.
        """
        item = await self._load(item_id, with_image=True)
        ensure_author_or_admin(item.author_id, user, f"update this {self._kind.label}")

        for field_name in ("title", "html_data"):
            if field_name in fields and _is_blank(fields[field_name]):
                raise InvalidInputError(
                    REQUIRED_FIELDS[field_name], details={"field": field_name}
                )

        previous_category_id = item.category_id
        if fields.get("category_id") is not None:
            new_category_id = int(fields["category_id"])
            if new_category_id != previous_category_id:
                if not await self._categories.exists(new_category_id):
                    raise InvalidInputError(
                        "Category not found", details={"field": "category_id"}
                    )
                item.category_id = new_category_id

        if "title" in fields:
            item.title = str(fields["title"]).strip()
        if "html_data" in fields:
            item.html_data = fields["html_data"]
        self._apply_fields(item, fields)

        if "featured_image" in fields:
            raw = fields["featured_image"]
            item.featured_image = None if raw is None else self._decode_image(raw)

        await self._session.flush()
        if item.category_id != previous_category_id:
            await self._categories.refresh_item_count(previous_category_id)
            await self._categories.refresh_item_count(item.category_id)
        return await self._load(item.id, with_image=True)

    async def delete_item(self, item_id: int, user: User) -> None:
        """Hard delete together with comments, likes and the featured image."""
        item = await self._load(item_id, with_image=True)
        ensure_author_or_admin(item.author_id, user, f"delete this {self._kind.label}")

        category_id = item.category_id
        await self._session.execute(
            delete(ContentComment)
            .where(ContentComment.content_item_id == item.id)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(
            delete(ContentLike)
            .where(ContentLike.content_item_id == item.id)
            .execution_options(synchronize_session=False)
        )
        await self._session.delete(item)
        await self._session.flush()
        await self._categories.refresh_item_count(category_id)
        logger.info(
            "Content item deleted",
            extra={"kind": self._kind.name.value, "item_id": item_id, "user_id": user.id},
        )

    async def toggle_like(self, item_id: int, user: User) -> tuple[bool, int]:
        """Add the caller's like, or remove it when already present.

        Returns:
            ``(liked, likes)`` where ``likes`` is the recomputed number of like records
        """
        await self._ensure_exists(item_id)
        existing = await self._session.scalar(
            select(ContentLike.id).where(
                ContentLike.content_item_id == item_id, ContentLike.user_id == user.id
            )
        )
        if existing is not None:
            await self._session.execute(
                delete(ContentLike)
                .where(ContentLike.id == existing)
                .execution_options(synchronize_session=False)
            )
            liked = False
        else:
            self._session.add(ContentLike(content_item_id=item_id, user_id=user.id))
            try:
                await self._session.flush()
            except IntegrityError as e:
                raise ConflictError("Like was toggled concurrently, please retry") from e
            liked = True

        likes = (
            await self._session.scalar(
                select(func.count())
                .select_from(ContentLike)
                .where(ContentLike.content_item_id == item_id)
            )
            or 0
        )
        await self._session.execute(
            update(ContentItem)
            .where(ContentItem.id == item_id)
            .values(likes=likes)
            .execution_options(synchronize_session=False)
        )
        return liked, likes

    async def share(self, item_id: int) -> int:
        """Count one share and return the new total."""
        if not self._kind.supports_shares:
            raise self._not_found()
        result = await self._session.execute(
            update(ContentItem)
            .where(self._in_kind(item_id))
            .values(shares=ContentItem.shares + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise self._not_found()
        shares = await self._session.scalar(
            select(ContentItem.shares).where(ContentItem.id == item_id)
        )
        return shares or 0

    async def add_comment(self, item_id: int, user: User, text: str | None) -> ContentComment:
        if text is None or not text.strip():
            raise InvalidInputError("Comment text is required", details={"field": "text"})
        await self._ensure_exists(item_id)

        comment = ContentComment(content_item_id=item_id, author_id=user.id, text=text.strip())
        self._session.add(comment)
        await self._session.flush()
        loaded = await self._session.scalar(
            select(ContentComment)
            .where(ContentComment.id == comment.id)
            .options(selectinload(ContentComment.author))
            .execution_options(populate_existing=True)
        )
        assert loaded is not None
        return loaded

    async def list_comments(self, item_id: int) -> list[ContentComment]:
        await self._ensure_exists(item_id)
        result = await self._session.execute(
            select(ContentComment)
            .where(ContentComment.content_item_id == item_id)
            .options(selectinload(ContentComment.author))
            .order_by(ContentComment.created_at, ContentComment.id)
        )
        return list(result.scalars().all())

    async def get_featured_image(self, item_id: int) -> MediaBlob:
        """The stored image bytes. External object URLs have nothing to serve."""
        item = await self._session.scalar(
            select(ContentItem)
            .where(self._in_kind(item_id))
            .options(selectinload(ContentItem.featured_image))
        )
        if item is None:
            raise self._not_found()
        if item.featured_image is None or item.featured_image.data is None:
            raise NotFoundError("Featured image not found")
        return item.featured_image


def content_service_factory_provider() -> Any:
    def factory(session: AsyncSession, kind: ContentKind) -> ContentService:
        return ContentService(session, kind, CategoryService(session))

    return factory
