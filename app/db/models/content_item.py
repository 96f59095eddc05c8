from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, TimestampMixin, utcnow


class ContentItem(TimestampMixin, Base):
    """A publishable piece of content. ``kind`` selects news, blog or article."""

    __tablename__ = "content_items"

    id: Mapped[int] = mapped_column(primary_key=True)
    kind: Mapped[str] = mapped_column(String(20), index=True)
    category_id: Mapped[int] = mapped_column(ForeignKey("categories.id"), index=True)
    author_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)

    title: Mapped[str] = mapped_column(String(200))
    subtitle: Mapped[str | None] = mapped_column(String(500), nullable=True)
    html_data: Mapped[str] = mapped_column(Text)
    publish_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, index=True
    )
    is_published: Mapped[bool] = mapped_column(Boolean, default=False, index=True)

    views: Mapped[int] = mapped_column(Integer, default=0)
    likes: Mapped[int] = mapped_column(Integer, default=0)
    shares: Mapped[int] = mapped_column(Integer, default=0)
    tags: Mapped[list[str]] = mapped_column(JSON, default=list)

    # Kind-specific extension fields
    read_time: Mapped[int | None] = mapped_column(Integer, nullable=True)
    references: Mapped[list[Any] | None] = mapped_column("reference_links", JSON, nullable=True)
    seo_keywords: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    seo_description: Mapped[str | None] = mapped_column(String(300), nullable=True)

    featured_image_id: Mapped[int | None] = mapped_column(
        ForeignKey("media_blobs.id", ondelete="SET NULL"), nullable=True
    )

    category = relationship("Category", lazy="raise")
    author = relationship("User", lazy="raise")
    featured_image = relationship(
        "MediaBlob", lazy="raise", cascade="all, delete-orphan", single_parent=True
    )
