from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, TimestampMixin

DEFAULT_CATEGORY_COLOR = "#3B82F6"
DEFAULT_CATEGORY_ICON = "folder"


class Category(TimestampMixin, Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    slug: Mapped[str] = mapped_column(String(60), unique=True, index=True)
    description: Mapped[str | None] = mapped_column(String(200), nullable=True)
    color: Mapped[str] = mapped_column(String(7), default=DEFAULT_CATEGORY_COLOR)
    icon: Mapped[str] = mapped_column(String(50), default=DEFAULT_CATEGORY_ICON)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    created_by_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)

    # Denormalized; recomputed after every content write touching this category
    item_count: Mapped[int] = mapped_column(Integer, default=0)

    created_by = relationship("User", lazy="raise")

    @property
    def display_name(self) -> str:
        return self.name[:1].upper() + self.name[1:]
