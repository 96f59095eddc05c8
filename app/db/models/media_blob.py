from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, utcnow


class MediaBlob(Base):
    """Binary payload stored beside the row that owns it."""

    __tablename__ = "media_blobs"

    id: Mapped[int] = mapped_column(primary_key=True)
    # None when only an external object URL was supplied
    data: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)
    content_type: Mapped[str] = mapped_column(String(100))
    original_name: Mapped[str] = mapped_column(String(255))
    size: Mapped[int] = mapped_column(Integer, default=0)
    uploaded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    source_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)

    # Set for standalone uploads; no FK so users and blobs stay acyclic
    uploaded_by_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
