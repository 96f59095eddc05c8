from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.db.base import utcnow


class EmbeddedMediaInput(BaseModel):
    """Base64 payload with optional metadata, as sent inside a JSON body."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    data: str = Field(..., min_length=1, description="Base64 encoded bytes")
    content_type: str | None = None
    original_name: str | None = None
    size: int | None = None
    uploaded_at: datetime | None = None


class ObjectUrlMediaInput(BaseModel):
    """Reference to media hosted elsewhere. The URL is stored verbatim and never fetched."""

    object_url: str = Field(..., alias="objectURL", min_length=1, max_length=2048)

    model_config = ConfigDict(populate_by_name=True)


@dataclass(frozen=True)
class UploadedFile:
    """A multipart file already read into memory."""

    filename: str
    content_type: str
    data: bytes


MediaInput = UploadedFile | EmbeddedMediaInput | ObjectUrlMediaInput | str


@dataclass
class DecodedMedia:
    """Canonical stored shape, ready to be copied onto a ``MediaBlob`` row."""

    content_type: str
    original_name: str
    size: int
    data: bytes | None = None
    source_url: str | None = None
    uploaded_at: datetime = field(default_factory=utcnow)


class StoredMedia(Protocol):
    data: bytes | None
    content_type: str
    original_name: str
    size: int
    uploaded_at: datetime
    source_url: str | None


class EncodedMedia(BaseModel):
    """Transport shape: bytes inlined as base64 plus a retrieval URL."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    data: str | None = Field(None, description="Base64 encoded bytes, null for external media")
    content_type: str
    original_name: str
    size: int
    uploaded_at: datetime
    url: str
