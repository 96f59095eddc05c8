"""Response models for standalone file uploads."""

from __future__ import annotations

from app.db.models.media_blob import MediaBlob
from app.media.codec import encode_media
from app.media.schemas import EncodedMedia


def file_url(blob: MediaBlob) -> str:
    return f"/api/files/{blob.id}"


class FileResponse(EncodedMedia):
    id: int

    @classmethod
    def from_blob(cls, blob: MediaBlob) -> FileResponse:
        encoded = encode_media(blob, file_url(blob))
        return cls(id=blob.id, **encoded.model_dump())
