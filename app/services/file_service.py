"""Standalone media uploads that are not attached to a content item or profile."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.db.models.media_blob import MediaBlob
from app.db.models.user import User
from app.media.codec import decode_upload
from app.media.schemas import UploadedFile
from app.services.errors import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)

MAX_FILES_PER_REQUEST = 10

# Multipart fields accepted by the multi-field upload and how many files each may carry
UPLOAD_FIELD_LIMITS = {"profilePicture": 1, "coverImage": 1, "images": 8, "documents": 5}


class FileService:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def store_upload(self, upload: UploadedFile, user: User) -> MediaBlob:
        decoded = decode_upload(upload, settings.upload_max_bytes)
        blob = MediaBlob(
            data=decoded.data,
            content_type=decoded.content_type,
            original_name=decoded.original_name,
            size=decoded.size,
            uploaded_at=decoded.uploaded_at,
            uploaded_by_id=user.id,
        )
        self._session.add(blob)
        await self._session.flush()
        logger.info(
            "File uploaded",
            extra={"blob_id": blob.id, "size": blob.size, "user_id": user.id},
        )
        return blob

    async def store_uploads(self, uploads: Sequence[UploadedFile], user: User) -> list[MediaBlob]:
        """Store every file or none of them; a rejected file fails the whole request."""
        if not uploads:
            raise InvalidInputError("No files uploaded")
        if len(uploads) > MAX_FILES_PER_REQUEST:
            raise InvalidInputError(
                f"At most {MAX_FILES_PER_REQUEST} files can be uploaded at once",
                details={"maxFiles": MAX_FILES_PER_REQUEST},
            )
        return [await self.store_upload(upload, user) for upload in uploads]

    async def store_field_uploads(
        self, uploads: Mapping[str, Sequence[UploadedFile]], user: User
    ) -> dict[str, list[MediaBlob]]:
        """Store files grouped by form field; every field is checked before anything is stored."""
        if not any(uploads.values()):
            raise InvalidInputError("No files uploaded")
        for field_name, files in uploads.items():
            max_files = UPLOAD_FIELD_LIMITS.get(field_name)
            if max_files is None:
                raise InvalidInputError(
                    f"Unexpected file field '{field_name}'",
                    details={"allowedFields": list(UPLOAD_FIELD_LIMITS)},
                )
            if len(files) > max_files:
                raise InvalidInputError(
                    f"At most {max_files} files allowed for '{field_name}'",
                    details={"field": field_name, "maxFiles": max_files},
                )
        return {
            field_name: [await self.store_upload(upload, user) for upload in files]
            for field_name, files in uploads.items()
            if files
        }

    async def get_file(self, blob_id: int) -> MediaBlob:
        blob = await self._session.scalar(select(MediaBlob).where(MediaBlob.id == blob_id))
        if blob is None or blob.data is None:
            raise NotFoundError("File not found")
        return blob


def file_service_factory_provider() -> Any:
    def factory(session: AsyncSession) -> FileService:
        return FileService(session)

    return factory
