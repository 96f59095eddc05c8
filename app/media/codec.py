"""Normalize inbound image payloads into one stored shape and project it back out."""

from __future__ import annotations

import base64
import binascii
import mimetypes
import re
from typing import Any

from fastapi import Response
from pydantic import ValidationError

from app.db.base import ensure_utc
from app.media.schemas import (
    DecodedMedia,
    EmbeddedMediaInput,
    EncodedMedia,
    MediaInput,
    ObjectUrlMediaInput,
    StoredMedia,
    UploadedFile,
)

GENERIC_CONTENT_TYPE = "application/octet-stream"
ALLOWED_IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})

_DATA_URI_PATTERN = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.*)$", re.DOTALL
)
_WHITESPACE_PATTERN = re.compile(r"\s+")


class MediaError(Exception):
    """Base error for media payloads that cannot be stored."""

    def __init__(self, message: str, error_code: str) -> None:
        super().__init__(message)
        self.error_code = error_code


class PayloadTooLargeError(MediaError):
    def __init__(self, max_size: int) -> None:
        super().__init__(
            f"File size exceeds maximum limit of {max_size / (1024 * 1024):g}MB",
            "payload_too_large",
        )
        self.max_size = max_size


class UnsupportedMediaTypeError(MediaError):
    def __init__(self, content_type: str | None) -> None:
        super().__init__(
            f"File type {content_type or 'unknown'} is not allowed", "unsupported_media_type"
        )


class InvalidMediaError(MediaError):
    def __init__(self, message: str = "Media payload is not valid base64 data") -> None:
        super().__init__(message, "invalid_media")


def sniff_content_type(data: bytes) -> str | None:
    if data.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data[:6] in (b"GIF87a", b"GIF89a"):
        return "image/gif"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return None


def _default_name(content_type: str) -> str:
    extension = mimetypes.guess_extension(content_type) or ""
    return f"image{extension}"


def _check_type(content_type: str | None) -> str:
    if content_type is None or content_type.lower() not in ALLOWED_IMAGE_TYPES:
        raise UnsupportedMediaTypeError(content_type)
    return content_type.lower()


def _check_size(data: bytes, max_size: int) -> None:
    if len(data) > max_size:
        raise PayloadTooLargeError(max_size)


def _b64decode(value: str) -> bytes:
    try:
        return base64.b64decode(_WHITESPACE_PATTERN.sub("", value), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidMediaError() from exc


def decode_upload(upload: UploadedFile, max_size: int) -> DecodedMedia:
    _check_size(upload.data, max_size)
    declared = upload.content_type
    if not declared or declared == GENERIC_CONTENT_TYPE:
        declared = sniff_content_type(upload.data) or declared
    content_type = _check_type(declared)
    return DecodedMedia(
        data=upload.data,
        content_type=content_type,
        original_name=upload.filename or _default_name(content_type),
        size=len(upload.data),
    )


def decode_embedded(payload: EmbeddedMediaInput, max_size: int) -> DecodedMedia:
    match = _DATA_URI_PATTERN.match(payload.data)
    encoded = match.group("data") if match else payload.data
    data = _b64decode(encoded)
    _check_size(data, max_size)
    declared = payload.content_type or (match.group("mime") if match else None)
    content_type = _check_type(declared or sniff_content_type(data))
    decoded = DecodedMedia(
        data=data,
        content_type=content_type,
        original_name=payload.original_name or _default_name(content_type),
        # the byte count is always recomputed; a client supplied size is not trusted
        size=len(data),
    )
    if payload.uploaded_at is not None:
        decoded.uploaded_at = ensure_utc(payload.uploaded_at)
    return decoded


def decode_object_url(payload: ObjectUrlMediaInput) -> DecodedMedia:
    guessed, _ = mimetypes.guess_type(payload.object_url)
    return DecodedMedia(
        data=None,
        content_type=guessed or GENERIC_CONTENT_TYPE,
        original_name=payload.object_url.rsplit("/", 1)[-1] or "external",
        size=0,
        source_url=payload.object_url,
    )


def decode_base64_string(value: str, max_size: int) -> DecodedMedia:
    if not value.strip():
        raise InvalidMediaError("Media payload is empty")
    match = _DATA_URI_PATTERN.match(value.strip())
    if match:
        return decode_embedded(
            EmbeddedMediaInput(data=match.group("data"), content_type=match.group("mime")),
            max_size,
        )
    return decode_embedded(EmbeddedMediaInput(data=value), max_size)


def decode_media(value: MediaInput, max_size: int) -> DecodedMedia:
    """Decode any supported inbound representation into the stored shape.

    Raises:
        PayloadTooLargeError: Decoded bytes exceed ``max_size``
        UnsupportedMediaTypeError: MIME type is not an allowed image type
        InvalidMediaError: Payload is not decodable
    """
    if isinstance(value, UploadedFile):
        return decode_upload(value, max_size)
    if isinstance(value, EmbeddedMediaInput):
        return decode_embedded(value, max_size)
    if isinstance(value, ObjectUrlMediaInput):
        return decode_object_url(value)
    return decode_base64_string(value, max_size)


def coerce_media_input(raw: Any) -> MediaInput:
    """Turn a JSON value (string or object) into one of the tagged input variants."""
    if isinstance(raw, (UploadedFile, EmbeddedMediaInput, ObjectUrlMediaInput, str)):
        return raw
    if isinstance(raw, dict):
        try:
            if "objectURL" in raw or "object_url" in raw:
                return ObjectUrlMediaInput.model_validate(raw)
            return EmbeddedMediaInput.model_validate(raw)
        except ValidationError as exc:
            raise InvalidMediaError(
                "Media object must contain base64 'data' or an 'objectURL'"
            ) from exc
    raise InvalidMediaError("Unsupported media payload")


def encode_media(blob: StoredMedia, url: str) -> EncodedMedia:
    """Project a stored blob for a JSON response.

    External media keeps ``data`` null and reports its own URL.
    """
    data = base64.b64encode(blob.data).decode("ascii") if blob.data is not None else None
    return EncodedMedia(
        data=data,
        content_type=blob.content_type,
        original_name=blob.original_name,
        size=blob.size,
        uploaded_at=ensure_utc(blob.uploaded_at),
        url=blob.source_url if blob.data is None and blob.source_url else url,
    )


def _header_filename(name: str) -> str:
    # Printable ASCII only; quotes, backslashes and control characters would break the header
    ascii_name = name.encode("ascii", "replace").decode("ascii")
    cleaned = "".join(c for c in ascii_name if " " <= c <= "~" and c not in '"\\')
    return cleaned or "file"


def media_response(blob: StoredMedia) -> Response:
    """Raw bytes with inline disposition, for binary retrieval endpoints."""
    data = blob.data or b""
    return Response(
        content=data,
        media_type=blob.content_type,
        headers={
            "Content-Disposition": f'inline; filename="{_header_filename(blob.original_name)}"',
            "Content-Length": str(len(data)),
        },
    )
