from app.media.codec import (
    ALLOWED_IMAGE_TYPES,
    InvalidMediaError,
    MediaError,
    PayloadTooLargeError,
    UnsupportedMediaTypeError,
    coerce_media_input,
    decode_media,
    encode_media,
    media_response,
)

__all__ = [
    "ALLOWED_IMAGE_TYPES",
    "InvalidMediaError",
    "MediaError",
    "PayloadTooLargeError",
    "UnsupportedMediaTypeError",
    "coerce_media_input",
    "decode_media",
    "encode_media",
    "media_response",
]
