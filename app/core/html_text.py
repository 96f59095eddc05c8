from __future__ import annotations

import re

BRIEF_CONTENT_LENGTH = 150

_TAG_PATTERN = re.compile(r"<[^>]*>")
_SLUG_SEPARATOR_PATTERN = re.compile(r"[^a-z0-9]+")
_HEX_COLOR_PATTERN = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")


def strip_tags(html: str) -> str:
    """Remove markup tags, leaving text and entities untouched."""
    return _TAG_PATTERN.sub("", html)


def brief_content(html: str | None, length: int = BRIEF_CONTENT_LENGTH) -> str:
    """Plain-text preview of ``html``: at most ``length`` characters plus an ellipsis."""
    if not html:
        return ""
    text = strip_tags(html)
    if len(text) > length:
        return text[:length] + "..."
    return text


def slugify(value: str) -> str:
    return _SLUG_SEPARATOR_PATTERN.sub("-", value.lower()).strip("-")


def is_hex_color(value: str) -> bool:
    return _HEX_COLOR_PATTERN.match(value) is not None
