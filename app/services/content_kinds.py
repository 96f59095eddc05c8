"""Per-kind descriptors for the generic content item.

News, blog posts and articles share one table and one service; the descriptor
says which extension fields and engagement operations a kind exposes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ContentKindName(StrEnum):
    NEWS = "news"
    BLOG = "blog"
    ARTICLE = "article"


READ_TIME = "read_time"
REFERENCES = "references"
SEO_KEYWORDS = "seo_keywords"
SEO_DESCRIPTION = "seo_description"

EXTENSION_FIELDS = (READ_TIME, REFERENCES, SEO_KEYWORDS, SEO_DESCRIPTION)


@dataclass(frozen=True)
class ContentKind:
    name: ContentKindName
    label: str
    plural_label: str
    extension_fields: frozenset[str] = frozenset()
    supports_shares: bool = False

    @property
    def route_prefix(self) -> str:
        return f"/{self.name.value}"

    def has_field(self, field_name: str) -> bool:
        return field_name in self.extension_fields


NEWS = ContentKind(
    name=ContentKindName.NEWS,
    label="news item",
    plural_label="news",
)
BLOG = ContentKind(
    name=ContentKindName.BLOG,
    label="blog post",
    plural_label="blog posts",
    extension_fields=frozenset({READ_TIME}),
)
ARTICLE = ContentKind(
    name=ContentKindName.ARTICLE,
    label="article",
    plural_label="articles",
    extension_fields=frozenset(EXTENSION_FIELDS),
    supports_shares=True,
)

CONTENT_KINDS: dict[ContentKindName, ContentKind] = {
    kind.name: kind for kind in (NEWS, BLOG, ARTICLE)
}


def get_content_kind(name: str | ContentKindName) -> ContentKind:
    return CONTENT_KINDS[ContentKindName(name)]
