from app.db.models.category import Category
from app.db.models.comment import ContentComment
from app.db.models.content_item import ContentItem
from app.db.models.like import ContentLike
from app.db.models.media_blob import MediaBlob
from app.db.models.user import User, UserRole

__all__ = [
    "Category",
    "ContentComment",
    "ContentItem",
    "ContentLike",
    "MediaBlob",
    "User",
    "UserRole",
]
