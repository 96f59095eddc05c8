"""Author-or-admin authorization shared by every mutating content and category route."""

from __future__ import annotations

from app.db.models.user import User
from app.services.errors import ForbiddenError


def is_author_or_admin(owner_id: int, user: User) -> bool:
    return owner_id == user.id or user.is_admin


def ensure_author_or_admin(owner_id: int, user: User, action: str) -> None:
    """Raise ForbiddenError unless ``user`` owns the resource or is an admin.

    ``action`` completes the message, e.g. "update this article".
    """
    if not is_author_or_admin(owner_id, user):
        raise ForbiddenError(f"Not authorized to {action}")


def ensure_admin(user: User) -> None:
    if not user.is_admin:
        raise ForbiddenError("Access denied. Admin privileges required.")
