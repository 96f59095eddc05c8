"""Response models for auth API endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from app.api.schemas.base import CamelModel
from app.db.models.user import User
from app.services.auth_service import KindStatistics, Statistics


def profile_picture_url(user: User) -> str | None:
    if user.profile_picture_id is None:
        return None
    return f"/api/users/{user.id}/profile-picture"


class UserResponse(CamelModel):
    """Response model for user information. The password hash is never included."""

    id: int = Field(..., examples=[123])
    name: str = Field(..., examples=["Alex Doe"])
    email: str = Field(..., examples=["alex@example.com"])
    phone: str | None = None
    role: str = Field(..., examples=["user"])
    is_active: bool
    last_login: datetime | None = None
    profile_picture_url: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> UserResponse:
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            phone=user.phone,
            role=user.role,
            is_active=user.is_active,
            last_login=user.last_login,
            profile_picture_url=profile_picture_url(user),
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class LoginResponse(CamelModel):
    """Authenticated user plus a bearer access token."""

    user: UserResponse
    access_token: str = Field(..., examples=["eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."])
    token_type: str = "bearer"


class KindStatisticsResponse(CamelModel):
    total: int
    published: int
    recent: int = Field(..., description="Created in the last 7 days")
    published_percentage: float

    @classmethod
    def from_stats(cls, stats: KindStatistics) -> KindStatisticsResponse:
        return cls(
            total=stats.total,
            published=stats.published,
            recent=stats.recent,
            published_percentage=stats.published_percentage,
        )


class StatisticsResponse(CamelModel):
    total_users: int
    active_users: int
    total_categories: int
    total_content: int
    total_published: int
    total_recent: int
    by_kind: dict[str, KindStatisticsResponse]

    @classmethod
    def from_stats(cls, stats: Statistics) -> StatisticsResponse:
        return cls(
            total_users=stats.total_users,
            active_users=stats.active_users,
            total_categories=stats.total_categories,
            total_content=stats.total_content,
            total_published=stats.total_published,
            total_recent=stats.total_recent,
            by_kind={
                name: KindStatisticsResponse.from_stats(kind) for name, kind in stats.kinds.items()
            },
        )
