"""User service layer - business logic for accounts, profiles and password reset."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.auth import (
    generate_one_time_code,
    get_password_hash,
    one_time_codes_match,
    verify_password,
)
from app.core.config import settings
from app.db.base import ensure_utc, utcnow
from app.db.models.category import Category
from app.db.models.content_item import ContentItem
from app.db.models.media_blob import MediaBlob
from app.db.models.user import User, UserRole
from app.mail.client import MailClient
from app.media.codec import coerce_media_input, decode_media
from app.services.content_kinds import CONTENT_KINDS
from app.services.content_query import LIKE_ESCAPE, Page, contains_pattern, fetch_page
from app.services.errors import (
    AccountDisabledError,
    InvalidCredentialsError,
    InvalidInputError,
    InvalidOneTimeCodeError,
    NotFoundError,
    PasswordTooLongError,
    UserAlreadyExistsError,
)

logger = logging.getLogger(__name__)

RECENT_WINDOW = timedelta(days=7)


@dataclass
class KindStatistics:
    total: int
    published: int
    recent: int

    @property
    def published_percentage(self) -> float:
        if self.total == 0:
            return 0.0
        return round(self.published / self.total * 100, 2)


@dataclass
class Statistics:
    total_users: int
    active_users: int
    total_categories: int
    kinds: dict[str, KindStatistics] = field(default_factory=dict)

    @property
    def total_content(self) -> int:
        return sum(kind.total for kind in self.kinds.values())

    @property
    def total_published(self) -> int:
        return sum(kind.published for kind in self.kinds.values())

    @property
    def total_recent(self) -> int:
        return sum(kind.recent for kind in self.kinds.values())


def _hash_password(password: str) -> str:
    try:
        return get_password_hash(password)
    except ValueError as e:
        raise PasswordTooLongError() from e


class AuthService:
    """Service for account lifecycle, profiles and the one-time-code reset flow."""

    def __init__(self, session: AsyncSession, mail_client: MailClient) -> None:
        self._session = session
        self._mail_client = mail_client

    async def _get_by_email(self, email: str) -> User | None:
        return await self._session.scalar(select(User).where(User.email == email.strip().lower()))

    async def register_user(
        self, name: str, email: str, password: str, phone: str | None = None
    ) -> User:
        """Register a new user.

        Args:
            name: Display name
            email: Email address, stored lowercased
            password: Plain text password (will be hashed)
            phone: Optional phone number

        Returns:
            The newly created User object

        Raises:
            UserAlreadyExistsError: If email is already registered
            PasswordTooLongError: If password exceeds 72 bytes when UTF-8 encoded
        """
        normalized_email = email.strip().lower()
        if await self._get_by_email(normalized_email) is not None:
            raise UserAlreadyExistsError()

        user = User(
            name=name.strip(),
            email=normalized_email,
            hashed_password=_hash_password(password),
            phone=phone,
            role=UserRole.USER.value,
            is_active=True,
        )
        self._session.add(user)
        try:
            await self._session.flush()
        except IntegrityError as e:
            # Lost a race against a concurrent registration with the same email
            raise UserAlreadyExistsError() from e

        logger.info("User registered", extra={"user_id": user.id})
        return user

    async def authenticate_user(self, email: str, password: str) -> User:
        """Authenticate a user with email and password and record the login time.

        Raises:
            InvalidCredentialsError: If email or password is incorrect
            AccountDisabledError: If the account has been deactivated
            PasswordTooLongError: If password exceeds 72 bytes when UTF-8 encoded
        """
        user = await self._get_by_email(email)
        if user is None:
            raise InvalidCredentialsError()

        try:
            password_valid = verify_password(password, user.hashed_password)
        except ValueError as e:
            raise PasswordTooLongError() from e

        if not password_valid:
            raise InvalidCredentialsError()
        if not user.is_active:
            raise AccountDisabledError()

        user.last_login = utcnow()
        await self._session.flush()
        return user

    async def get_user_by_id(self, user_id: int) -> User | None:
        return await self._session.get(User, user_id)

    async def update_profile(
        self, user: User, *, name: str | None = None, phone: str | None = None
    ) -> User:
        if name is not None:
            if not name.strip():
                raise InvalidInputError("Name cannot be empty", details={"field": "name"})
            user.name = name.strip()
        if phone is not None:
            user.phone = phone or None
        await self._session.flush()
        return user

    async def update_profile_picture(self, user: User, raw: Any) -> User:
        """Replace the caller's profile picture. The previous blob is deleted with it."""
        decoded = decode_media(coerce_media_input(raw), settings.profile_picture_max_bytes)
        owner = await self._session.scalar(
            select(User)
            .where(User.id == user.id)
            .options(selectinload(User.profile_picture))
            .execution_options(populate_existing=True)
        )
        if owner is None:
            raise NotFoundError("User not found")
        owner.profile_picture = MediaBlob(
            data=decoded.data,
            content_type=decoded.content_type,
            original_name=decoded.original_name,
            size=decoded.size,
            uploaded_at=decoded.uploaded_at,
            source_url=decoded.source_url,
        )
        await self._session.flush()
        return owner

    async def get_profile_picture(self, user_id: int) -> MediaBlob:
        user = await self._session.scalar(
            select(User).where(User.id == user_id).options(selectinload(User.profile_picture))
        )
        if user is None:
            raise NotFoundError("User not found")
        if user.profile_picture is None or user.profile_picture.data is None:
            raise NotFoundError("Profile picture not found")
        return user.profile_picture

    async def issue_one_time_code(self, user: User) -> str:
        code = generate_one_time_code()
        user.otp_code = code
        user.otp_expires_at = utcnow() + timedelta(minutes=settings.otp_expire_minutes)
        await self._session.flush()
        return code

    def verify_one_time_code(self, user: User, code: str) -> None:
        """Check ``code`` against the stored one and clear it on success.

        Raises:
            InvalidOneTimeCodeError: No code issued, the code differs, or it has expired
        """
        if user.otp_code is None or user.otp_expires_at is None:
            raise InvalidOneTimeCodeError()
        if not one_time_codes_match(user.otp_code, code.strip()):
            raise InvalidOneTimeCodeError()
        if ensure_utc(user.otp_expires_at) < utcnow():
            raise InvalidOneTimeCodeError()
        user.otp_code = None
        user.otp_expires_at = None

    async def request_password_reset(self, email: str) -> None:
        """Issue a one-time code and mail it to the account owner.

        Raises:
            NotFoundError: No account with this email
            MailDeliveryError: The mail could not be handed off; the request transaction
                rolls back so the code is not left behind
        """
        user = await self._get_by_email(email)
        if user is None:
            raise NotFoundError("User not found with this email")
        code = await self.issue_one_time_code(user)
        await self._mail_client.send_one_time_code(user.email, code, user.name)
        logger.info("Password reset code issued", extra={"user_id": user.id})

    async def reset_password(self, email: str, code: str, new_password: str) -> None:
        user = await self._get_by_email(email)
        if user is None:
            raise InvalidOneTimeCodeError()
        self.verify_one_time_code(user, code)
        user.hashed_password = _hash_password(new_password)
        await self._session.flush()
        logger.info("Password reset completed", extra={"user_id": user.id})

    async def list_users(
        self,
        *,
        search: str | None = None,
        role: str | None = None,
        is_active: bool | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> Page[User]:
        filters = []
        if search:
            pattern = contains_pattern(search)
            filters.append(
                or_(
                    User.name.ilike(pattern, escape=LIKE_ESCAPE),
                    User.email.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )
        if role:
            filters.append(User.role == role)
        if is_active is not None:
            filters.append(User.is_active.is_(is_active))
        return await fetch_page(
            self._session,
            select(User),
            filters,
            User.created_at.desc(),
            User.id,
            page,
            limit,
        )

    async def _count(self, statement: Any) -> int:
        return await self._session.scalar(statement) or 0

    async def statistics(self) -> Statistics:
        since = utcnow() - RECENT_WINDOW
        stats = Statistics(
            total_users=await self._count(select(func.count()).select_from(User)),
            active_users=await self._count(
                select(func.count()).select_from(User).where(User.is_active.is_(True))
            ),
            total_categories=await self._count(select(func.count()).select_from(Category)),
        )
        for name in CONTENT_KINDS:
            of_kind = select(func.count()).select_from(ContentItem).where(
                ContentItem.kind == name.value
            )
            stats.kinds[name.value] = KindStatistics(
                total=await self._count(of_kind),
                published=await self._count(of_kind.where(ContentItem.is_published.is_(True))),
                recent=await self._count(of_kind.where(ContentItem.created_at >= since)),
            )
        return stats


def auth_service_factory_provider(mail_client: MailClient) -> Any:
    def factory(session: AsyncSession) -> AuthService:
        return AuthService(session, mail_client)

    return factory
