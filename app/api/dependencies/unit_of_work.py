"""Unit of Work: one transaction per request, session-scoped services from registry."""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from typing import Any, cast

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_session_maker
from app.services.auth_service import AuthService
from app.services.category_service import CategoryService
from app.services.content_kinds import ContentKind
from app.services.content_service import ContentService
from app.services.file_service import FileService


class UnitOfWork:
    """Holds the request's session and exposes session-scoped services from the registry."""

    def __init__(self, session: AsyncSession, services: Mapping[str, Any]) -> None:
        self._session = session
        self._services = services
        self._auth_service: AuthService | None = None
        self._category_service: CategoryService | None = None
        self._file_service: FileService | None = None
        self._content_services: dict[str, ContentService] = {}

    @property
    def session(self) -> AsyncSession:
        return self._session

    def _resolve(self, key: str, *args: Any) -> Any:
        service = self._services[key]
        if callable(service):
            return service(self._session, *args)
        return service

    @property
    def auth_service(self) -> AuthService:
        """Session-scoped auth service."""
        if self._auth_service is None:
            resolved = cast(AuthService, self._resolve("auth_service"))
            self._auth_service = resolved
            return resolved
        return self._auth_service

    @property
    def category_service(self) -> CategoryService:
        """Session-scoped category service."""
        if self._category_service is None:
            resolved = cast(CategoryService, self._resolve("category_service"))
            self._category_service = resolved
            return resolved
        return self._category_service

    @property
    def file_service(self) -> FileService:
        """Session-scoped file service."""
        if self._file_service is None:
            resolved = cast(FileService, self._resolve("file_service"))
            self._file_service = resolved
            return resolved
        return self._file_service

    def content_service(self, kind: ContentKind) -> ContentService:
        """Session-scoped content service for one content kind."""
        key = kind.name.value
        if key not in self._content_services:
            self._content_services[key] = cast(
                ContentService, self._resolve("content_service", kind)
            )
        return self._content_services[key]


async def get_uow(request: Request) -> AsyncIterator[UnitOfWork]:
    """Per-request dependency: one session, commit on success, rollback on exception."""
    session_maker = get_session_maker()
    async with session_maker() as session:
        try:
            yield UnitOfWork(session, request.app.state.services)
            await session.commit()
        except Exception:
            await session.rollback()
            raise
