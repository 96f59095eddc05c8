"""Integration tests for API rate limiting."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import pytest
from fastapi import status
from httpx import AsyncClient

from app.core.rate_limit import limiter
from tests.factories import AuthenticatedUser, create_content


@pytest.fixture
def rate_limits() -> Iterator[None]:
    """Turn the limiter on with empty counters for one test."""
    previous = limiter.enabled
    limiter.enabled = True
    limiter.reset()
    yield
    limiter.reset()
    limiter.enabled = previous


class TestRateLimits:
    """Test API rate limit behavior."""

    @pytest.mark.asyncio
    async def test_register_rate_limited(
        self, async_http_client: AsyncClient, rate_limits: None
    ) -> None:
        """Test that registration is rate-limited per client address."""
        # Arrange
        statuses: list[int] = []
        last_body: dict[str, Any] = {}

        # Act
        for i in range(6):
            response = await async_http_client.post(
                "/api/auth/register",
                json={
                    "name": f"Limit {i}",
                    "email": f"rate-limit-{i}@example.com",
                    "password": "Password123",
                },
            )
            statuses.append(response.status_code)
            last_body = response.json()

        # Assert
        assert statuses[:5] == [status.HTTP_201_CREATED] * 5
        assert statuses[5] == status.HTTP_429_TOO_MANY_REQUESTS
        assert last_body["success"] is False
        assert last_body["error"] == "rate_limited"

    @pytest.mark.asyncio
    async def test_login_rate_limited(
        self, async_http_client: AsyncClient, rate_limits: None
    ) -> None:
        """Test that failed logins count toward the login limit."""
        # Act
        statuses = [
            (
                await async_http_client.post(
                    "/api/auth/login",
                    json={"email": "nobody@example.com", "password": "Wrong1234"},
                )
            ).status_code
            for _ in range(11)
        ]

        # Assert
        assert statuses[:10] == [status.HTTP_401_UNAUTHORIZED] * 10
        assert statuses[10] == status.HTTP_429_TOO_MANY_REQUESTS

    @pytest.mark.asyncio
    async def test_comments_rate_limited_per_user(
        self,
        async_http_client: AsyncClient,
        author: AuthenticatedUser,
        other_user: AuthenticatedUser,
        category: dict[str, Any],
        rate_limits: None,
    ) -> None:
        """Test that the comment limit is keyed by user, not shared across callers."""
        # Arrange
        item = await create_content(async_http_client, author, "blog", category["id"])
        comment_url = f"/api/blog/{item['id']}/comment"

        # Act
        statuses: list[int] = []
        for i in range(31):
            response = await async_http_client.post(
                comment_url, json={"text": f"Comment {i}"}, headers=author.headers
            )
            statuses.append(response.status_code)
        other_response = await async_http_client.post(
            comment_url, json={"text": "Still allowed"}, headers=other_user.headers
        )

        # Assert
        assert statuses[:30] == [status.HTTP_201_CREATED] * 30
        assert statuses[30] == status.HTTP_429_TOO_MANY_REQUESTS
        assert other_response.status_code == status.HTTP_201_CREATED

    @pytest.mark.asyncio
    async def test_limits_are_separate_per_content_kind(
        self,
        async_http_client: AsyncClient,
        author: AuthenticatedUser,
        category: dict[str, Any],
        rate_limits: None,
    ) -> None:
        """Test that exhausting the news comment limit leaves article comments open."""
        # Arrange
        news = await create_content(async_http_client, author, "news", category["id"])
        article = await create_content(async_http_client, author, "article", category["id"])
        for i in range(30):
            await async_http_client.post(
                f"/api/news/{news['id']}/comment",
                json={"text": f"News comment {i}"},
                headers=author.headers,
            )

        # Act
        blocked = await async_http_client.post(
            f"/api/news/{news['id']}/comment", json={"text": "One more"}, headers=author.headers
        )
        allowed = await async_http_client.post(
            f"/api/article/{article['id']}/comment",
            json={"text": "Different kind"},
            headers=author.headers,
        )

        # Assert
        assert blocked.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert allowed.status_code == status.HTTP_201_CREATED
