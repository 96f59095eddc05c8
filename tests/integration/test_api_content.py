"""Integration tests for the news, blog and article endpoints."""

from __future__ import annotations

from typing import Any

import pytest
from fastapi import status
from httpx import AsyncClient
from sqlalchemy import func, select

from app.api.schemas import ApiResponse, ContentDetail, ContentSummary
from app.db.models.content_item import ContentItem
from app.db.models.media_blob import MediaBlob
from app.db.session import get_session_maker
from tests.factories import (
    PNG_BASE64,
    PNG_BYTES,
    AuthenticatedUser,
    create_category,
    create_content,
)

KINDS = ("news", "blog", "article")


async def _count_rows(model: Any) -> int:
    async with get_session_maker()() as session:
        return await session.scalar(select(func.count()).select_from(model)) or 0


class TestCreateContent:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("kind", KINDS)
    async def test_create_returns_detail(
        self,
        async_http_client: AsyncClient,
        author: AuthenticatedUser,
        category: dict[str, Any],
        kind: str,
    ) -> None:
        response = await async_http_client.post(
            f"/api/{kind}",
            json={
                "category": category["id"],
                "title": "  Launch day  ",
                "subtitle": "It finally happened",
                "htmlData": "<p>Body</p>",
                "tags": ["launch", "space"],
                "isPublished": True,
            },
            headers=author.headers,
        )

        assert response.status_code == status.HTTP_201_CREATED
        parsed = ApiResponse[ContentDetail].model_validate(response.json())
        assert parsed.success is True
        detail = parsed.data
        assert detail is not None
        assert detail.kind == kind
        assert detail.title == "Launch day"
        assert detail.html_data == "<p>Body</p>"
        assert detail.tags == ["launch", "space"]
        assert detail.is_published is True
        assert detail.views == 0
        assert detail.likes == 0
        assert detail.author.id == author.id
        assert detail.category.slug == "tech"
        assert detail.category.display_name == "Tech"
        assert detail.featured_image is None

    @pytest.mark.asyncio
    async def test_create_defaults_to_draft(
        self, async_http_client: AsyncClient, author: AuthenticatedUser, category: dict[str, Any]
    ) -> None:
        created = await create_content(async_http_client, author, "news", category["id"])

        assert created["isPublished"] is False
        assert created["tags"] == []
        assert created["publishDate"] is not None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("missing", "message"),
        [
            ("category", "Category is required"),
            ("title", "Title is required"),
            ("htmlData", "Content (htmlData) is required"),
        ],
    )
    async def test_create_missing_required_field(
        self,
        async_http_client: AsyncClient,
        author: AuthenticatedUser,
        category: dict[str, Any],
        missing: str,
        message: str,
    ) -> None:
        """Test that a missing required field is a 400 and nothing is stored."""
        payload = {"category": category["id"], "title": "Title", "htmlData": "<p>x</p>"}
        del payload[missing]

        response = await async_http_client.post("/api/news", json=payload, headers=author.headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "validation_error"
        assert body["message"] == message
        assert await _count_rows(ContentItem) == 0

    @pytest.mark.asyncio
    async def test_create_blank_title(
        self, async_http_client: AsyncClient, author: AuthenticatedUser, category: dict[str, Any]
    ) -> None:
        response = await async_http_client.post(
            "/api/blog",
            json={"category": category["id"], "title": "   ", "htmlData": "<p>x</p>"},
            headers=author.headers,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Title is required"

    @pytest.mark.asyncio
    async def test_create_unknown_category(
        self, async_http_client: AsyncClient, author: AuthenticatedUser
    ) -> None:
        response = await async_http_client.post(
            "/api/article",
            json={"category": 9999, "title": "Orphan", "htmlData": "<p>x</p>"},
            headers=author.headers,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Category not found"
        assert await _count_rows(ContentItem) == 0

    @pytest.mark.asyncio
    async def test_create_requires_authentication(
        self, async_http_client: AsyncClient, category: dict[str, Any]
    ) -> None:
        response = await async_http_client.post(
            "/api/news",
            json={"category": category["id"], "title": "Anon", "htmlData": "<p>x</p>"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_create_rejects_non_object_body(
        self, async_http_client: AsyncClient, author: AuthenticatedUser
    ) -> None:
        response = await async_http_client.post(
            "/api/news", json=["not", "an", "object"], headers=author.headers
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Request body must be a JSON object"

    @pytest.mark.asyncio
    async def test_create_from_multipart_form(
        self, async_http_client: AsyncClient, author: AuthenticatedUser, category: dict[str, Any]
    ) -> None:
        response = await async_http_client.post(
            "/api/blog",
            data={
                "category": str(category["id"]),
                "title": "Form post",
                "htmlData": "<p>From a form</p>",
                "tags": "one, two",
                "readTime": "6",
                "isPublished": "true",
            },
            files={"featuredImage": ("cover.png", PNG_BYTES, "image/png")},
            headers=author.headers,
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()["data"]
        assert data["tags"] == ["one", "two"]
        assert data["readTime"] == 6
        assert data["isPublished"] is True
        assert data["featuredImage"]["contentType"] == "image/png"
        assert data["featuredImage"]["originalName"] == "cover.png"
        assert data["featuredImage"]["size"] == len(PNG_BYTES)

    @pytest.mark.asyncio
    async def test_extension_fields_follow_kind(
        self, async_http_client: AsyncClient, author: AuthenticatedUser, category: dict[str, Any]
    ) -> None:
        """Test that fields a kind does not carry are ignored and reported as null."""
        extras = {
            "readTime": 5,
            "references": ["https://example.com/source"],
            "seoKeywords": ["space"],
            "seoDescription": "A launch",
        }

        news = await create_content(async_http_client, author, "news", category["id"], **extras)
        blog = await create_content(async_http_client, author, "blog", category["id"], **extras)
        article = await create_content(
            async_http_client, author, "article", category["id"], **extras
        )

        assert news["readTime"] is None
        assert news["seoKeywords"] is None
        assert news["shares"] is None
        assert blog["readTime"] == 5
        assert blog["seoDescription"] is None
        assert article["readTime"] == 5
        assert article["references"] == ["https://example.com/source"]
        assert article["seoKeywords"] == ["space"]
        assert article["seoDescription"] == "A launch"
        assert article["shares"] == 0

    @pytest.mark.asyncio
    async def test_article_list_fields_default_to_empty(
        self, async_http_client: AsyncClient, author: AuthenticatedUser, category: dict[str, Any]
    ) -> None:
        article = await create_content(async_http_client, author, "article", category["id"])
        blog = await create_content(async_http_client, author, "blog", category["id"])

        assert article["tags"] == []
        assert article["references"] == []
        assert article["seoKeywords"] == []
        assert blog["references"] is None
        assert blog["seoKeywords"] is None

    @pytest.mark.asyncio
    async def test_null_list_field_on_update_keeps_value(
        self, async_http_client: AsyncClient, author: AuthenticatedUser, category: dict[str, Any]
    ) -> None:
        article = await create_content(
            async_http_client, author, "article", category["id"], seoKeywords=["space"]
        )

        response = await async_http_client.put(
            f"/api/article/{article['id']}",
            json={"seoKeywords": None, "references": None},
            headers=author.headers,
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["seoKeywords"] == ["space"]
        assert response.json()["data"]["references"] == []


class TestFeaturedImage:
    @pytest.mark.asyncio
    async def test_base64_image_round_trip(
        self, async_http_client: AsyncClient, author: AuthenticatedUser, category: dict[str, Any]
    ) -> None:
        created = await create_content(
            async_http_client, author, "article", category["id"], featuredImage=PNG_BASE64
        )

        image = created["featuredImage"]
        assert image["data"] == PNG_BASE64
        assert image["url"] == f"/api/article/{created['id']}/featured-image"
        assert created["featuredImageUrl"] == image["url"]

        response = await async_http_client.get(image["url"])
        assert response.status_code == status.HTTP_200_OK
        assert response.content == PNG_BYTES
        assert response.headers["content-type"] == "image/png"

    @pytest.mark.asyncio
    async def test_embedded_object_with_metadata(
        self, async_http_client: AsyncClient, author: AuthenticatedUser, category: dict[str, Any]
    ) -> None:
        created = await create_content(
            async_http_client,
            author,
            "news",
            category["id"],
            featuredImage={
                "data": PNG_BASE64,
                "contentType": "image/png",
                "originalName": "hero.png",
                "size": 1,
            },
        )

        assert created["featuredImage"]["originalName"] == "hero.png"
        assert created["featuredImage"]["size"] == len(PNG_BYTES)

    @pytest.mark.asyncio
    async def test_object_url_is_stored_without_bytes(
        self, async_http_client: AsyncClient, author: AuthenticatedUser, category: dict[str, Any]
    ) -> None:
        url = "https://cdn.example.com/images/hero.jpg"
        created = await create_content(
            async_http_client, author, "blog", category["id"], featuredImage={"objectURL": url}
        )

        assert created["featuredImage"]["data"] is None
        assert created["featuredImage"]["url"] == url
        assert created["featuredImageUrl"] == url

        response = await async_http_client.get(f"/api/blog/{created['id']}/featured-image")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_invalid_image_is_rejected(
        self, async_http_client: AsyncClient, author: AuthenticatedUser, category: dict[str, Any]
    ) -> None:
        response = await async_http_client.post(
            "/api/news",
            json={
                "category": category["id"],
                "title": "Bad image",
                "htmlData": "<p>x</p>",
                "featuredImage": "%%% not base64 %%%",
            },
            headers=author.headers,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "invalid_media"
        assert await _count_rows(ContentItem) == 0

    @pytest.mark.asyncio
    async def test_null_image_on_update_removes_it(
        self, async_http_client: AsyncClient, author: AuthenticatedUser, category: dict[str, Any]
    ) -> None:
        created = await create_content(
            async_http_client, author, "article", category["id"], featuredImage=PNG_BASE64
        )
        assert await _count_rows(MediaBlob) == 1

        response = await async_http_client.put(
            f"/api/article/{created['id']}",
            json={"featuredImage": None},
            headers=author.headers,
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["featuredImage"] is None
        assert await _count_rows(MediaBlob) == 0

    @pytest.mark.asyncio
    async def test_missing_item_image_is_404(self, async_http_client: AsyncClient) -> None:
        response = await async_http_client.get("/api/news/12345/featured-image")

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestReadContent:
    @pytest.mark.asyncio
    async def test_each_get_counts_one_view(
        self, async_http_client: AsyncClient, author: AuthenticatedUser, category: dict[str, Any]
    ) -> None:
        created = await create_content(async_http_client, author, "news", category["id"])

        first = await async_http_client.get(f"/api/news/{created['id']}")
        second = await async_http_client.get(f"/api/news/{created['id']}")

        assert first.status_code == status.HTTP_200_OK
        assert first.json()["data"]["views"] == 1
        assert second.json()["data"]["views"] == 2
        assert second.json()["data"]["htmlData"] == "<p>The final whistle blew at nine.</p>"

    @pytest.mark.asyncio
    async def test_get_unknown_item(self, async_http_client: AsyncClient) -> None:
        response = await async_http_client.get("/api/article/404")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "Article not found"

    @pytest.mark.asyncio
    async def test_kinds_do_not_leak_into_each_other(
        self, async_http_client: AsyncClient, author: AuthenticatedUser, category: dict[str, Any]
    ) -> None:
        news = await create_content(async_http_client, author, "news", category["id"])

        response = await async_http_client.get(f"/api/blog/{news['id']}")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_list_omits_html_and_paginates(
        self, async_http_client: AsyncClient, author: AuthenticatedUser, category: dict[str, Any]
    ) -> None:
        for i in range(25):
            await create_content(
                async_http_client, author, "news", category["id"], title=f"Story {i:02d}"
            )

        response = await async_http_client.get("/api/news", params={"page": 3, "limit": 10})

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert len(body["data"]) == 5
        assert body["pagination"] == {
            "currentPage": 3,
            "totalPages": 3,
            "totalItems": 25,
            "itemsPerPage": 10,
        }
        assert all("htmlData" not in item for item in body["data"])
        for item in body["data"]:
            ContentSummary.model_validate(item)

    @pytest.mark.asyncio
    async def test_page_past_the_end_is_empty(
        self, async_http_client: AsyncClient, author: AuthenticatedUser, category: dict[str, Any]
    ) -> None:
        await create_content(async_http_client, author, "news", category["id"])

        response = await async_http_client.get("/api/news", params={"page": 9, "limit": 10})

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["data"] == []
        assert body["pagination"] == {
            "currentPage": 9,
            "totalPages": 1,
            "totalItems": 1,
            "itemsPerPage": 10,
        }

    @pytest.mark.asyncio
    async def test_search_treats_wildcards_literally(
        self, async_http_client: AsyncClient, author: AuthenticatedUser, category: dict[str, Any]
    ) -> None:
        await create_content(async_http_client, author, "blog", category["id"], title="Plain")
        await create_content(
            async_http_client, author, "blog", category["id"], title="Up 100% today"
        )

        percent = await async_http_client.get("/api/blog", params={"search": "%"})
        underscore = await async_http_client.get("/api/blog", params={"search": "_"})

        assert [item["title"] for item in percent.json()["data"]] == ["Up 100% today"]
        assert underscore.json()["data"] == []

    @pytest.mark.asyncio
    async def test_list_filters_and_sorting(
        self, async_http_client: AsyncClient, author: AuthenticatedUser, category: dict[str, Any]
    ) -> None:
        science = await create_category(async_http_client, author, name="Science")
        await create_content(
            async_http_client, author, "blog", category["id"], title="Banana", isPublished=True
        )
        await create_content(async_http_client, author, "blog", category["id"], title="Apple")
        await create_content(
            async_http_client, author, "blog", science["id"], title="Cherry", isPublished=True
        )

        by_title = await async_http_client.get(
            "/api/blog", params={"sortBy": "title", "sortOrder": "asc"}
        )
        assert [item["title"] for item in by_title.json()["data"]] == ["Apple", "Banana", "Cherry"]

        published = await async_http_client.get(
            "/api/blog", params={"published": "true", "sortBy": "title", "sortOrder": "asc"}
        )
        assert [item["title"] for item in published.json()["data"]] == ["Banana", "Cherry"]

        in_science = await async_http_client.get("/api/blog", params={"category": science["id"]})
        assert [item["title"] for item in in_science.json()["data"]] == ["Cherry"]

        search = await async_http_client.get("/api/blog", params={"search": "ana"})
        assert [item["title"] for item in search.json()["data"]] == ["Banana"]

    @pytest.mark.asyncio
    async def test_list_rejects_unknown_sort_field(self, async_http_client: AsyncClient) -> None:
        response = await async_http_client.get("/api/news", params={"sortBy": "hashedPassword"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_list_rejects_oversized_page(self, async_http_client: AsyncClient) -> None:
        response = await async_http_client.get("/api/news", params={"limit": 101})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_short_list_truncates_brief_content(
        self, async_http_client: AsyncClient, author: AuthenticatedUser, category: dict[str, Any]
    ) -> None:
        await create_content(
            async_http_client,
            author,
            "article",
            category["id"],
            htmlData="<p>" + "a" * 200 + "</p>",
        )

        response = await async_http_client.get("/api/article/short")

        assert response.status_code == status.HTTP_200_OK
        item = response.json()["data"][0]
        assert item["briefContent"] == "a" * 150 + "..."
        assert "htmlData" not in item
        assert response.json()["pagination"]["itemsPerPage"] == 20

    @pytest.mark.asyncio
    async def test_count(
        self, async_http_client: AsyncClient, author: AuthenticatedUser, category: dict[str, Any]
    ) -> None:
        await create_content(async_http_client, author, "blog", category["id"])
        await create_content(async_http_client, author, "blog", category["id"])
        await create_content(async_http_client, author, "news", category["id"])

        response = await async_http_client.get("/api/blog/count")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"] == {"count": 2}


class TestUpdateAndDelete:
    @pytest.mark.asyncio
    async def test_author_partial_update(
        self, async_http_client: AsyncClient, author: AuthenticatedUser, category: dict[str, Any]
    ) -> None:
        created = await create_content(
            async_http_client, author, "blog", category["id"], subtitle="Keep me"
        )

        response = await async_http_client.put(
            f"/api/blog/{created['id']}",
            json={"title": "Renamed", "isPublished": True},
            headers=author.headers,
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["title"] == "Renamed"
        assert data["isPublished"] is True
        assert data["subtitle"] == "Keep me"
        assert data["author"]["id"] == author.id

    @pytest.mark.asyncio
    async def test_update_by_other_user_is_forbidden(
        self,
        async_http_client: AsyncClient,
        author: AuthenticatedUser,
        other_user: AuthenticatedUser,
        category: dict[str, Any],
    ) -> None:
        created = await create_content(async_http_client, author, "news", category["id"])

        response = await async_http_client.put(
            f"/api/news/{created['id']}", json={"title": "Hijacked"}, headers=other_user.headers
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["message"] == "Not authorized to update this news item"
        unchanged = await async_http_client.get(f"/api/news/{created['id']}")
        assert unchanged.json()["data"]["title"] == created["title"]

    @pytest.mark.asyncio
    async def test_admin_can_update_any_item(
        self,
        async_http_client: AsyncClient,
        author: AuthenticatedUser,
        admin: AuthenticatedUser,
        category: dict[str, Any],
    ) -> None:
        created = await create_content(async_http_client, author, "article", category["id"])

        response = await async_http_client.put(
            f"/api/article/{created['id']}", json={"title": "Edited"}, headers=admin.headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["author"]["id"] == author.id

    @pytest.mark.asyncio
    async def test_update_blank_html_is_rejected(
        self, async_http_client: AsyncClient, author: AuthenticatedUser, category: dict[str, Any]
    ) -> None:
        created = await create_content(async_http_client, author, "news", category["id"])

        response = await async_http_client.put(
            f"/api/news/{created['id']}", json={"htmlData": ""}, headers=author.headers
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_moving_category_updates_both_counts(
        self, async_http_client: AsyncClient, author: AuthenticatedUser, category: dict[str, Any]
    ) -> None:
        science = await create_category(async_http_client, author, name="Science")
        created = await create_content(async_http_client, author, "article", category["id"])

        response = await async_http_client.put(
            f"/api/article/{created['id']}",
            json={"category": science["id"]},
            headers=author.headers,
        )

        assert response.status_code == status.HTTP_200_OK
        tech = await async_http_client.get(f"/api/categories/{category['id']}")
        moved_to = await async_http_client.get(f"/api/categories/{science['id']}")
        assert tech.json()["data"]["itemCount"] == 0
        assert moved_to.json()["data"]["itemCount"] == 1

    @pytest.mark.asyncio
    async def test_delete_by_other_user_is_forbidden(
        self,
        async_http_client: AsyncClient,
        author: AuthenticatedUser,
        other_user: AuthenticatedUser,
        category: dict[str, Any],
    ) -> None:
        created = await create_content(async_http_client, author, "blog", category["id"])

        response = await async_http_client.delete(
            f"/api/blog/{created['id']}", headers=other_user.headers
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        still_there = await async_http_client.get(f"/api/blog/{created['id']}")
        assert still_there.status_code == status.HTTP_200_OK

    @pytest.mark.asyncio
    async def test_delete_removes_item_and_engagement(
        self,
        async_http_client: AsyncClient,
        author: AuthenticatedUser,
        other_user: AuthenticatedUser,
        category: dict[str, Any],
    ) -> None:
        created = await create_content(
            async_http_client, author, "article", category["id"], featuredImage=PNG_BASE64
        )
        item_url = f"/api/article/{created['id']}"
        await async_http_client.post(f"{item_url}/like", headers=other_user.headers)
        await async_http_client.post(
            f"{item_url}/comment", json={"text": "Nice"}, headers=other_user.headers
        )

        response = await async_http_client.delete(item_url, headers=author.headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["message"] == "Article deleted successfully"
        assert (await async_http_client.get(item_url)).status_code == status.HTTP_404_NOT_FOUND
        assert await _count_rows(MediaBlob) == 0
        tech = await async_http_client.get(f"/api/categories/{category['id']}")
        assert tech.json()["data"]["itemCount"] == 0


class TestEngagement:
    @pytest.mark.asyncio
    async def test_like_toggles_and_never_goes_negative(
        self,
        async_http_client: AsyncClient,
        author: AuthenticatedUser,
        other_user: AuthenticatedUser,
        category: dict[str, Any],
    ) -> None:
        created = await create_content(async_http_client, author, "news", category["id"])
        like_url = f"/api/news/{created['id']}/like"

        liked = await async_http_client.post(like_url, headers=other_user.headers)
        also_liked = await async_http_client.post(like_url, headers=author.headers)
        unliked = await async_http_client.post(like_url, headers=other_user.headers)
        unliked_again = await async_http_client.post(like_url, headers=author.headers)

        assert liked.json()["data"] == {"liked": True, "likes": 1}
        assert liked.json()["message"] == "News item liked successfully"
        assert also_liked.json()["data"] == {"liked": True, "likes": 2}
        assert unliked.json()["data"] == {"liked": False, "likes": 1}
        assert unliked_again.json()["data"] == {"liked": False, "likes": 0}

        detail = await async_http_client.get(f"/api/news/{created['id']}")
        assert detail.json()["data"]["likes"] == 0

    @pytest.mark.asyncio
    async def test_like_requires_authentication(
        self, async_http_client: AsyncClient, author: AuthenticatedUser, category: dict[str, Any]
    ) -> None:
        created = await create_content(async_http_client, author, "blog", category["id"])

        response = await async_http_client.post(f"/api/blog/{created['id']}/like")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_like_unknown_item(
        self, async_http_client: AsyncClient, author: AuthenticatedUser
    ) -> None:
        response = await async_http_client.post("/api/blog/999/like", headers=author.headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_share_articles_only(
        self, async_http_client: AsyncClient, author: AuthenticatedUser, category: dict[str, Any]
    ) -> None:
        article = await create_content(async_http_client, author, "article", category["id"])
        news = await create_content(async_http_client, author, "news", category["id"])

        first = await async_http_client.post(f"/api/article/{article['id']}/share")
        second = await async_http_client.post(f"/api/article/{article['id']}/share")
        news_share = await async_http_client.post(f"/api/news/{news['id']}/share")

        assert first.status_code == status.HTTP_200_OK
        assert first.json()["data"] == {"shares": 1}
        assert second.json()["data"] == {"shares": 2}
        assert news_share.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_share_unknown_article(self, async_http_client: AsyncClient) -> None:
        response = await async_http_client.post("/api/article/321/share")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_comments_are_listed_oldest_first(
        self,
        async_http_client: AsyncClient,
        author: AuthenticatedUser,
        other_user: AuthenticatedUser,
        category: dict[str, Any],
    ) -> None:
        created = await create_content(async_http_client, author, "blog", category["id"])
        base = f"/api/blog/{created['id']}"

        first = await async_http_client.post(
            f"{base}/comment", json={"text": "  First!  "}, headers=other_user.headers
        )
        await async_http_client.post(
            f"{base}/comment", json={"text": "Thanks"}, headers=author.headers
        )

        assert first.status_code == status.HTTP_201_CREATED
        assert first.json()["data"]["text"] == "First!"
        assert first.json()["data"]["author"]["name"] == "Rex Reader"

        response = await async_http_client.get(f"{base}/comments")
        assert response.status_code == status.HTTP_200_OK
        assert [comment["text"] for comment in response.json()["data"]] == ["First!", "Thanks"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{"text": "   "}, {}, None])
    async def test_comment_text_required(
        self,
        async_http_client: AsyncClient,
        author: AuthenticatedUser,
        category: dict[str, Any],
        body: dict[str, str] | None,
    ) -> None:
        created = await create_content(async_http_client, author, "news", category["id"])

        response = await async_http_client.post(
            f"/api/news/{created['id']}/comment", json=body, headers=author.headers
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Comment text is required"

    @pytest.mark.asyncio
    async def test_comment_on_unknown_item(
        self, async_http_client: AsyncClient, author: AuthenticatedUser
    ) -> None:
        response = await async_http_client.post(
            "/api/article/77/comment", json={"text": "Hello?"}, headers=author.headers
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
