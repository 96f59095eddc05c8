"""Routes for one content kind, built from its ``ContentKind`` descriptor.

The same factory serves /news, /blog and /article; only the descriptor differs.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from fastapi import APIRouter, Depends, Request, Response, status

from app.api.dependencies import (
    UnitOfWork,
    get_content_fields,
    get_current_user,
    get_uow,
)
from app.api.error_mapping import to_http_error
from app.api.openapi_responses import (
    forbidden_response,
    media_error_responses,
    merge_responses,
    not_found_response,
    rate_limited_response,
    unauthorized_response,
    validation_error_response,
)
from app.api.query_params import brief_query, list_query
from app.api.schemas.base import ApiResponse, CountResponse, PaginationMeta
from app.api.schemas.content_request_models import CommentRequest, ContentPayload
from app.api.schemas.content_response_models import (
    CommentResponse,
    ContentBrief,
    ContentDetail,
    ContentSummary,
    LikeResponse,
    ShareResponse,
)
from app.core.rate_limit import COMMENT_RATE_LIMIT, limit
from app.db.models.user import User
from app.mail.client import MailDeliveryError
from app.media.codec import MediaError, media_response
from app.services.content_kinds import ContentKind
from app.services.content_query import ContentQuery
from app.services.errors import ServiceError

F = TypeVar("F", bound=Callable[..., Any])

HandledError = (ServiceError, MediaError, MailDeliveryError)


def _named(func: F, name: str) -> F:
    # The limiter keys route limits by function name; each kind needs its own
    func.__name__ = name
    func.__qualname__ = name
    return func


def build_content_router(kind: ContentKind) -> APIRouter:
    router = APIRouter()
    label = kind.label
    plural = kind.plural_label
    prefix = kind.name.value
    item_not_found = not_found_response(
        description=f"{label.capitalize()} not found",
        message=f"{label.capitalize()} not found",
    )

    @router.get(
        "",
        summary=f"List {plural}",
        description=(
            f"Paginated {plural} without the HTML body. Sortable by publishDate, createdAt, "
            "updatedAt, title, views, likes and shares."
        ),
        response_model=ApiResponse[list[ContentSummary]],
        responses=validation_error_response(),
    )
    async def list_items(
        query: ContentQuery = Depends(list_query),
        uow: UnitOfWork = Depends(get_uow),
    ) -> ApiResponse[list[ContentSummary]]:
        try:
            page = await uow.content_service(kind).list_items(query)
        except ServiceError as e:
            raise to_http_error(e) from e
        return ApiResponse(
            message=f"{plural.capitalize()} retrieved successfully",
            data=[ContentSummary.from_item(kind, item) for item in page.items],
            pagination=PaginationMeta.from_page(page),
        )

    @router.get(
        "/count",
        summary=f"Count {plural}",
        response_model=ApiResponse[CountResponse],
    )
    async def count_items(uow: UnitOfWork = Depends(get_uow)) -> ApiResponse[CountResponse]:
        count = await uow.content_service(kind).count()
        return ApiResponse(
            message=f"{plural.capitalize()} count retrieved successfully",
            data=CountResponse(count=count),
        )

    @router.get(
        "/short",
        summary=f"List {plural} with brief content",
        description="Like the list endpoint, with HTML stripped and cut to 150 characters.",
        response_model=ApiResponse[list[ContentBrief]],
        responses=validation_error_response(),
    )
    async def list_brief(
        query: ContentQuery = Depends(brief_query),
        uow: UnitOfWork = Depends(get_uow),
    ) -> ApiResponse[list[ContentBrief]]:
        try:
            page = await uow.content_service(kind).list_brief(query)
        except ServiceError as e:
            raise to_http_error(e) from e
        return ApiResponse(
            message=f"{plural.capitalize()} retrieved successfully",
            data=[ContentBrief.from_item(kind, item) for item in page.items],
            pagination=PaginationMeta.from_page(page),
        )

    @router.get(
        "/{item_id}",
        summary=f"Get {label}",
        description="Full item with category and author. Each call counts one view.",
        response_model=ApiResponse[ContentDetail],
        responses=item_not_found,
    )
    async def get_item(
        item_id: int, uow: UnitOfWork = Depends(get_uow)
    ) -> ApiResponse[ContentDetail]:
        try:
            item = await uow.content_service(kind).get_item(item_id)
        except ServiceError as e:
            raise to_http_error(e) from e
        return ApiResponse(
            message=f"{label.capitalize()} retrieved successfully",
            data=ContentDetail.from_item(kind, item),
        )

    @router.post(
        "",
        summary=f"Create {label}",
        description=(
            "Accepts JSON or multipart/form-data. featuredImage may be an uploaded file, "
            "a base64 string or data URI, an embedded media object or {objectURL}."
        ),
        status_code=status.HTTP_201_CREATED,
        response_model=ApiResponse[ContentDetail],
        openapi_extra={
            "requestBody": {
                "content": {
                    "application/json": {
                        "schema": ContentPayload.model_json_schema(by_alias=True)
                    }
                }
            }
        },
        responses=merge_responses(
            validation_error_response(),
            media_error_responses(),
            unauthorized_response(),
        ),
    )
    async def create_item(
        fields: dict[str, Any] = Depends(get_content_fields),
        current_user: User = Depends(get_current_user),
        uow: UnitOfWork = Depends(get_uow),
    ) -> ApiResponse[ContentDetail]:
        try:
            item = await uow.content_service(kind).create_item(current_user, fields)
        except HandledError as e:
            raise to_http_error(e) from e
        return ApiResponse(
            message=f"{label.capitalize()} created successfully",
            data=ContentDetail.from_item(kind, item),
        )

    @router.put(
        "/{item_id}",
        summary=f"Update {label}",
        description="Partial update by the author or an admin. featuredImage: null removes it.",
        response_model=ApiResponse[ContentDetail],
        responses=merge_responses(
            validation_error_response(),
            media_error_responses(),
            unauthorized_response(),
            forbidden_response(message=f"Not authorized to update this {label}"),
            item_not_found,
        ),
    )
    async def update_item(
        item_id: int,
        fields: dict[str, Any] = Depends(get_content_fields),
        current_user: User = Depends(get_current_user),
        uow: UnitOfWork = Depends(get_uow),
    ) -> ApiResponse[ContentDetail]:
        try:
            item = await uow.content_service(kind).update_item(item_id, current_user, fields)
        except HandledError as e:
            raise to_http_error(e) from e
        return ApiResponse(
            message=f"{label.capitalize()} updated successfully",
            data=ContentDetail.from_item(kind, item),
        )

    @router.delete(
        "/{item_id}",
        summary=f"Delete {label}",
        response_model=ApiResponse[None],
        responses=merge_responses(
            unauthorized_response(),
            forbidden_response(message=f"Not authorized to delete this {label}"),
            item_not_found,
        ),
    )
    async def delete_item(
        item_id: int,
        current_user: User = Depends(get_current_user),
        uow: UnitOfWork = Depends(get_uow),
    ) -> ApiResponse[None]:
        try:
            await uow.content_service(kind).delete_item(item_id, current_user)
        except ServiceError as e:
            raise to_http_error(e) from e
        return ApiResponse(message=f"{label.capitalize()} deleted successfully")

    @router.post(
        "/{item_id}/like",
        summary=f"Toggle like on a {label}",
        description="Adds the caller's like, or removes it when already liked.",
        response_model=ApiResponse[LikeResponse],
        responses=merge_responses(unauthorized_response(), item_not_found),
    )
    async def toggle_like(
        item_id: int,
        current_user: User = Depends(get_current_user),
        uow: UnitOfWork = Depends(get_uow),
    ) -> ApiResponse[LikeResponse]:
        try:
            liked, likes = await uow.content_service(kind).toggle_like(item_id, current_user)
        except ServiceError as e:
            raise to_http_error(e) from e
        return ApiResponse(
            message=f"{label.capitalize()} {'liked' if liked else 'unliked'} successfully",
            data=LikeResponse(liked=liked, likes=likes),
        )

    async def add_comment(
        request: Request,
        item_id: int,
        comment: CommentRequest | None = None,
        current_user: User = Depends(get_current_user),
        uow: UnitOfWork = Depends(get_uow),
    ) -> ApiResponse[CommentResponse]:
        try:
            created = await uow.content_service(kind).add_comment(
                item_id, current_user, comment.text if comment else None
            )
        except ServiceError as e:
            raise to_http_error(e) from e
        return ApiResponse(
            message="Comment added successfully",
            data=CommentResponse.from_comment(created),
        )

    router.post(
        "/{item_id}/comment",
        summary=f"Comment on a {label}",
        status_code=status.HTTP_201_CREATED,
        response_model=ApiResponse[CommentResponse],
        responses=merge_responses(
            validation_error_response(message="Comment text is required"),
            unauthorized_response(),
            item_not_found,
            rate_limited_response(),
        ),
    )(limit(COMMENT_RATE_LIMIT)(_named(add_comment, f"add_{prefix}_comment")))

    @router.get(
        "/{item_id}/comments",
        summary=f"List comments on a {label}",
        response_model=ApiResponse[list[CommentResponse]],
        responses=item_not_found,
    )
    async def list_comments(
        item_id: int, uow: UnitOfWork = Depends(get_uow)
    ) -> ApiResponse[list[CommentResponse]]:
        try:
            comments = await uow.content_service(kind).list_comments(item_id)
        except ServiceError as e:
            raise to_http_error(e) from e
        return ApiResponse(
            message="Comments retrieved successfully",
            data=[CommentResponse.from_comment(comment) for comment in comments],
        )

    if kind.supports_shares:

        @router.post(
            "/{item_id}/share",
            summary=f"Share a {label}",
            description="Counts one share. No authentication required.",
            response_model=ApiResponse[ShareResponse],
            responses=item_not_found,
        )
        async def share_item(
            item_id: int, uow: UnitOfWork = Depends(get_uow)
        ) -> ApiResponse[ShareResponse]:
            try:
                shares = await uow.content_service(kind).share(item_id)
            except ServiceError as e:
                raise to_http_error(e) from e
            return ApiResponse(
                message=f"{label.capitalize()} shared successfully",
                data=ShareResponse(shares=shares),
            )

    @router.get(
        "/{item_id}/featured-image",
        summary=f"Featured image of a {label}",
        description="Raw image bytes with the stored content type.",
        response_class=Response,
        responses={
            **not_found_response(
                description="Item or stored image not found",
                message="Featured image not found",
            ),
            status.HTTP_200_OK: {"content": {"image/*": {}}},
        },
    )
    async def get_featured_image(item_id: int, uow: UnitOfWork = Depends(get_uow)) -> Response:
        try:
            blob = await uow.content_service(kind).get_featured_image(item_id)
        except ServiceError as e:
            raise to_http_error(e) from e
        return media_response(blob)

    return router
