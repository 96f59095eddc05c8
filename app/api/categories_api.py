from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import UnitOfWork, get_current_user, get_uow
from app.api.error_mapping import to_http_error
from app.api.openapi_responses import (
    ErrorExample,
    error_responses,
    forbidden_response,
    merge_responses,
    not_found_response,
    unauthorized_response,
    validation_error_response,
)
from app.api.query_params import list_query
from app.api.schemas.base import ApiResponse, CamelModel, CountResponse, PaginationMeta
from app.api.schemas.category_request_models import CategoryCreateRequest, CategoryUpdateRequest
from app.api.schemas.category_response_models import CategoryResponse
from app.api.schemas.content_response_models import ContentSummary
from app.core.config import settings
from app.db.models.user import User
from app.services.content_kinds import ContentKindName, get_content_kind
from app.services.content_query import ContentQuery
from app.services.errors import ServiceError

router = APIRouter()

category_not_found = not_found_response(
    description="Category not found", message="Category not found"
)
category_conflict = error_responses(
    ErrorExample(
        status_code=status.HTTP_409_CONFLICT,
        error="conflict",
        message="Category with this name or slug already exists",
        description="Name or slug already taken",
        summary="Duplicate category",
    )
)


class CategoryItems(CamelModel):
    category: CategoryResponse
    items: list[ContentSummary]


@router.get(
    "",
    summary="List categories",
    description="Paginated categories. Sortable by name, createdAt, updatedAt and itemCount.",
    response_model=ApiResponse[list[CategoryResponse]],
    responses=validation_error_response(),
)
async def list_categories(
    is_active: bool | None = Query(None, alias="isActive"),
    search: str | None = Query(None, max_length=200),
    sort_by: str = Query("name", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("asc", alias="sortOrder"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    uow: UnitOfWork = Depends(get_uow),
) -> ApiResponse[list[CategoryResponse]]:
    try:
        result = await uow.category_service.list_categories(
            is_active=is_active,
            search=search,
            sort_by=sort_by,
            sort_order=sort_order,
            page=page,
            limit=limit,
        )
    except ServiceError as e:
        raise to_http_error(e) from e
    return ApiResponse(
        message="Categories retrieved successfully",
        data=[CategoryResponse.from_category(category) for category in result.items],
        pagination=PaginationMeta.from_page(result),
    )


@router.get(
    "/count",
    summary="Count categories",
    response_model=ApiResponse[CountResponse],
)
async def count_categories(uow: UnitOfWork = Depends(get_uow)) -> ApiResponse[CountResponse]:
    count = await uow.category_service.count()
    return ApiResponse(
        message="Category count retrieved successfully", data=CountResponse(count=count)
    )


@router.get(
    "/slug/{slug}",
    summary="Get category by slug",
    response_model=ApiResponse[CategoryResponse],
    responses=category_not_found,
)
async def get_category_by_slug(
    slug: str, uow: UnitOfWork = Depends(get_uow)
) -> ApiResponse[CategoryResponse]:
    try:
        category = await uow.category_service.get_category_by_slug(slug)
    except ServiceError as e:
        raise to_http_error(e) from e
    return ApiResponse(
        message="Category retrieved successfully", data=CategoryResponse.from_category(category)
    )


@router.get(
    "/{category_id}",
    summary="Get category",
    response_model=ApiResponse[CategoryResponse],
    responses=category_not_found,
)
async def get_category(
    category_id: int, uow: UnitOfWork = Depends(get_uow)
) -> ApiResponse[CategoryResponse]:
    try:
        category = await uow.category_service.get_category(category_id)
    except ServiceError as e:
        raise to_http_error(e) from e
    return ApiResponse(
        message="Category retrieved successfully", data=CategoryResponse.from_category(category)
    )


@router.get(
    "/{category_id}/items",
    summary="List content in a category",
    description="The category plus one page of content summaries, optionally for a single kind.",
    response_model=ApiResponse[CategoryItems],
    responses=merge_responses(validation_error_response(), category_not_found),
)
async def list_category_items(
    category_id: int,
    kind: ContentKindName | None = Query(None, description="news, blog or article"),
    query: ContentQuery = Depends(list_query),
    uow: UnitOfWork = Depends(get_uow),
) -> ApiResponse[CategoryItems]:
    try:
        category, result = await uow.category_service.list_items(
            category_id,
            query,
            kind.value if kind else None,
            settings.list_includes_drafts,
        )
    except ServiceError as e:
        raise to_http_error(e) from e
    return ApiResponse(
        message="Category content retrieved successfully",
        data=CategoryItems(
            category=CategoryResponse.from_category(category),
            items=[
                ContentSummary.from_item(get_content_kind(item.kind), item)
                for item in result.items
            ],
        ),
        pagination=PaginationMeta.from_page(result),
    )


@router.post(
    "",
    summary="Create category",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[CategoryResponse],
    responses=merge_responses(
        validation_error_response(), unauthorized_response(), category_conflict
    ),
)
async def create_category(
    payload: CategoryCreateRequest,
    current_user: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> ApiResponse[CategoryResponse]:
    try:
        category = await uow.category_service.create_category(
            current_user,
            name=payload.name,
            slug=payload.slug,
            description=payload.description,
            color=payload.color,
            icon=payload.icon,
            is_active=payload.is_active,
        )
    except ServiceError as e:
        raise to_http_error(e) from e
    return ApiResponse(
        message="Category created successfully", data=CategoryResponse.from_category(category)
    )


@router.put(
    "/{category_id}",
    summary="Update category",
    description="Creator or admin only. The creator and item count cannot be changed.",
    response_model=ApiResponse[CategoryResponse],
    responses=merge_responses(
        validation_error_response(),
        unauthorized_response(),
        forbidden_response(message="Not authorized to update this category"),
        category_not_found,
        category_conflict,
    ),
)
async def update_category(
    category_id: int,
    payload: CategoryUpdateRequest,
    current_user: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> ApiResponse[CategoryResponse]:
    try:
        category = await uow.category_service.update_category(
            category_id, current_user, payload.model_dump(exclude_unset=True)
        )
    except ServiceError as e:
        raise to_http_error(e) from e
    return ApiResponse(
        message="Category updated successfully", data=CategoryResponse.from_category(category)
    )


@router.delete(
    "/{category_id}",
    summary="Delete category",
    description="Creator or admin only. Refused while content items reference the category.",
    response_model=ApiResponse[None],
    responses=merge_responses(
        unauthorized_response(),
        forbidden_response(message="Not authorized to delete this category"),
        category_not_found,
        error_responses(
            ErrorExample(
                status_code=status.HTTP_409_CONFLICT,
                error="category_in_use",
                message=(
                    "Cannot delete category. It has 3 associated content items. "
                    "Please reassign or delete them first."
                ),
                description="Category still referenced",
                details={"itemCount": 3},
            )
        ),
    ),
)
async def delete_category(
    category_id: int,
    current_user: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> ApiResponse[None]:
    try:
        await uow.category_service.delete_category(category_id, current_user)
    except ServiceError as e:
        raise to_http_error(e) from e
    return ApiResponse(message="Category deleted successfully")
