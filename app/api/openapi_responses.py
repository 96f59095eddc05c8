from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from fastapi import status

from app.core.errors import ErrorResponse


@dataclass(frozen=True)
class ErrorExample:
    status_code: int
    error: str
    message: str
    description: str
    summary: str | None = None
    details: Any | None = None
    example_name: str | None = None


def error_responses(*examples: ErrorExample) -> dict[int | str, dict[str, Any]]:
    responses: dict[int | str, dict[str, Any]] = {}
    for example in examples:
        response: dict[str, Any] | None = responses.get(example.status_code)
        if response is None:
            examples_payload: dict[str, dict[str, Any]] = {}
            content: dict[str, dict[str, dict[str, Any]]] = {
                "application/json": {"examples": examples_payload}
            }
            response = {
                "model": ErrorResponse,
                "description": example.description,
                "content": content,
            }
            responses[example.status_code] = response
        assert response is not None

        example_name = example.example_name or example.error
        payload: dict[str, Any] = {
            "success": False,
            "error": example.error,
            "message": example.message,
        }
        if example.details is not None:
            payload["details"] = example.details

        example_entry: dict[str, Any] = {
            "summary": example.summary or example.description,
            "value": payload,
        }
        response_content: dict[str, dict[str, dict[str, Any]]] = response["content"]
        response_content["application/json"]["examples"][example_name] = example_entry

    return responses


def rate_limited_response(
    description: str = "Rate limit exceeded",
) -> dict[int | str, dict[str, Any]]:
    return error_responses(
        ErrorExample(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            error="rate_limited",
            message="Too many requests",
            description=description,
            summary="Too many requests",
        )
    )


def unauthorized_response(
    description: str = "Missing or invalid token",
) -> dict[int | str, dict[str, Any]]:
    return error_responses(
        ErrorExample(
            status_code=status.HTTP_401_UNAUTHORIZED,
            error="unauthorized",
            message="Could not validate credentials",
            description=description,
            summary="Unauthorized",
        )
    )


def forbidden_response(
    description: str = "Caller is neither the owner nor an admin",
    message: str = "Not authorized",
) -> dict[int | str, dict[str, Any]]:
    return error_responses(
        ErrorExample(
            status_code=status.HTTP_403_FORBIDDEN,
            error="forbidden",
            message=message,
            description=description,
            summary="Forbidden",
        )
    )


def not_found_response(
    description: str = "Resource not found",
    message: str = "Resource not found",
) -> dict[int | str, dict[str, Any]]:
    return error_responses(
        ErrorExample(
            status_code=status.HTTP_404_NOT_FOUND,
            error="not_found",
            message=message,
            description=description,
            summary="Not found",
        )
    )


def validation_error_response(
    description: str = "Invalid input",
    message: str = "Request validation failed",
) -> dict[int | str, dict[str, Any]]:
    return error_responses(
        ErrorExample(
            status_code=status.HTTP_400_BAD_REQUEST,
            error="validation_error",
            message=message,
            description=description,
            summary="Validation error",
        )
    )


def media_error_responses() -> dict[int | str, dict[str, Any]]:
    return error_responses(
        ErrorExample(
            status_code=status.HTTP_400_BAD_REQUEST,
            error="payload_too_large",
            message="File size exceeds maximum limit of 10MB",
            description="Invalid input or rejected media",
            summary="Media too large",
        ),
        ErrorExample(
            status_code=status.HTTP_400_BAD_REQUEST,
            error="unsupported_media_type",
            message="File type application/pdf is not allowed",
            description="Invalid input or rejected media",
            summary="Unsupported media type",
        ),
        ErrorExample(
            status_code=status.HTTP_400_BAD_REQUEST,
            error="invalid_media",
            message="Media payload is not valid base64 data",
            description="Invalid input or rejected media",
            summary="Undecodable media",
        ),
    )


def merge_responses(
    *responses: dict[int | str, dict[str, Any]],
) -> dict[int | str, dict[str, Any]]:
    """Combine response maps; examples sharing a status code are merged."""
    merged: dict[int | str, dict[str, Any]] = {}
    for response_map in responses:
        for status_code, response in response_map.items():
            existing = merged.get(status_code)
            if existing is None:
                merged[status_code] = {
                    **response,
                    "content": {
                        "application/json": {
                            "examples": dict(response["content"]["application/json"]["examples"])
                        }
                    },
                }
                continue
            existing["content"]["application/json"]["examples"].update(
                response["content"]["application/json"]["examples"]
            )
    return merged
