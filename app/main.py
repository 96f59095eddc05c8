from __future__ import annotations

import logging
import sys
import types
from collections.abc import Callable
from datetime import UTC, datetime
from importlib.metadata import PackageNotFoundError, version
from typing import Any, cast

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ExceptionHandler

from app.api.router import router as api_router
from app.api.schemas.base import ApiResponse
from app.core.config import InvalidSettingsError, MissingRequiredSettingsError
from app.core.errors import (
    http_exception_handler,
    rate_limit_exception_handler,
    request_validation_exception_handler,
    unhandled_exception_handler,
)
from app.core.lifespan import lifespan
from app.core.logging import configure_logging
from app.core.rate_limit import limiter
from app.mail.client import MailClient, build_mail_client
from app.services.auth_service import auth_service_factory_provider
from app.services.category_service import category_service_factory_provider
from app.services.content_kinds import CONTENT_KINDS
from app.services.content_service import content_service_factory_provider
from app.services.file_service import file_service_factory_provider

# Import settings - this may raise MissingRequiredSettingsError
try:
    from app.core.config import settings
except MissingRequiredSettingsError as e:
    print("ERROR: Missing required environment variables:", file=sys.stderr)
    for field in e.missing_fields:
        print(f"  - {field}", file=sys.stderr)
    print("\nSet them in .env or the process environment", file=sys.stderr)
    sys.exit(1)
except InvalidSettingsError as e:
    print("ERROR: Invalid environment variable values:", file=sys.stderr)
    for field, message in e.invalid_fields:
        print(f"  - {field}: {message}", file=sys.stderr)
    print("\nFix them in .env or the process environment", file=sys.stderr)
    sys.exit(1)

logger = logging.getLogger(__name__)

OPENAPI_TAGS: list[dict[str, Any]] = [
    {"name": "meta", "description": "Service health."},
    {"name": "auth", "description": "Accounts, tokens, profiles and password reset."},
    {"name": "users", "description": "Public user media."},
    {"name": "categories", "description": "Categories shared by every content kind."},
    {"name": "files", "description": "Standalone image uploads."},
    *(
        {"name": kind.plural_label, "description": f"Publishable {kind.plural_label}."}
        for kind in CONTENT_KINDS.values()
    ),
]

EXCEPTION_HANDLERS: tuple[tuple[type[Exception], Callable[..., Any]], ...] = (
    (StarletteHTTPException, http_exception_handler),
    (RequestValidationError, request_validation_exception_handler),
    (RateLimitExceeded, rate_limit_exception_handler),
    (Exception, unhandled_exception_handler),
)


def _api_version() -> str:
    try:
        return version("newsroom-api")
    except PackageNotFoundError:
        logger.warning("newsroom-api package not found, using fallback version 0.1.0")
        return "0.1.0"


def _service_factories(mail_client: MailClient) -> types.MappingProxyType[str, Any]:
    """Read-only registry the Unit of Work resolves services from."""
    return types.MappingProxyType(
        {
            "auth_service": auth_service_factory_provider(mail_client),
            "category_service": category_service_factory_provider(),
            "content_service": content_service_factory_provider(),
            "file_service": file_service_factory_provider(),
        }
    )


def create_app(mail_client: MailClient | None = None) -> FastAPI:
    """Build the application.

    ``mail_client`` replaces the configured outbound mail transport; tests pass a
    recording client here.
    """
    configure_logging()

    app = FastAPI(
        title=settings.app_name,
        description="News, blog posts and articles with categories, engagement and media.",
        version=_api_version(),
        debug=settings.environment == "local",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
    )
    for exc_class, handler in EXCEPTION_HANDLERS:
        app.add_exception_handler(exc_class, cast(ExceptionHandler, handler))

    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(api_router, prefix="/api")

    @app.get("/", include_in_schema=False)
    def root() -> ApiResponse[dict[str, str]]:
        return ApiResponse(
            message=f"Welcome to {settings.app_name}",
            data={"status": "running", "timestamp": datetime.now(UTC).isoformat()},
        )

    app.state.services = _service_factories(mail_client or build_mail_client())
    return app


app = create_app()
