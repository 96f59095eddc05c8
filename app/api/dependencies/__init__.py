"""API-layer dependencies: request-scoped wiring (UoW, current user, payload parsing)."""

from app.api.dependencies.content_payload import get_content_fields, read_request_fields
from app.api.dependencies.current_user import get_current_admin, get_current_user
from app.api.dependencies.unit_of_work import UnitOfWork, get_uow

__all__ = [
    "UnitOfWork",
    "get_content_fields",
    "get_current_admin",
    "get_current_user",
    "get_uow",
    "read_request_fields",
]
