"""Request-scoped dependencies shared by routers."""

from typing import Optional
from fastapi import HTTPException, Request

from ..config import Settings
from ..logging_config import get_logger
from ..services.auth import User
from ..services.catalog import CatalogService

logger = get_logger(__name__)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_catalog(request: Request) -> CatalogService:
    return request.app.state.catalog


def require_development(request: Request) -> None:
    """Hide a route outside development mode."""
    if not get_app_settings(request).is_development:
        raise HTTPException(status_code=404, detail="Route not found")


async def get_optional_user(request: Request) -> Optional[User]:
    """Resolve the bearer token if there is one; never rejects the request."""
    validator = getattr(request.app.state, "token_validator", None)
    if validator is None:
        return None

    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None

    try:
        return await validator.validate_token(token.strip())
    except Exception as e:
        logger.warning("Token validation failed, continuing anonymously", error=str(e))
        return None
