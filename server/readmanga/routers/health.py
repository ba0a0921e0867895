"""Health check endpoint."""

from datetime import datetime, timezone
from fastapi import APIRouter, Depends

from ..config import Settings
from .deps import get_app_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(settings: Settings = Depends(get_app_settings)):
    """Health check and status endpoint."""
    return {
        "status": "ok",
        "message": "Read-Manga API is up",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.environment,
    }
