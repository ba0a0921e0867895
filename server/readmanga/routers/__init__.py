"""API Routers for the Read-Manga server."""

from .health import router as health_router
from .manga import router as manga_router

__all__ = [
    "health_router",
    "manga_router",
]
