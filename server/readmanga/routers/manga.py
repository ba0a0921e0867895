"""Manga catalog endpoints, fronted by the catalog cache."""

from datetime import datetime, timezone
from typing import Literal, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query

from ..config import Settings
from ..services.auth import User
from ..services.catalog import CatalogService
from ..services.errors import MalformedParams
from .deps import get_app_settings, get_catalog, get_optional_user, require_development

router = APIRouter(tags=["manga"])

CHAPTER_LANGUAGES = {"en", "ar", "fr", "ja", "es", "de"}

MangaStatus = Literal["ongoing", "completed", "hiatus", "cancelled"]


def _preferred_languages(user: Optional[User]) -> Optional[list[str]]:
    if user is not None and user.preferred_languages:
        return list(user.preferred_languages)
    return None


@router.get("/manga/search")
async def search_manga(
    title: Optional[str] = Query(None, max_length=100),
    limit: int = Query(20, ge=1, le=50),
    offset: int = Query(0, ge=0),
    status: Optional[MangaStatus] = Query(None),
    includedTags: Optional[list[str]] = Query(None),
    excludedTags: Optional[list[str]] = Query(None),
    catalog: CatalogService = Depends(get_catalog),
    user: Optional[User] = Depends(get_optional_user),
):
    """Search manga by title, status and tags."""
    params: dict = {"limit": limit, "offset": offset}

    if title is not None:
        title = title.strip()
        if not title:
            raise MalformedParams(details={"title": "Title must be between 1 and 100 characters"})
        params["title"] = title

    if status:
        params["status"] = [status]
    if includedTags:
        params["includedTags"] = includedTags
    if excludedTags:
        params["excludedTags"] = excludedTags

    languages = _preferred_languages(user)
    if languages:
        params["availableTranslatedLanguage"] = languages

    return await catalog.search_manga(params)


@router.get("/manga/popular")
async def get_popular_manga(
    limit: int = Query(20, ge=1, le=50),
    offset: int = Query(0, ge=0),
    catalog: CatalogService = Depends(get_catalog),
    user: Optional[User] = Depends(get_optional_user),
):
    """Get the most followed manga."""
    params: dict = {"limit": limit, "offset": offset}

    languages = _preferred_languages(user)
    if languages:
        params["availableTranslatedLanguage"] = languages

    return await catalog.get_popular_manga(params)


@router.get("/manga/debug", dependencies=[Depends(require_development)])
async def debug(settings: Settings = Depends(get_app_settings)):
    """Check that the manga router is reachable."""
    return {
        "message": "Debug endpoint working!",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.environment,
    }


@router.get("/manga/cache/stats", dependencies=[Depends(require_development)])
async def cache_stats(catalog: CatalogService = Depends(get_catalog)):
    """Report the number of cached responses and the TTL."""
    return catalog.cache_stats()


@router.delete("/manga/cache", dependencies=[Depends(require_development)])
async def clear_cache(catalog: CatalogService = Depends(get_catalog)):
    """Drop every cached response."""
    catalog.clear_cache()
    return {"message": "Cache cleared"}


@router.get("/manga/chapter/{chapter_id}/pages")
async def get_chapter_pages(chapter_id: UUID, catalog: CatalogService = Depends(get_catalog)):
    """Get page image URLs for a chapter."""
    return await catalog.get_chapter_pages(str(chapter_id))


@router.get("/manga/{manga_id}")
async def get_manga(manga_id: UUID, catalog: CatalogService = Depends(get_catalog)):
    """Get a manga by ID."""
    return await catalog.get_manga(str(manga_id))


@router.get("/manga/{manga_id}/chapters")
async def get_manga_chapters(
    manga_id: UUID,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    languages: Optional[list[str]] = Query(None),
    catalog: CatalogService = Depends(get_catalog),
    user: Optional[User] = Depends(get_optional_user),
):
    """Get the chapters of a manga."""
    params: dict = {"limit": limit, "offset": offset}

    if languages:
        invalid = sorted(set(languages) - CHAPTER_LANGUAGES)
        if invalid:
            raise MalformedParams(details={"languages": f"Invalid languages: {', '.join(invalid)}"})
        params["languages"] = languages
    else:
        preferred = _preferred_languages(user)
        if preferred:
            params["languages"] = preferred

    return await catalog.get_manga_chapters(str(manga_id), params)
