"""Cache-fronted client for the MangaDex catalog API."""

from typing import Any, Awaitable, Callable, Optional
import asyncio
import httpx

from ..config import Settings
from ..logging_config import get_logger
from .cache import Cache, MISSING, compute_key
from .errors import CatalogError, NotFound, UpstreamUnavailable
from .formatters import (
    format_chapter_list,
    format_chapter_pages,
    format_manga,
    format_manga_list,
)

logger = get_logger(__name__)

CONTENT_RATINGS = ["safe", "suggestive"]
MANGA_INCLUDES = ["cover_art", "author", "artist"]
DEFAULT_CHAPTER_LANGUAGES = ["en", "ar"]


def encode_query(params: dict[str, Any]) -> list[tuple[str, str]]:
    """Encode parameters the way MangaDex expects them.

    Lists become repeated ``key[]`` entries, dicts become ``key[sub]`` entries,
    booleans are lower-cased and ``None`` values are left out.
    """
    query: list[tuple[str, str]] = []

    def scalar(value: Any) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            query.extend((f"{key}[]", scalar(item)) for item in value)
        elif isinstance(value, dict):
            query.extend((f"{key}[{sub}]", scalar(item)) for sub, item in value.items())
        else:
            query.append((key, scalar(value)))

    return query


class CatalogService:
    """Fetch, reshape and cache catalog data from MangaDex.

    Every operation follows the same pattern: derive a cache key from the
    operation name and request parameters, serve a cached result when there
    is one, otherwise call upstream, reshape the response, store it and
    return it. Only the popular listing degrades to an (also cached) empty
    result on upstream failure; every other operation raises.
    """

    def __init__(
        self,
        cache: Cache,
        client: httpx.AsyncClient,
        uploads_url: str,
        timeout: Optional[float] = None,
    ):
        self.cache = cache
        self.client = client
        self.uploads_url = uploads_url.rstrip("/")
        # Budget for a whole upstream call; httpx timeouts apply per phase
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "CatalogService":
        client = httpx.AsyncClient(
            base_url=settings.mangadex_base_url,
            timeout=settings.upstream_timeout,
            headers={"User-Agent": settings.user_agent},
        )
        return cls(
            Cache(ttl=settings.cache_ttl),
            client,
            settings.mangadex_uploads_url,
            timeout=settings.upstream_timeout,
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _cached(
        self,
        operation: str,
        key_params: dict[str, Any],
        loader: Callable[[], Awaitable[Any]],
    ) -> Any:
        key = compute_key(operation, key_params)
        cached = self.cache.get(key)
        if cached is not MISSING:
            logger.debug("Cache hit", operation=operation, cache_key=key)
            return cached

        logger.debug("Cache miss", operation=operation, cache_key=key)
        result = await loader()
        self.cache.set(key, result)
        return result

    async def _fetch(
        self,
        operation: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        not_found: Optional[str] = None,
    ) -> dict:
        """GET a JSON document from upstream, mapping failures to catalog errors."""
        try:
            response = await asyncio.wait_for(
                self.client.get(path, params=encode_query(params or {})),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error("Upstream request timed out", operation=operation, path=path, timeout=self.timeout)
            raise UpstreamUnavailable(details={"operation": operation, "timeout": self.timeout}) from e
        except httpx.HTTPError as e:
            logger.error("Upstream request failed", operation=operation, path=path, error=str(e))
            raise UpstreamUnavailable(details={"operation": operation}) from e

        if response.status_code == 404 and not_found:
            logger.info("Upstream entity not found", operation=operation, path=path)
            raise NotFound(not_found)

        if response.is_error:
            logger.error(
                "Upstream returned an error",
                operation=operation,
                path=path,
                status_code=response.status_code,
            )
            raise UpstreamUnavailable(details={"operation": operation, "status": response.status_code})

        try:
            body = response.json()
        except ValueError as e:
            logger.error("Upstream returned invalid JSON", operation=operation, path=path)
            raise UpstreamUnavailable(details={"operation": operation}) from e

        if not isinstance(body, dict):
            raise UpstreamUnavailable(details={"operation": operation})
        return body

    def _reshape(self, operation: str, formatter: Callable[..., dict], *args: Any) -> dict:
        """Run a formatter, treating an unexpected payload shape as an upstream failure."""
        try:
            return formatter(*args)
        except (AttributeError, TypeError, KeyError) as e:
            logger.error("Upstream returned an unexpected payload", operation=operation, error=repr(e))
            raise UpstreamUnavailable(details={"operation": operation}) from e

    async def search_manga(self, params: Optional[dict[str, Any]] = None) -> dict:
        """Search manga by title, status and tags."""
        params = dict(params or {})

        async def load() -> dict:
            query = {
                "limit": params.get("limit") or 20,
                "offset": params.get("offset") or 0,
                "order": {"relevance": "desc"},
                "contentRating": CONTENT_RATINGS,
                "includes": MANGA_INCLUDES,
                **params,
            }
            body = await self._fetch("search", "/manga", query)
            return self._reshape("search", format_manga_list, body, self.uploads_url)

        return await self._cached("search", params, load)

    async def get_popular_manga(self, params: Optional[dict[str, Any]] = None) -> dict:
        """List the most followed manga, falling back to an empty page on failure."""
        params = dict(params or {})
        limit = params.get("limit") or 20
        offset = params.get("offset") or 0

        async def load() -> dict:
            query = {
                "limit": limit,
                "offset": offset,
                "order": {"followedCount": "desc"},
                "contentRating": CONTENT_RATINGS,
                "includes": MANGA_INCLUDES,
                "hasAvailableChapters": True,
                **params,
            }
            try:
                body = await self._fetch("popular", "/manga", query)
                return self._reshape("popular", format_manga_list, body, self.uploads_url)
            except CatalogError as e:
                logger.warning("Serving empty popular listing", error=e.message, limit=limit, offset=offset)
                return {"data": [], "total": 0, "limit": limit, "offset": offset}

        return await self._cached("popular", params, load)

    async def get_manga(self, manga_id: str) -> dict:
        """Get a single manga with cover, author and artist."""

        async def load() -> dict:
            body = await self._fetch(
                "manga-detail",
                f"/manga/{manga_id}",
                {"includes": MANGA_INCLUDES},
                not_found="Manga not found",
            )
            if not body.get("data"):
                raise NotFound("Manga not found")
            return self._reshape("manga-detail", format_manga, body["data"], self.uploads_url)

        return await self._cached("manga-detail", {"id": manga_id}, load)

    async def get_manga_chapters(self, manga_id: str, params: Optional[dict[str, Any]] = None) -> dict:
        """List chapters of a manga in ascending chapter order."""
        params = dict(params or {})

        async def load() -> dict:
            extra = {k: v for k, v in params.items() if k != "languages"}
            query = {
                "manga": manga_id,
                "limit": params.get("limit") or 100,
                "offset": params.get("offset") or 0,
                "order": {"chapter": "asc"},
                "translatedLanguage": params.get("languages") or DEFAULT_CHAPTER_LANGUAGES,
                "includes": ["scanlation_group"],
                **extra,
            }
            body = await self._fetch("chapters", "/chapter", query)
            return self._reshape("chapters", format_chapter_list, body)

        return await self._cached("chapters", {"mangaId": manga_id, **params}, load)

    async def get_chapter_pages(self, chapter_id: str) -> dict:
        """Resolve page image URLs for a chapter through the at-home server."""

        async def load() -> dict:
            chapter = await self._fetch(
                "chapter-pages",
                f"/chapter/{chapter_id}",
                not_found="Chapter not found",
            )
            if not chapter.get("data"):
                raise NotFound("Chapter not found")

            at_home = await self._fetch("chapter-pages", f"/at-home/server/{chapter_id}")
            if not at_home.get("baseUrl"):
                logger.error("Page server unavailable", chapter_id=chapter_id)
                raise UpstreamUnavailable("Page server unavailable", details={"operation": "chapter-pages"})

            return self._reshape("chapter-pages", format_chapter_pages, chapter_id, at_home)

        return await self._cached("chapter-pages", {"chapterId": chapter_id}, load)

    def cache_stats(self) -> dict:
        return {"cacheSize": self.cache.size, "cacheTTL": self.cache.ttl}

    def clear_cache(self) -> None:
        logger.info("Clearing catalog cache", entries=self.cache.size)
        self.cache.clear()
