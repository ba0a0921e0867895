"""Reshape raw MangaDex payloads into the public API schema."""

from typing import Any, Optional


def _find_relationship(item: dict, rel_type: str) -> Optional[dict]:
    for rel in item.get("relationships") or []:
        if rel.get("type") == rel_type:
            return rel
    return None


def _relationship_attr(item: dict, rel_type: str, attr: str) -> Any:
    rel = _find_relationship(item, rel_type)
    if rel is None:
        return None
    return (rel.get("attributes") or {}).get(attr)


def format_manga(manga: dict, uploads_url: str) -> dict:
    """Format a single manga resource."""
    attributes = manga.get("attributes") or {}
    manga_id = manga.get("id")

    cover_url = None
    cover_art = _find_relationship(manga, "cover_art")
    if cover_art is not None:
        file_name = (cover_art.get("attributes") or {}).get("fileName")
        cover_url = f"{uploads_url}/covers/{manga_id}/{file_name}"

    return {
        "id": manga_id,
        "title": attributes.get("title"),
        "description": attributes.get("description"),
        "status": attributes.get("status"),
        "year": attributes.get("year"),
        "contentRating": attributes.get("contentRating"),
        "tags": [
            {"id": tag.get("id"), "name": (tag.get("attributes") or {}).get("name")}
            for tag in attributes.get("tags") or []
        ],
        "coverUrl": cover_url,
        "author": _relationship_attr(manga, "author", "name"),
        "artist": _relationship_attr(manga, "artist", "name"),
        "lastChapter": attributes.get("lastChapter"),
        "lastVolume": attributes.get("lastVolume"),
        "originalLanguage": attributes.get("originalLanguage"),
        "availableTranslatedLanguages": attributes.get("availableTranslatedLanguages") or [],
    }


def format_manga_list(body: dict, uploads_url: str) -> dict:
    """Format a paginated manga collection."""
    return {
        "data": [format_manga(manga, uploads_url) for manga in body.get("data") or []],
        "total": body.get("total") or 0,
        "limit": body.get("limit") or 20,
        "offset": body.get("offset") or 0,
    }


def format_chapter(chapter: dict) -> dict:
    attributes = chapter.get("attributes") or {}
    return {
        "id": chapter.get("id"),
        "title": attributes.get("title"),
        "chapter": attributes.get("chapter"),
        "volume": attributes.get("volume"),
        "translatedLanguage": attributes.get("translatedLanguage"),
        "publishAt": attributes.get("publishAt"),
        "pages": attributes.get("pages"),
        "scanlationGroup": _relationship_attr(chapter, "scanlation_group", "name"),
    }


def format_chapter_list(body: dict) -> dict:
    """Format a paginated chapter feed."""
    return {
        "data": [format_chapter(chapter) for chapter in body.get("data") or []],
        "total": body.get("total") or 0,
        "limit": body.get("limit") or 100,
        "offset": body.get("offset") or 0,
    }


def format_chapter_pages(chapter_id: str, at_home: dict) -> dict:
    """Build page image URLs from an at-home server response."""
    base_url = at_home["baseUrl"]
    chapter = at_home.get("chapter") or {}
    chapter_hash = chapter.get("hash")

    pages = [
        {
            "pageNumber": index + 1,
            "url": f"{base_url}/data/{chapter_hash}/{filename}",
            "filename": filename,
        }
        for index, filename in enumerate(chapter.get("data") or [])
    ]

    return {
        "chapterId": chapter_id,
        "pages": pages,
        "totalPages": len(pages),
        "hash": chapter_hash,
    }
