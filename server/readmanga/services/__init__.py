"""Services for the Read-Manga API."""

from .cache import Cache, CacheEntry, MISSING, compute_key
from .catalog import CatalogService
from .auth import TokenValidator, User

__all__ = ["Cache", "CacheEntry", "MISSING", "compute_key", "CatalogService", "TokenValidator", "User"]
