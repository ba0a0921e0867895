"""TTL-based caching for upstream catalog responses."""

import json
import time
from typing import Any, Callable, Iterable, Mapping, Optional, Union
from dataclasses import dataclass


class _Missing:
    """Sentinel type for a cache lookup that found nothing."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()

Params = Union[Mapping[str, Any], Iterable[tuple[str, Any]]]


def compute_key(operation: str, params: Optional[Params] = None) -> str:
    """Build a deterministic cache key for an operation and its parameters.

    Parameters may be a mapping or a sequence of ``(name, value)`` pairs.
    Names are sorted before serialization so call-site ordering never changes
    the key, and ``None`` values are dropped the same way an omitted parameter
    would be.
    """
    if params is None:
        pairs: Iterable[tuple[str, Any]] = ()
    elif isinstance(params, Mapping):
        pairs = params.items()
    else:
        pairs = params

    normalized = {name: value for name, value in pairs if value is not None}
    serialized = json.dumps(normalized, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return f"{operation}_{serialized}"


@dataclass
class CacheEntry:
    """A single cache entry with TTL."""
    value: Any
    stored_at: float
    ttl: float  # TTL in seconds


class Cache:
    """In-memory cache with a single process-wide TTL.

    Entries are evicted lazily: an expired entry is removed the next time it is
    looked up, or when the whole cache is cleared.
    """

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> Any:
        """Get cached value, or ``MISSING`` if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return MISSING

        if self._clock() - entry.stored_at > entry.ttl:
            # Expired
            del self._entries[key]
            return MISSING

        return entry.value

    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any existing entry."""
        self._entries[key] = CacheEntry(
            value=value,
            stored_at=self._clock(),
            ttl=self.ttl,
        )

    def invalidate(self, key: str) -> None:
        """Invalidate a cache entry."""
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Clear all cache entries."""
        self._entries.clear()

    @property
    def size(self) -> int:
        return len(self._entries)
