"""Two-tier query cache and the cache-backed resolvers built on it."""

from __future__ import annotations

from pcritical.cache.store import QueryCache, open_cache, remove_cache
from pcritical.cache.queries import CachedMetadataResolver, CachedSizeResolver

__all__ = [
    "CachedMetadataResolver",
    "CachedSizeResolver",
    "QueryCache",
    "open_cache",
    "remove_cache",
]
