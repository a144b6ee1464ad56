# asthmacare/cache/__init__.py
"""
Freshness cache for external lookups (air quality).
"""
from .freshness import (
    CachedLookup,
    CacheStore,
    FreshnessCache,
    SupabaseCacheStore,
    DEFAULT_WINDOW_MINUTES,
    is_fresh,
    normalize_key,
)

__all__ = [
    "CachedLookup",
    "CacheStore",
    "FreshnessCache",
    "SupabaseCacheStore",
    "DEFAULT_WINDOW_MINUTES",
    "is_fresh",
    "normalize_key",
]
