# asthmacare/cache/freshness.py
"""
Time-windowed cache-or-refetch policy.

A cached value is fresh while `now - created_at < window`. Fresh values are
served without calling the fetcher; stale values are kept and served as a
degraded fallback when a refetch fails.

Concurrent misses for the same key are not de-duplicated: each caller
fetches on its own and each successful fetch appends a new entry.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Optional, Protocol

from asthmacare.data.supabase_client import TABLES
from asthmacare.logging import get_logger
from asthmacare.utils.timeutils import parse_timestamp, utc_now

logger = get_logger(__name__)

DEFAULT_WINDOW_MINUTES = 30


@dataclass(frozen=True)
class CachedLookup:
    key: str
    payload: Any
    created_at: datetime


class CacheStore(Protocol):
    def latest(self, key: str) -> Optional[CachedLookup]:
        """Most recent entry for a normalised key, or None."""

    def save(self, entry: CachedLookup, window_minutes: int) -> None:
        """Append a new entry."""


def normalize_key(key: str) -> str:
    return key.strip().casefold()


def is_fresh(created_at: datetime, now: datetime, window_minutes: float) -> bool:
    return now - created_at < timedelta(minutes=window_minutes)


class SupabaseCacheStore:
    """CacheStore backed by the air_quality_cache table."""

    def __init__(self, client, table_name: str = TABLES["air_quality_cache"]):
        self.client = client
        self.table_name = table_name

    def latest(self, key: str) -> Optional[CachedLookup]:
        response = (
            self.client.table(self.table_name)
            .select("*")
            .eq("location", key)
            .order("created_at", desc=True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None

        row = response.data[0]
        return CachedLookup(
            key=row["location"],
            payload=row["data"],
            created_at=parse_timestamp(row["created_at"]),
        )

    def save(self, entry: CachedLookup, window_minutes: int) -> None:
        self.client.table(self.table_name).insert({
            "location": entry.key,
            "data": entry.payload,
            "created_at": entry.created_at.isoformat(),
            "expires_at": (entry.created_at + timedelta(minutes=window_minutes)).isoformat(),
        }).execute()


class FreshnessCache:
    """
    lookup_or_fetch() over any CacheStore.

    Usage:
        cache = FreshnessCache(SupabaseCacheStore(client), window_minutes=30)
        data = cache.lookup_or_fetch("Madrid", lambda: connector.fetch_current("Madrid"))
    """

    def __init__(
        self,
        store: CacheStore,
        window_minutes: int = DEFAULT_WINDOW_MINUTES,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.window_minutes = window_minutes
        self.clock = clock or utc_now

    def _latest(self, key: str) -> Optional[CachedLookup]:
        try:
            return self.store.latest(key)
        except Exception as e:
            logger.error(f"Cache lookup failed for '{key}': {e}")
            return None

    def _save(self, entry: CachedLookup, window_minutes: int) -> None:
        try:
            self.store.save(entry, window_minutes)
        except Exception as e:
            logger.error(f"Cache storage failed for '{entry.key}': {e}")

    def lookup_or_fetch(
        self,
        key: str,
        fetcher: Callable[[], Any],
        window_minutes: Optional[int] = None,
    ) -> Any:
        """
        Return a fresh cached payload, or fetch, store and return a new one.

        If the fetcher raises, the newest cached payload is returned however
        old it is; with nothing cached the fetcher's exception propagates.
        """
        key = normalize_key(key)
        window = self.window_minutes if window_minutes is None else window_minutes

        cached = self._latest(key)
        if cached is not None and is_fresh(cached.created_at, self.clock(), window):
            logger.info(f"Using cached data for '{key}'")
            return cached.payload

        try:
            payload = fetcher()
        except Exception as e:
            logger.error(f"Fetch failed for '{key}': {e}")
            fallback = self._latest(key)
            if fallback is not None:
                logger.warning(f"Using stale cached data for '{key}' as fallback")
                return fallback.payload
            raise

        self._save(CachedLookup(key=key, payload=payload, created_at=self.clock()), window)
        logger.info(f"Fetched fresh data for '{key}'")
        return payload
