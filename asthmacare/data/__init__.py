"""
Data access layer: Supabase client, owner-scoped tables, storage, realtime.
"""

from .supabase_client import (
    TABLES,
    STORAGE_BUCKETS,
    OWNER_COLUMN,
    OwnerScopedTable,
    check_connection,
    create_async_supabase_client,
    create_supabase_client,
    get_cached_supabase_client,
    utc_now_iso,
)
from .storage import StorageService
from .realtime import RealtimeService, Subscription

__all__ = [
    "TABLES",
    "STORAGE_BUCKETS",
    "OWNER_COLUMN",
    "OwnerScopedTable",
    "check_connection",
    "create_async_supabase_client",
    "create_supabase_client",
    "get_cached_supabase_client",
    "utc_now_iso",
    "StorageService",
    "RealtimeService",
    "Subscription",
]
