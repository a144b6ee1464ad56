# =============================================================================
# asthmacare/data/supabase_client.py
# Supabase Client Configuration for AsthmaCare
# Handles client creation and owner-scoped table access
# =============================================================================

from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

import streamlit as st

from asthmacare.errors import ConfigurationError
from asthmacare.logging import get_logger
from asthmacare.settings import AppSettings, is_supabase_configured, load_settings

logger = get_logger(__name__)


# Table names in Supabase (must match supabase/schema.sql)
TABLES = {
    "user_profiles": "user_profiles",
    "health_reports": "health_reports",
    "appointments": "appointments",
    "chat_history": "chat_history",
    "air_quality_cache": "air_quality_cache",
    "symptoms": "symptoms",
    "medications": "medications",
    "emergency_contacts": "emergency_contacts",
    "doctor_profiles": "doctor_profiles",
    "notifications": "notifications",
}

STORAGE_BUCKETS = {
    "health_reports": "health-reports",
    "profile_images": "profile-images",
    "chat_attachments": "chat-attachments",
    "documents": "documents",
}

OWNER_COLUMN = "user_id"


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string (the format Supabase stores)."""
    return datetime.now(timezone.utc).isoformat()


def _configured_settings(settings: Optional[AppSettings]) -> AppSettings:
    settings = settings or load_settings()
    if not is_supabase_configured(settings):
        raise ConfigurationError(
            "Supabase credentials not configured. Set [supabase] url/key in "
            ".streamlit/secrets.toml or SUPABASE_URL/SUPABASE_KEY.",
            config_key="supabase",
        )
    return settings


def create_supabase_client(settings: Optional[AppSettings] = None):
    """
    Create a new Supabase client.

    Each browser session gets its own client, because the client carries the
    signed-in user's auth session.

    Args:
        settings: Resolved settings (loaded from secrets/env when omitted)

    Returns:
        supabase.Client

    Raises:
        ConfigurationError: If credentials are missing or placeholders
    """
    from supabase import create_client

    settings = _configured_settings(settings)
    client = create_client(settings.supabase_url, settings.supabase_key)
    logger.info("Supabase client initialized")
    return client


async def create_async_supabase_client(settings: Optional[AppSettings] = None):
    """
    Create an async Supabase client.

    Realtime channels live only on the async client; the sync client's
    channel() is not implemented.

    Returns:
        supabase.AsyncClient

    Raises:
        ConfigurationError: If credentials are missing or placeholders
    """
    from supabase import acreate_client

    settings = _configured_settings(settings)
    client = await acreate_client(settings.supabase_url, settings.supabase_key)
    logger.info("Async Supabase client initialized")
    return client


@st.cache_resource(ttl=3600)  # Cache for 1 hour, then refresh
def get_cached_supabase_client():
    """
    Shared anonymous client for data that is not owned by a user
    (doctor directory, air quality cache).

    Returns:
        Cached Supabase client instance or None if not configured
    """
    try:
        return create_supabase_client()
    except ConfigurationError as e:
        st.warning(f"⚠️ {e.message}")
        return None


def check_connection(client) -> Dict[str, Any]:
    """
    Probe the backend with a one-row select on user_profiles.

    A "no rows" answer still counts as connected.

    Returns:
        Dict with 'connected' flag and the error (if any)
    """
    from postgrest.exceptions import APIError

    try:
        client.table(TABLES["user_profiles"]).select("id").limit(1).execute()
        return {"connected": True, "error": None}
    except APIError as e:
        if getattr(e, "code", None) == "PGRST116":
            return {"connected": True, "error": None}
        return {"connected": False, "error": e}
    except Exception as e:
        return {"connected": False, "error": e}


class OwnerScopedTable:
    """
    Access to one table restricted to a single owner.

    Every builder this class hands out is already filtered on the owner
    column (or, for inserts, has the owner column forced), so callers cannot
    read or modify another user's rows through it.

    Usage:
        symptoms = OwnerScopedTable(client, "symptoms", owner_id)
        rows = symptoms.select().order("recorded_at", desc=True).execute().data
    """

    def __init__(
        self,
        client,
        table_name: str,
        owner_id: str,
        owner_column: str = OWNER_COLUMN,
    ):
        if not owner_id:
            raise ValueError("owner_id is required for an owner-scoped table")
        self.client = client
        self.table_name = table_name
        self.owner_id = owner_id
        self.owner_column = owner_column

    def _table(self):
        return self.client.table(self.table_name)

    def select(self, columns: str = "*"):
        """Select builder filtered to the owner."""
        return self._table().select(columns).eq(self.owner_column, self.owner_id)

    def insert(self, data: Union[Dict[str, Any], List[Dict[str, Any]]]):
        """Insert builder; the owner column is overwritten on every row."""
        if isinstance(data, list):
            rows = [{**row, self.owner_column: self.owner_id} for row in data]
        else:
            rows = {**data, self.owner_column: self.owner_id}
        return self._table().insert(rows)

    def update(self, data: Dict[str, Any]):
        """Update builder filtered to the owner (the owner column cannot change)."""
        values = {k: v for k, v in data.items() if k != self.owner_column}
        return self._table().update(values).eq(self.owner_column, self.owner_id)

    def delete(self):
        """Delete builder filtered to the owner."""
        return self._table().delete().eq(self.owner_column, self.owner_id)
