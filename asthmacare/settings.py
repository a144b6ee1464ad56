"""
Application settings for AsthmaCare.

Values are resolved from Streamlit secrets first, then environment variables
(a local .env file is honoured), then the defaults below.

Expected secrets.toml format:
    [supabase]
    url = "https://your-project.supabase.co"
    key = "your-anon-key"

    [api.air_quality]
    provider = "weatherapi"
    base_url = "http://api.weatherapi.com"
    api_key = "your_api_key"

    [app]
    site_url = "http://localhost:8501"
    login_page = "app.py"
    cache_window_minutes = 30
"""

from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import streamlit as st
from dotenv import load_dotenv

from asthmacare.logging import get_logger

logger = get_logger(__name__)

load_dotenv()

PLACEHOLDER_URL = "your-supabase-url"
PLACEHOLDER_KEY = "your-supabase-anon-key"


@dataclass
class AppSettings:
    """Resolved configuration for one running app."""

    # ==================== SUPABASE ====================
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None

    # ==================== AIR QUALITY API ====================
    air_quality_provider: str = "mock"
    air_quality_base_url: str = "http://api.weatherapi.com"
    air_quality_api_key: Optional[str] = None
    cache_window_minutes: int = 30

    # ==================== AUTH / NAVIGATION ====================
    site_url: str = "http://localhost:8501"
    login_page: str = "app.py"
    reset_password_path: str = "/reset-password"

    # ==================== AI CHAT ====================
    chat_min_delay: float = 1.0
    chat_max_delay: float = 3.0


def _read_secrets_section(name: str) -> Dict[str, Any]:
    """Return a secrets section as a plain dict ({} when absent)."""
    try:
        section = st.secrets
        for part in name.split("."):
            if part not in section:
                return {}
            section = section[part]
        return dict(section)
    except Exception:
        # No secrets.toml at all (tests, scripts)
        return {}


def load_settings() -> AppSettings:
    """
    Build AppSettings from Streamlit secrets and the environment.

    Returns:
        AppSettings with every field resolved
    """
    supabase = _read_secrets_section("supabase")
    air_quality = _read_secrets_section("api.air_quality")
    app = _read_secrets_section("app")
    defaults = AppSettings()

    settings = AppSettings(
        supabase_url=supabase.get("url") or os.getenv("SUPABASE_URL"),
        supabase_key=supabase.get("key") or os.getenv("SUPABASE_KEY"),
        air_quality_provider=(
            air_quality.get("provider")
            or os.getenv("AIR_QUALITY_PROVIDER")
            or defaults.air_quality_provider
        ),
        air_quality_base_url=air_quality.get("base_url", defaults.air_quality_base_url),
        air_quality_api_key=air_quality.get("api_key") or os.getenv("AIR_QUALITY_API_KEY"),
        cache_window_minutes=int(app.get("cache_window_minutes", defaults.cache_window_minutes)),
        site_url=app.get("site_url") or os.getenv("ASTHMACARE_SITE_URL") or defaults.site_url,
        login_page=app.get("login_page", defaults.login_page),
        chat_min_delay=float(app.get("chat_min_delay", defaults.chat_min_delay)),
        chat_max_delay=float(app.get("chat_max_delay", defaults.chat_max_delay)),
    )

    logger.debug(
        f"Settings loaded (supabase configured: {is_supabase_configured(settings)}, "
        f"air quality provider: {settings.air_quality_provider})"
    )
    return settings


def is_supabase_configured(settings: AppSettings) -> bool:
    """Check that real (non-placeholder) Supabase credentials are present."""
    url = settings.supabase_url or ""
    key = settings.supabase_key or ""
    return (
        bool(url and key)
        and url != PLACEHOLDER_URL
        and key != PLACEHOLDER_KEY
        and "supabase.co" in url
    )
