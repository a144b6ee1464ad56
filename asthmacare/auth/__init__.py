"""
Authentication module for AsthmaCare.

AuthSession holds the signed-in user for one browser session, AuthManager
talks to Supabase Auth, and the navigation helpers guard pages.
"""

from .session import (
    AuthSession,
    INITIAL_SESSION,
    SIGNED_IN,
    SIGNED_OUT,
)
from .authentication import AuthManager, OAUTH_PROVIDERS
from .navigation import (
    build_login_url,
    require_auth,
    resolve_auth_redirect,
    add_logout_button,
)

__all__ = [
    "AuthSession",
    "INITIAL_SESSION",
    "SIGNED_IN",
    "SIGNED_OUT",
    "AuthManager",
    "OAUTH_PROVIDERS",
    "build_login_url",
    "require_auth",
    "resolve_auth_redirect",
    "add_logout_button",
]
