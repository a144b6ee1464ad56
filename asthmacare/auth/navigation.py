"""
Navigation helpers for protected pages.

Call require_auth() at the top of every page that shows user data.
"""

from typing import Callable, Mapping, Optional
from urllib.parse import quote, unquote

import streamlit as st

from .session import AuthSession

RETURN_TO_KEY = "auth_return_to"
REDIRECT_PARAM = "redirect"


def build_login_url(return_url: str, login_page: str = "app.py") -> str:
    """login_page?redirect=<url-encoded return_url>"""
    return f"{login_page}?{REDIRECT_PARAM}={quote(return_url, safe='')}"


def _switch_to_login(login_url: str) -> None:
    # Streamlit pages cannot carry a query string; keep the target in session
    page, _, query = login_url.partition("?")
    st.session_state[RETURN_TO_KEY] = unquote(query.split("=", 1)[1]) if query else None
    st.switch_page(page)


def require_auth(
    session: AuthSession,
    return_url: str,
    redirect: Optional[Callable[[str], None]] = None,
    login_page: str = "app.py",
) -> bool:
    """
    Send unauthenticated visitors to the login page.

    Args:
        session: The browser session's AuthSession
        return_url: Where to come back to after signing in
        redirect: Called with the login URL (defaults to st.switch_page)
        login_page: Login page script

    Returns:
        True if the visitor is signed in, False after redirecting
    """
    if session.is_authenticated():
        return True

    (redirect or _switch_to_login)(build_login_url(return_url, login_page))
    return False


def resolve_auth_redirect(
    session: AuthSession,
    params: Mapping[str, str],
) -> Optional[str]:
    """
    Decoded post-login target from `params`, or None.

    Only returned once the session is authenticated.
    """
    target = params.get(REDIRECT_PARAM)
    if not target or not session.is_authenticated():
        return None
    return unquote(target)


def add_logout_button(on_logout: Callable[[], None]) -> None:
    """Sidebar user info and sign-out button."""
    with st.sidebar:
        if st.button("Sign out", use_container_width=True):
            on_logout()
            st.rerun()
