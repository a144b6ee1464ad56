# =============================================================================
# asthmacare/auth/session.py
# Per-browser-session authentication state
# =============================================================================
"""
AuthSession holds the signed-in user for one Streamlit browser session and
fans auth events out to observers.

There is one AuthSession per browser session (see asthmacare.state), never
one per process, so two people using the app never see each other's user.
"""

from __future__ import annotations
import threading
from typing import Any, Callable, Iterable, List, Optional

from asthmacare.errors import UnauthenticatedError
from asthmacare.logging import get_logger

logger = get_logger(__name__)

AuthCallback = Callable[[Any, str], None]

INITIAL_SESSION = "INITIAL_SESSION"
SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"
TOKEN_REFRESHED = "TOKEN_REFRESHED"
USER_UPDATED = "USER_UPDATED"
PASSWORD_RECOVERY = "PASSWORD_RECOVERY"

DEFAULT_ROLE = "user"


def _metadata(user) -> dict:
    if user is None:
        return {}
    metadata = getattr(user, "user_metadata", None)
    if metadata is None and isinstance(user, dict):
        metadata = user.get("user_metadata")
    return metadata or {}


def _user_id(user) -> Optional[str]:
    if user is None:
        return None
    if isinstance(user, dict):
        return user.get("id")
    return getattr(user, "id", None)


class AuthSession:
    """
    Current user plus the observers interested in auth changes.

    Usage:
        session = AuthSession()
        unsubscribe = session.on_auth_state_change(lambda user, event: ...)
        session.handle_auth_event("SIGNED_IN", sdk_session)
    """

    def __init__(self):
        self.current_user = None
        self.initialized = False
        self._callbacks: List[AuthCallback] = []
        self._lock = threading.Lock()

    # ==================== STATE ====================

    def restore(self, user) -> None:
        """Set the state found at start-up and announce it as INITIAL_SESSION."""
        self.current_user = user
        self.initialized = True
        self._notify(INITIAL_SESSION)

    def handle_auth_event(self, event: str, session) -> None:
        """
        Apply an auth event coming from the SDK.

        The user is taken from `session.user`; a missing session (sign-out)
        clears it. Every observer is called synchronously, in registration
        order, with (current_user, event).
        """
        self.current_user = getattr(session, "user", None) if session is not None else None
        self.initialized = True
        logger.info(f"Auth state changed: {event}")
        self._notify(event)

    def _notify(self, event: str) -> None:
        with self._lock:
            callbacks = list(self._callbacks)

        for callback in callbacks:
            try:
                callback(self.current_user, event)
            except Exception as e:
                logger.error(f"Auth state callback failed on {event}: {e}", exc_info=True)

    # ==================== OBSERVERS ====================

    def on_auth_state_change(self, callback: AuthCallback) -> Callable[[], None]:
        """
        Register an observer.

        If the initial state is already known the observer is invoked right
        away with (current_user, "INITIAL_SESSION").

        Returns:
            A function that removes the observer again
        """
        with self._lock:
            self._callbacks.append(callback)

        if self.initialized:
            try:
                callback(self.current_user, INITIAL_SESSION)
            except Exception as e:
                logger.error(f"Auth state callback failed on {INITIAL_SESSION}: {e}", exc_info=True)

        return lambda: self.remove_auth_state_callback(callback)

    def remove_auth_state_callback(self, callback: AuthCallback) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    # ==================== QUERIES ====================

    def is_authenticated(self) -> bool:
        return self.current_user is not None

    @property
    def owner_id(self) -> Optional[str]:
        return _user_id(self.current_user)

    @property
    def email(self) -> Optional[str]:
        user = self.current_user
        if isinstance(user, dict):
            return user.get("email")
        return getattr(user, "email", None)

    @property
    def role(self) -> str:
        return _metadata(self.current_user).get("role") or DEFAULT_ROLE

    def require_owner_id(self) -> str:
        """
        Id of the signed-in user.

        Raises:
            UnauthenticatedError: If nobody is signed in
        """
        owner_id = self.owner_id
        if not owner_id:
            raise UnauthenticatedError()
        return owner_id

    def has_permission(self, required_roles: Iterable[str]) -> bool:
        """True when signed in with one of `required_roles`."""
        if not self.is_authenticated():
            return False
        return self.role in set(required_roles)
