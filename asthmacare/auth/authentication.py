"""
Authentication module for AsthmaCare.

AuthManager drives Supabase Auth (email/password, OAuth, password reset)
for one browser session. The SDK's auth events are forwarded into the
session's AuthSession, which is what pages and services read.
"""

from typing import Any, Callable, Dict, Optional

import httpx
from supabase import AuthError

from asthmacare.errors import AuthenticationError, TransportError, handle_error
from asthmacare.logging import get_logger
from asthmacare.services.base_service import ServiceResult
from asthmacare.services.profile_service import ProfileService
from asthmacare.settings import AppSettings, load_settings
from .session import AuthSession

logger = get_logger(__name__)

OAUTH_PROVIDERS = ("google", "github")


class AuthManager:
    """
    Sign-up / sign-in / sign-out and token management for one browser session.

    Usage:
        auth = AuthManager(client, session)
        auth.initialize()
        result = auth.sign_in("me@example.com", "secret")
        if result.success:
            st.switch_page("pages/01_Dashboard.py")
    """

    def __init__(
        self,
        client,
        session: AuthSession,
        profiles: Optional[ProfileService] = None,
        settings: Optional[AppSettings] = None,
    ):
        self.client = client
        self.session = session
        self.profiles = profiles or ProfileService(client, session)
        self.settings = settings or load_settings()
        self._sdk_subscription = None

    # ==================== LIFECYCLE ====================

    def initialize(self) -> None:
        """
        Load the initial session and start listening to SDK auth events.

        Safe to call on every Streamlit rerun; only the first call does work.
        """
        if self.session.initialized:
            return

        user = None
        try:
            current = self.client.auth.get_session()
            user = getattr(current, "user", None) if current else None
        except AuthError as e:
            logger.error(f"Error getting session: {e}")

        self._sdk_subscription = self.client.auth.on_auth_state_change(
            self.session.handle_auth_event
        )
        self.session.restore(user)
        logger.info("AuthManager initialized")

    def _call(self, operation: str, func: Callable[[], Any]) -> ServiceResult:
        """Run an auth SDK call, turning provider rejections into failed results."""
        try:
            return ServiceResult.ok(func())
        except AuthError as e:
            error = AuthenticationError(
                getattr(e, "message", None) or str(e),
                provider_code=getattr(e, "code", None),
            )
            handle_error(error, show_user_message=False)
            return ServiceResult.from_exception(error)
        except (httpx.TransportError, ConnectionError) as e:
            raise TransportError(f"{operation} failed: auth service unreachable", service="auth") from e

    # ==================== SIGN UP / SIGN IN ====================

    def sign_up(self, email: str, password: str, metadata: Optional[Dict[str, Any]] = None) -> ServiceResult:
        """Create an account; the profile row is created afterwards, best-effort."""
        metadata = metadata or {}
        result = self._call(
            "Sign up",
            lambda: self.client.auth.sign_up({
                "email": email,
                "password": password,
                "options": {"data": metadata},
            }),
        )
        if not result.success:
            return result

        user = getattr(result.data, "user", None)
        logger.info(f"User signed up: {getattr(user, 'email', email)}")
        if user is not None:
            self.profiles.create_profile(user, metadata)
        return result

    def sign_in(self, email: str, password: str) -> ServiceResult:
        result = self._call(
            "Sign in",
            lambda: self.client.auth.sign_in_with_password({"email": email, "password": password}),
        )
        if result.success:
            logger.info(f"User signed in: {email}")
        return result

    def sign_in_with_oauth(self, provider: str) -> ServiceResult:
        """
        Start an OAuth sign-in.

        Returns:
            ServiceResult whose data carries the provider URL to open
        """
        if provider not in OAUTH_PROVIDERS:
            return ServiceResult.fail(f"Unsupported sign-in provider: {provider}", error_code="AUTH_002")

        return self._call(
            f"{provider} sign in",
            lambda: self.client.auth.sign_in_with_oauth({
                "provider": provider,
                "options": {"redirect_to": self.settings.site_url},
            }),
        )

    def sign_out(self) -> ServiceResult:
        result = self._call("Sign out", lambda: self.client.auth.sign_out())
        if result.success:
            logger.info("User signed out")
        return result

    # ==================== ACCOUNT ====================

    def reset_password(self, email: str) -> ServiceResult:
        redirect = self.settings.site_url.rstrip("/") + self.settings.reset_password_path
        result = self._call(
            "Reset password",
            lambda: self.client.auth.reset_password_for_email(email, {"redirect_to": redirect}),
        )
        if result.success:
            logger.info("Password reset email sent")
        return result

    def update_password(self, new_password: str) -> ServiceResult:
        return self._call(
            "Update password",
            lambda: self.client.auth.update_user({"password": new_password}),
        )

    def update_user_metadata(self, updates: Dict[str, Any]) -> ServiceResult:
        return self._call(
            "Update user metadata",
            lambda: self.client.auth.update_user({"data": updates}),
        )

    # ==================== TOKENS ====================

    def get_token(self) -> Optional[str]:
        """Current access token, or None when signed out."""
        try:
            current = self.client.auth.get_session()
        except AuthError as e:
            logger.error(f"Get token error: {e}")
            return None
        return getattr(current, "access_token", None) if current else None

    def refresh_session(self) -> ServiceResult:
        result = self._call("Refresh session", lambda: self.client.auth.refresh_session())
        if result.success:
            logger.info("Session refreshed")
        return result

    def shutdown(self) -> None:
        """Stop forwarding SDK auth events."""
        if self._sdk_subscription is not None:
            self._sdk_subscription.unsubscribe()
            self._sdk_subscription = None
