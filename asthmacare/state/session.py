import streamlit as st

from asthmacare.ai import MockChatResponder
from asthmacare.api import APIConfigManager
from asthmacare.auth import AuthManager, AuthSession, add_logout_button, require_auth
from asthmacare.data import create_supabase_client, get_cached_supabase_client
from asthmacare.errors import ConfigurationError
from asthmacare.logging import get_logger
from asthmacare.services import (
    AirQualityService,
    AppointmentService,
    ChatService,
    DoctorService,
    EmergencyContactService,
    ExportService,
    HealthReportService,
    MedicationService,
    NotificationService,
    ProfileService,
    SymptomService,
)
from asthmacare.settings import load_settings

logger = get_logger(__name__)

# Central registry for session-state keys used across the app.
SESSION_DEFAULTS = {
    "settings": None,
    "supabase_client": None,
    "auth_session": None,
    "auth_manager": None,
    "services": None,
    "chat_messages": [],
    "air_quality_location": "",
    "debug_mode": False,
}

SERVICE_CLASSES = {
    "profiles": ProfileService,
    "reports": HealthReportService,
    "appointments": AppointmentService,
    "symptoms": SymptomService,
    "medications": MedicationService,
    "contacts": EmergencyContactService,
    "notifications": NotificationService,
    "export": ExportService,
}


def init_state():
    """Initialize session state with defaults."""
    for k, v in SESSION_DEFAULTS.items():
        if k not in st.session_state:
            st.session_state[k] = list(v) if isinstance(v, list) else v

    if st.session_state["settings"] is None:
        st.session_state["settings"] = load_settings()


def get_client():
    """
    Supabase client for this browser session.

    Each session gets its own client because the client carries the user's
    auth tokens. Returns None (with a warning shown) when not configured.
    """
    init_state()
    if st.session_state["supabase_client"] is None:
        try:
            st.session_state["supabase_client"] = create_supabase_client(st.session_state["settings"])
        except ConfigurationError as e:
            st.warning(f"⚠️ {e.message}")
            return None
    return st.session_state["supabase_client"]


def get_auth_session() -> AuthSession:
    """The AuthSession of this browser session (created on first use)."""
    init_state()
    if st.session_state["auth_session"] is None:
        st.session_state["auth_session"] = AuthSession()
    return st.session_state["auth_session"]


def get_auth_manager():
    """Initialized AuthManager for this browser session, or None without a backend."""
    client = get_client()
    if client is None:
        return None

    if st.session_state["auth_manager"] is None:
        manager = AuthManager(client, get_auth_session(), settings=st.session_state["settings"])
        manager.initialize()
        st.session_state["auth_manager"] = manager
    return st.session_state["auth_manager"]


def get_services():
    """
    Owner-scoped services bound to this session's client and AuthSession.

    Returns:
        Dict keyed like SERVICE_CLASSES plus "chat", "doctors" and
        "air_quality", or None without a backend
    """
    client = get_client()
    if client is None:
        return None

    if st.session_state["services"] is None:
        session = get_auth_session()
        settings = st.session_state["settings"]
        services = {name: cls(client, session) for name, cls in SERVICE_CLASSES.items()}

        services["chat"] = ChatService(
            client,
            session,
            MockChatResponder(settings.chat_min_delay, settings.chat_max_delay),
        )

        # Shared (not owner) data goes through the anonymous client
        shared = get_cached_supabase_client() or client
        services["doctors"] = DoctorService(shared)
        services["air_quality"] = AirQualityService.from_client(
            shared,
            APIConfigManager(settings).get_air_quality_connector(),
            settings.cache_window_minutes,
        )
        st.session_state["services"] = services
    return st.session_state["services"]


def clear_user_state():
    """Forget per-user UI state after sign-out (keeps client and auth)."""
    st.session_state["chat_messages"] = []
    logger.info("User state cleared")


def protect_page(page_path: str):
    """
    Common start of every signed-in page.

    Redirects anonymous visitors to the login page and stops the script;
    otherwise returns the session's services.
    """
    init_state()
    if get_auth_manager() is None:
        st.stop()

    session = get_auth_session()
    if not require_auth(session, page_path, login_page="app.py"):
        st.stop()

    def _logout():
        st.session_state["auth_manager"].sign_out()
        clear_user_state()

    add_logout_button(_logout)
    return get_services()
