from __future__ import annotations
import streamlit as st

from asthmacare.auth import OAUTH_PROVIDERS, resolve_auth_redirect
from asthmacare.auth.navigation import RETURN_TO_KEY
from asthmacare.data import check_connection
from asthmacare.errors import ErrorContext, show_result
from asthmacare.logging import setup_logging
from asthmacare.state.session import get_auth_manager, get_auth_session, get_client, init_state

# ============================================================================
# PAGE CONFIGURATION
# ============================================================================
st.set_page_config(
    page_title="AsthmaCare - Sign in",
    page_icon="🫁",
    layout="centered",
    initial_sidebar_state="collapsed",
)

setup_logging()
init_state()

DASHBOARD_PAGE = "pages/01_Dashboard.py"


def _go_after_login():
    target = st.session_state.pop(RETURN_TO_KEY, None)
    target = target or resolve_auth_redirect(get_auth_session(), st.query_params) or DASHBOARD_PAGE
    st.switch_page(target)


st.title("🫁 AsthmaCare")
st.caption("Track symptoms, medications and appointments, and check the air before you head out.")

client = get_client()
if client is None:
    st.stop()

if not check_connection(client)["connected"]:
    st.error("Cannot reach the AsthmaCare backend right now. Please try again shortly.")
    st.stop()

auth = get_auth_manager()
session = get_auth_session()

if session.is_authenticated():
    st.success(f"Signed in as {session.email}")
    if st.button("Continue", type="primary"):
        _go_after_login()
    if st.button("Sign out"):
        auth.sign_out()
        st.rerun()
    st.stop()

# ============================================================================
# SIGN IN / SIGN UP / RESET
# ============================================================================
tab_sign_in, tab_sign_up, tab_reset = st.tabs(["Sign in", "Create account", "Forgot password"])

with tab_sign_in:
    with st.form("sign_in"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in", type="primary")
    if submitted:
        with ErrorContext("Signing in"):
            if show_result(auth.sign_in(email, password)):
                _go_after_login()

    cols = st.columns(len(OAUTH_PROVIDERS))
    for col, provider in zip(cols, OAUTH_PROVIDERS):
        with col:
            if st.button(f"Continue with {provider.title()}", key=f"oauth_{provider}"):
                with ErrorContext(f"Starting {provider} sign-in"):
                    result = auth.sign_in_with_oauth(provider)
                    if show_result(result):
                        st.link_button("Open sign-in page", result.data.url)

with tab_sign_up:
    with st.form("sign_up"):
        full_name = st.text_input("Full name")
        new_email = st.text_input("Email", key="sign_up_email")
        new_password = st.text_input("Password", type="password", key="sign_up_password")
        age_group = st.selectbox("Age group", ["child", "teen", "adult", "senior"], index=2)
        asthma_severity = st.selectbox("Asthma severity", ["mild", "moderate", "severe"])
        created = st.form_submit_button("Create account", type="primary")
    if created:
        with ErrorContext("Creating account"):
            result = auth.sign_up(
                new_email,
                new_password,
                {"full_name": full_name, "age_group": age_group, "asthma_severity": asthma_severity},
            )
            show_result(result, "Account created. Check your inbox to confirm your email address.")

with tab_reset:
    reset_email = st.text_input("Email", key="reset_email")
    if st.button("Send reset link"):
        with ErrorContext("Requesting password reset"):
            show_result(
                auth.reset_password(reset_email),
                "If that address has an account, a reset link is on its way.",
            )
