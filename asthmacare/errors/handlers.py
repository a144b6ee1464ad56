# =============================================================================
# asthmacare/errors/handlers.py
# Surface AsthmaCare errors in the log and on the page
# =============================================================================

from __future__ import annotations
from typing import Any, Dict, Optional
import streamlit as st

from asthmacare.logging import get_logger
from .database import GENERIC_ERROR_MESSAGE
from .exceptions import AsthmaCareError

logger = get_logger(__name__)

# Page wording for errors whose own message is meant for the log
USER_MESSAGES: Dict[str, str] = {
    "AUTH_001": "Your session has ended. Please sign in again.",
    "NET_001": "AsthmaCare can't reach its servers right now. Check your connection and try again.",
    "STORAGE_001": "The file could not be stored. Please try again.",
    "CONFIG_001": "AsthmaCare is not configured correctly. Please contact support.",
}


def user_message_for(error: Exception) -> str:
    """Message to put in front of the user for an exception."""
    if isinstance(error, AsthmaCareError):
        return USER_MESSAGES.get(error.code, error.message)
    return GENERIC_ERROR_MESSAGE


def handle_error(
    error: Exception,
    show_user_message: bool = True,
    log_error: bool = True,
    user_message: Optional[str] = None,
) -> None:
    """
    Log an error and optionally show it on the page.

    Recoverable AsthmaCare errors are logged as warnings without a traceback;
    everything else is logged as an error with one.

    Args:
        error: The exception to handle
        show_user_message: Whether to display it via st.error
        log_error: Whether to log it
        user_message: Replaces the derived page message
    """
    if isinstance(error, AsthmaCareError):
        code, details, recoverable = error.code, error.details, error.recoverable
    else:
        code, details, recoverable = "UNKNOWN", {}, False

    if log_error:
        if isinstance(error, AsthmaCareError) and recoverable:
            logger.warning(f"[{code}] {error.message}", extra={"details": details})
        else:
            logger.error(f"[{code}] {error}", extra={"details": details}, exc_info=error)

    if show_user_message:
        _show(user_message or user_message_for(error), details, critical=not recoverable)


def _show(message: str, details: Optional[Dict[str, Any]], critical: bool = False) -> None:
    if critical:
        st.error(f"{message} If this keeps happening, please contact support.")
    else:
        st.error(message)

    if details and st.session_state.get("debug_mode", False):
        with st.expander("Error Details", expanded=False):
            st.json(details)


def show_result(result, success_message: Optional[str] = None) -> bool:
    """
    Render the outcome of a service call.

    Usage:
        if show_result(contacts.add(name, phone), "Contact saved"):
            st.rerun()

    Returns:
        result.success
    """
    if result.success:
        if success_message:
            st.success(success_message)
        return True

    _show(result.error or GENERIC_ERROR_MESSAGE, result.metadata)
    return False


class ErrorContext:
    """
    Guard a block of page code that talks to services.

    AsthmaCare errors raised inside the block (an expired session, an
    unreachable backend) are logged and shown, and the rest of the block
    is skipped. Other exceptions propagate, including Streamlit's own
    stop/rerun signals.

    Usage:
        with ErrorContext("Loading dashboard", stop_page=True):
            dashboard = services["export"].dashboard()
    """

    def __init__(self, operation: str, stop_page: bool = False):
        self.operation = operation
        self.stop_page = stop_page
        self.error: Optional[AsthmaCareError] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def __enter__(self) -> ErrorContext:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_val is None or not isinstance(exc_val, AsthmaCareError):
            return False

        self.error = exc_val
        handle_error(exc_val)
        logger.info(f"{self.operation} abandoned ({exc_val.code})")

        if self.stop_page:
            st.stop()
        return True
