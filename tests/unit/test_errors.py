# =============================================================================
# tests/unit/test_errors.py
# Unit Tests for error classification and handling
# =============================================================================

import pytest
from unittest.mock import MagicMock


class TestFormatDatabaseError:
    """Test user-facing database messages"""

    @pytest.mark.parametrize("code,message", [
        ("23505", "This record already exists"),
        ("23503", "Referenced record does not exist"),
        ("23502", "Required field is missing"),
        ("42501", "Permission denied"),
        ("PGRST116", "Record not found"),
        ("PGRST301", "Row Level Security policy violated"),
    ])
    def test_known_codes(self, code, message):
        from asthmacare.errors import format_database_error

        assert format_database_error(code) == message

    @pytest.mark.parametrize("code", ["99999", "", None])
    def test_unknown_code_gets_generic_message(self, code):
        from asthmacare.errors import GENERIC_ERROR_MESSAGE, format_database_error

        assert format_database_error(code) == GENERIC_ERROR_MESSAGE


class TestClassifyApiError:
    """Test APIError -> exception taxonomy"""

    def test_duplicate_key(self, api_error):
        from asthmacare.errors import ConflictError, classify_api_error

        error = classify_api_error(api_error("23505", "duplicate key value"), table="user_profiles")

        assert isinstance(error, ConflictError)
        assert error.code == "DB_409"
        assert error.details["table"] == "user_profiles"
        assert error.details["raw_message"] == "duplicate key value"

    def test_hint_is_kept(self, api_error):
        from asthmacare.errors import classify_api_error

        error = classify_api_error(api_error("42501", hint="check your policies"))

        assert error.details["hint"] == "check your policies"

    def test_unknown_code(self, api_error):
        from asthmacare.errors import DatabaseError, classify_api_error

        error = classify_api_error(api_error("P0001"))

        assert type(error) is DatabaseError
        assert error.code == "DB_000"


class TestExceptions:
    """Test exception details"""

    def test_unauthenticated(self):
        from asthmacare.errors import UnauthenticatedError

        error = UnauthenticatedError()

        assert error.code == "AUTH_001"
        assert error.message == "User not authenticated"

    def test_configuration_error_is_not_recoverable(self):
        from asthmacare.errors import ConfigurationError

        error = ConfigurationError("missing url", config_key="supabase")

        assert not error.recoverable
        assert error.to_dict()["details"] == {"config_key": "supabase"}

    def test_transport_error_status(self):
        from asthmacare.errors import TransportError

        error = TransportError("down", service="air_quality_weatherapi", status_code=503)

        assert error.details == {"service": "air_quality_weatherapi", "status_code": 503}
        assert str(error).startswith("[NET_001] down")


@pytest.fixture
def page(monkeypatch):
    """Streamlit as seen by the handlers"""
    fake_st = MagicMock()
    fake_st.session_state = {}
    monkeypatch.setattr("asthmacare.errors.handlers.st", fake_st)
    return fake_st


class TestHandleError:
    """Test logging and page messages"""

    def test_transport_error_gets_friendly_message(self, page):
        from asthmacare.errors import TransportError, handle_error

        handle_error(TransportError("GET /symptoms failed", service="supabase"))

        page.error.assert_called_once_with(
            "AsthmaCare can't reach its servers right now. Check your connection and try again."
        )

    def test_database_message_is_shown_as_is(self, page):
        from asthmacare.errors import ConflictError, handle_error

        handle_error(ConflictError("This record already exists"))

        page.error.assert_called_once_with("This record already exists")

    def test_unexpected_exception_is_critical(self, page):
        from asthmacare.errors import GENERIC_ERROR_MESSAGE, handle_error

        handle_error(RuntimeError("boom"))

        message = page.error.call_args[0][0]
        assert message.startswith(GENERIC_ERROR_MESSAGE)
        assert "contact support" in message

    def test_user_message_override(self, page):
        from asthmacare.errors import UnauthenticatedError, handle_error

        handle_error(UnauthenticatedError(), user_message="Sign in to see your reports")

        page.error.assert_called_once_with("Sign in to see your reports")

    def test_log_only(self, page):
        from asthmacare.errors import NotFoundError, handle_error

        handle_error(NotFoundError("Record not found"), show_user_message=False)

        page.error.assert_not_called()

    def test_details_only_in_debug_mode(self, page):
        from asthmacare.errors import ConflictError, handle_error

        error = ConflictError("This record already exists", table="user_profiles")
        handle_error(error)
        page.json.assert_not_called()

        page.session_state["debug_mode"] = True
        handle_error(error)
        page.json.assert_called_once_with({"table": "user_profiles"})


class TestShowResult:
    """Test rendering of service results"""

    def test_success_message(self, page):
        from asthmacare.errors import show_result
        from asthmacare.services import ServiceResult

        assert show_result(ServiceResult.ok({"id": "c1"}), "Contact saved")
        page.success.assert_called_once_with("Contact saved")

    def test_silent_success(self, page):
        from asthmacare.errors import show_result
        from asthmacare.services import ServiceResult

        assert show_result(ServiceResult.ok())
        page.success.assert_not_called()

    def test_failure(self, page):
        from asthmacare.errors import show_result
        from asthmacare.services import ServiceResult

        assert not show_result(ServiceResult.fail("Invalid phone number", error_code="DATA_001"))
        page.error.assert_called_once_with("Invalid phone number")


class TestErrorContext:
    """Test the page block guard"""

    def test_asthmacare_error_is_contained(self, page):
        from asthmacare.errors import ErrorContext, TransportError

        with ErrorContext("Loading history") as ctx:
            raise TransportError("down", service="supabase")

        assert ctx.failed
        assert ctx.error.code == "NET_001"
        page.error.assert_called_once()
        page.stop.assert_not_called()

    def test_stop_page(self, page):
        from asthmacare.errors import ErrorContext, UnauthenticatedError

        with ErrorContext("Loading dashboard", stop_page=True):
            raise UnauthenticatedError()

        page.stop.assert_called_once()

    def test_other_exceptions_propagate(self, page):
        from asthmacare.errors import ErrorContext

        with pytest.raises(KeyError):
            with ErrorContext("Loading dashboard"):
                raise KeyError("services")
        page.error.assert_not_called()

    def test_clean_block(self, page):
        from asthmacare.errors import ErrorContext

        with ErrorContext("Loading dashboard") as ctx:
            pass

        assert not ctx.failed
