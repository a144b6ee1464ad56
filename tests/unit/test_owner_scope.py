# =============================================================================
# tests/unit/test_owner_scope.py
# Unit Tests for owner-scoped table access and query execution
# =============================================================================

import pytest
import httpx


class TestOwnerScopedTable:
    """Every builder is filtered to, or stamped with, the owner"""

    def test_select_filters_on_owner(self, mock_supabase, query, owner_id):
        from asthmacare.data import OwnerScopedTable

        OwnerScopedTable(mock_supabase, "symptoms", owner_id).select()

        mock_supabase.table.assert_called_with("symptoms")
        query.select.assert_called_with("*")
        query.eq.assert_called_with("user_id", owner_id)

    def test_insert_overrides_owner(self, mock_supabase, query, owner_id):
        """A caller-supplied user_id cannot point at another owner"""
        from asthmacare.data import OwnerScopedTable

        OwnerScopedTable(mock_supabase, "symptoms", owner_id).insert(
            {"severity": 3, "user_id": "someone-else"}
        )

        query.insert.assert_called_with({"severity": 3, "user_id": owner_id})

    def test_bulk_insert(self, mock_supabase, query, owner_id):
        from asthmacare.data import OwnerScopedTable

        OwnerScopedTable(mock_supabase, "medications", owner_id).insert([{"a": 1}, {"a": 2}])

        rows = query.insert.call_args[0][0]
        assert all(row["user_id"] == owner_id for row in rows)

    def test_update_cannot_change_owner(self, mock_supabase, query, owner_id):
        from asthmacare.data import OwnerScopedTable

        OwnerScopedTable(mock_supabase, "appointments", owner_id).update(
            {"status": "cancelled", "user_id": "someone-else"}
        )

        query.update.assert_called_with({"status": "cancelled"})
        query.eq.assert_called_with("user_id", owner_id)

    def test_delete_filters_on_owner(self, mock_supabase, query, owner_id):
        from asthmacare.data import OwnerScopedTable

        OwnerScopedTable(mock_supabase, "emergency_contacts", owner_id).delete()

        query.delete.assert_called_once()
        query.eq.assert_called_with("user_id", owner_id)

    def test_owner_required(self, mock_supabase):
        from asthmacare.data import OwnerScopedTable

        with pytest.raises(ValueError):
            OwnerScopedTable(mock_supabase, "symptoms", "")


class TestBaseServiceQueries:
    """Test run_query error translation"""

    @pytest.fixture
    def service(self, mock_supabase, auth_session):
        from asthmacare.services import SymptomService

        return SymptomService(mock_supabase, auth_session)

    def test_without_session_raises(self, mock_supabase):
        from asthmacare.errors import UnauthenticatedError
        from asthmacare.services import SymptomService

        with pytest.raises(UnauthenticatedError):
            SymptomService(mock_supabase).history()

    def test_signed_out_session_raises(self, mock_supabase, anonymous_session):
        from asthmacare.errors import UnauthenticatedError
        from asthmacare.services import SymptomService

        with pytest.raises(UnauthenticatedError):
            SymptomService(mock_supabase, anonymous_session).history()

    def test_no_rows_is_empty_success(self, service, query, api_error):
        query.execute.side_effect = api_error("PGRST116", "JSON object requested, multiple (or no) rows returned")

        result = service.history()

        assert result.success
        assert result.data == []

    def test_no_rows_single_is_none(self, service, query, api_error):
        query.execute.side_effect = api_error("PGRST116")

        result = service.run_query("Get one", lambda: query.execute(), single=True)

        assert result.success
        assert result.data is None

    @pytest.mark.parametrize("code,error_code,message", [
        ("23505", "DB_409", "This record already exists"),
        ("42501", "DB_403", "Permission denied"),
        ("PGRST301", "DB_403", "Row Level Security policy violated"),
        ("23502", "DATA_001", "Required field is missing"),
        ("XX000", "DB_000", "An unexpected error occurred"),
    ])
    def test_database_errors_become_failed_results(self, service, query, api_error, code, error_code, message):
        query.execute.side_effect = api_error(code)

        result = service.history()

        assert not result.success
        assert result.error_code == error_code
        assert result.error == message
        assert result.metadata["db_code"] == code
        assert result.metadata["table"] == "symptoms"

    def test_unreachable_backend_raises(self, service, query):
        from asthmacare.errors import TransportError

        query.execute.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(TransportError):
            service.history()
