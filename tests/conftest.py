# =============================================================================
# tests/conftest.py
# Pytest Configuration and Fixtures
# =============================================================================

import pytest
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock


OWNER_ID = "11111111-1111-1111-1111-111111111111"
OTHER_OWNER_ID = "22222222-2222-2222-2222-222222222222"

# Methods of the postgrest query builder that return the builder itself
CHAINED_METHODS = (
    "select", "insert", "update", "delete", "upsert",
    "eq", "neq", "gt", "gte", "lt", "lte", "in_",
    "order", "limit",
)


# =============================================================================
# CLOCK / USER FIXTURES
# =============================================================================

@pytest.fixture
def fixed_now():
    """Reference time used by every time-dependent test"""
    return datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def user():
    """Supabase user object as returned by the auth SDK"""
    return SimpleNamespace(
        id=OWNER_ID,
        email="patient@example.com",
        user_metadata={"full_name": "Pat Patient"},
    )


@pytest.fixture
def auth_session(user):
    """Signed-in AuthSession"""
    from asthmacare.auth.session import AuthSession

    session = AuthSession()
    session.restore(user)
    return session


@pytest.fixture
def anonymous_session():
    """Initialized AuthSession with nobody signed in"""
    from asthmacare.auth.session import AuthSession

    session = AuthSession()
    session.restore(None)
    return session


# =============================================================================
# MOCK FIXTURES
# =============================================================================

def make_query_builder(data=None):
    """MagicMock query builder whose chained calls all return the builder"""
    builder = MagicMock()
    for name in CHAINED_METHODS:
        getattr(builder, name).return_value = builder
    builder.execute.return_value = MagicMock(data=[] if data is None else data)
    return builder


@pytest.fixture
def mock_supabase():
    """Mock Supabase client; every table() call shares one query builder"""
    mock_client = MagicMock()
    mock_client.table.return_value = make_query_builder()
    return mock_client


@pytest.fixture
def query(mock_supabase):
    """The query builder handed out by mock_supabase.table()"""
    return mock_supabase.table.return_value


@pytest.fixture
def mock_storage():
    """Mock StorageService"""
    storage = MagicMock()
    storage.upload.return_value = "https://files.example.com/health-reports/report.pdf"
    storage.download.return_value = b"%PDF-1.4"
    return storage


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

@pytest.fixture
def make_symptom(fixed_now):
    """Factory for SymptomEntry objects recorded relative to fixed_now"""
    from asthmacare.health.models import SymptomEntry

    def _make(severity, age=timedelta(days=1), **kwargs):
        return SymptomEntry(
            owner_id=OWNER_ID,
            severity=severity,
            recorded_at=fixed_now - age,
            **kwargs,
        )

    return _make


@pytest.fixture
def symptom_rows(fixed_now):
    """Symptom rows as Supabase returns them"""
    return [
        {
            "id": "s1",
            "user_id": OWNER_ID,
            "symptom_type": "wheezing",
            "severity": 4,
            "triggers": ["pollen"],
            "medications_used": [],
            "recorded_at": (fixed_now - timedelta(hours=5)).isoformat(),
        },
        {
            "id": "s2",
            "user_id": OWNER_ID,
            "symptom_type": "cough",
            "severity": 2,
            "triggers": None,
            "medications_used": ["salbutamol"],
            "recorded_at": (fixed_now - timedelta(days=3)).isoformat(),
        },
    ]


@pytest.fixture
def api_error():
    """Factory for postgrest APIErrors with a given code"""
    from postgrest.exceptions import APIError

    def _make(code, message="error", hint=None):
        return APIError({"code": code, "message": message, "hint": hint, "details": None})

    return _make


@pytest.fixture
def owner_id():
    return OWNER_ID


@pytest.fixture
def table_rows(mock_supabase):
    """Give each table its own query builder returning the given rows"""
    builders = {}

    def _configure(rows_by_table):
        for name, rows in rows_by_table.items():
            builders[name] = make_query_builder(rows)
        mock_supabase.table.side_effect = lambda name: builders.setdefault(name, make_query_builder())
        return builders

    return _configure
