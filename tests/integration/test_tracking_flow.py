# =============================================================================
# tests/integration/test_tracking_flow.py
# Integration Tests: services + health engine over an in-memory table store
# =============================================================================

import pytest
import uuid
from datetime import date, time, timedelta
from types import SimpleNamespace


class InMemoryQuery:
    """Enough of the postgrest builder for the services under test"""

    def __init__(self, rows):
        self.rows = rows
        self.action = "select"
        self.values = None
        self.filters = []
        self.ordering = []
        self.max_rows = None

    def select(self, columns="*"):
        return self

    def insert(self, values):
        self.action, self.values = "insert", values
        return self

    def update(self, values):
        self.action, self.values = "update", values
        return self

    def delete(self):
        self.action = "delete"
        return self

    def _filter(self, column, op, value):
        self.filters.append((column, op, value))
        return self

    def eq(self, column, value):
        return self._filter(column, lambda a, b: a == b, value)

    def gte(self, column, value):
        return self._filter(column, lambda a, b: a is not None and a >= b, value)

    def lte(self, column, value):
        return self._filter(column, lambda a, b: a is not None and a <= b, value)

    def lt(self, column, value):
        return self._filter(column, lambda a, b: a is not None and a < b, value)

    def order(self, column, desc=False):
        self.ordering.append((column, desc))
        return self

    def limit(self, count):
        self.max_rows = count
        return self

    def _matches(self, row):
        return all(op(row.get(column), value) for column, op, value in self.filters)

    def execute(self):
        if self.action == "insert":
            new_rows = self.values if isinstance(self.values, list) else [self.values]
            stored = [{"id": str(uuid.uuid4()), **row} for row in new_rows]
            self.rows.extend(stored)
            return SimpleNamespace(data=stored)

        matched = [row for row in self.rows if self._matches(row)]

        if self.action == "update":
            for row in matched:
                row.update(self.values)
            return SimpleNamespace(data=[dict(row) for row in matched])

        if self.action == "delete":
            for row in matched:
                self.rows.remove(row)
            return SimpleNamespace(data=matched)

        for column, desc in reversed(self.ordering):
            matched.sort(key=lambda row: (row.get(column) is None, row.get(column)), reverse=desc)
        if self.max_rows is not None:
            matched = matched[:self.max_rows]
        return SimpleNamespace(data=[dict(row) for row in matched])


class InMemorySupabase:
    def __init__(self):
        self.tables = {}

    def table(self, name):
        return InMemoryQuery(self.tables.setdefault(name, []))


@pytest.fixture
def store():
    return InMemorySupabase()


@pytest.fixture
def other_session():
    from asthmacare.auth import AuthSession

    session = AuthSession()
    session.restore(SimpleNamespace(id="other-owner", email="other@example.com", user_metadata={}))
    return session


class TestTrackingFlow:
    """Symptoms and medications flow into the control score"""

    def test_logged_symptoms_drive_control_score(self, store, auth_session, fixed_now):
        from asthmacare.health import ControlLevel
        from asthmacare.services import SymptomService

        symptoms = SymptomService(store, auth_session)
        symptoms.log("wheezing", 4, recorded_at=fixed_now - timedelta(hours=3))
        symptoms.log("cough", 3, recorded_at=fixed_now - timedelta(days=2))
        symptoms.log("cough", 5, recorded_at=fixed_now - timedelta(days=12))

        score = symptoms.control_score(now=fixed_now)

        assert score.score == 65
        assert score.level == ControlLevel.PARTLY_CONTROLLED

    def test_history_is_newest_first(self, store, auth_session, fixed_now):
        from asthmacare.services import SymptomService

        symptoms = SymptomService(store, auth_session)
        for hours in (5, 1, 3):
            symptoms.log("cough", 2, recorded_at=fixed_now - timedelta(hours=hours))

        rows = symptoms.history().data

        assert [r["recorded_at"] for r in rows] == sorted((r["recorded_at"] for r in rows), reverse=True)

    def test_trends(self, store, auth_session, fixed_now):
        from asthmacare.services import SymptomService

        symptoms = SymptomService(store, auth_session)
        symptoms.log("cough", 2, recorded_at=fixed_now - timedelta(hours=1))
        symptoms.log("cough", 4, recorded_at=fixed_now - timedelta(hours=2))

        trends = symptoms.trends(now=fixed_now)

        assert list(trends["avg_severity"]) == [3.0]


class TestOwnerIsolation:
    """One user's records are invisible to another"""

    def test_other_user_sees_nothing(self, store, auth_session, other_session, fixed_now):
        from asthmacare.services import EmergencyContactService, SymptomService

        SymptomService(store, auth_session).log("wheezing", 5, recorded_at=fixed_now)
        EmergencyContactService(store, auth_session).add("Sam", "+44 20 7946 0958")

        assert SymptomService(store, other_session).history().data == []
        assert EmergencyContactService(store, other_session).list().data == []

    def test_other_user_cannot_cancel(self, store, auth_session, other_session):
        from asthmacare.services import AppointmentService

        booked = AppointmentService(store, auth_session).book(
            date(2024, 4, 2), time(9, 30), doctor_id="dr-smith",
            appointment_type="consultation", reason="review",
        ).data

        result = AppointmentService(store, other_session).cancel(booked["id"])

        assert result.success
        assert result.data is None
        assert AppointmentService(store, auth_session).list().data[0]["status"] == "pending"

    def test_other_user_cannot_delete_contact(self, store, auth_session, other_session):
        from asthmacare.services import EmergencyContactService

        contact = EmergencyContactService(store, auth_session).add("Sam", "+44 20 7946 0958").data

        EmergencyContactService(store, other_session).remove(contact["id"])

        assert len(EmergencyContactService(store, auth_session).list().data) == 1


class TestDashboardFlow:
    """Records written through services feed the dashboard"""

    def test_dashboard(self, store, auth_session, fixed_now):
        from asthmacare.services import (
            AppointmentService,
            ExportService,
            MedicationService,
            SymptomService,
        )

        SymptomService(store, auth_session).log("wheezing", 4, recorded_at=fixed_now - timedelta(hours=2))
        MedicationService(store, auth_session).log("salbutamol", taken_at=fixed_now - timedelta(hours=1))
        appointments = AppointmentService(store, auth_session)
        appointments.book(date(2024, 3, 16), time(9, 0), doctor_id="dr-smith", reason="review")
        cancelled = appointments.book(date(2024, 3, 20), time(9, 0), doctor_id="dr-brown", reason="review")
        appointments.cancel(cancelled.data["id"])

        # created_at is written with the real clock; pin it to the test clock
        for row in store.tables["appointments"]:
            row["created_at"] = (fixed_now - timedelta(days=1)).isoformat()

        data = ExportService(store, auth_session).dashboard(now=fixed_now).data

        assert data["summary"]["upcoming_appointments"] == 1
        assert data["summary"]["medications_count"] == 1
        assert data["control"].score == 80
        # 100 - 5 (one symptom) - 12 (3 * 4) - 10 (one cancellation) + 0
        assert data["health_score"] == 73
        assert [r["type"] for r in data["reminders"]] == ["urgent"]
