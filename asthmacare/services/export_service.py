# =============================================================================
# asthmacare/services/export_service.py
# Full data export and dashboard aggregation for the signed-in user
# =============================================================================

from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, Optional

from asthmacare.data.supabase_client import TABLES
from asthmacare.health import (
    AppointmentRecord,
    AppointmentStatus,
    MedicationEvent,
    SymptomEntry,
    compute_control_score,
    compute_health_score,
    generate_appointment_reminder,
    generate_health_insights,
    summarize_health,
)
from asthmacare.utils.timeutils import resolve_now
from .base_service import BaseService, ServiceResult

EXPORT_SECTIONS = {
    "health_reports": "health_reports",
    "appointments": "appointments",
    "symptoms": "symptoms",
    "medications": "medications",
    "emergency_contacts": "emergency_contacts",
    "chat_history": "chat_history",
}


class ExportService(BaseService):
    """Everything the user owns, in one place."""

    def _rows(self, table_key: str) -> ServiceResult:
        table = self.scoped(table_key)
        return self.run_query(
            f"Export {table_key}",
            lambda: table.select().execute(),
            table=TABLES[table_key],
        )

    def _collect(self) -> ServiceResult:
        owner_id = self.require_owner_id()

        profile = self.run_query(
            "Export profile",
            lambda: self.scoped("user_profiles").select().limit(1).execute(),
            single=True,
            table=TABLES["user_profiles"],
        )
        if not profile.success:
            return profile

        data: Dict[str, Any] = {"user_id": owner_id, "profile": profile.data}
        for section, table_key in EXPORT_SECTIONS.items():
            result = self._rows(table_key)
            if not result.success:
                return result
            data[section] = result.data or []
        return ServiceResult.ok(data)

    def export_user_data(self, now: Optional[datetime] = None) -> ServiceResult:
        """
        Profile plus every owned record, ready to be serialised as a backup.

        Any failed section fails the whole export.
        """
        now = resolve_now(now)
        with self.log_operation("Exporting user data"):
            collected = self._collect()
            if not collected.success:
                return collected
            return ServiceResult.ok({"export_date": now.isoformat(), **collected.data})

    def dashboard(self, now: Optional[datetime] = None) -> ServiceResult:
        """Summary counts, control score, health score, insights and reminders."""
        now = resolve_now(now)
        collected = self._collect()
        if not collected.success:
            return collected
        data = collected.data

        symptoms = [SymptomEntry.from_record(r) for r in data["symptoms"]]
        medications = [MedicationEvent.from_record(r) for r in data["medications"]]
        appointments = [AppointmentRecord.from_record(r) for r in data["appointments"]]

        reminders = [
            reminder for reminder in (
                generate_appointment_reminder(a, now)
                for a in appointments if a.status != AppointmentStatus.CANCELLED
            )
            if reminder["type"] != "none"
        ]

        return ServiceResult.ok({
            "profile": data["profile"],
            "summary": summarize_health(
                reports=data["health_reports"],
                appointments=appointments,
                symptoms=symptoms,
                medications=medications,
                contacts=data["emergency_contacts"],
                now=now,
            ),
            "control": compute_control_score(symptoms, now),
            "health_score": compute_health_score(symptoms, appointments, medications, now),
            "insights": generate_health_insights(symptoms, medications, appointments, now),
            "reminders": reminders,
        })
