# =============================================================================
# asthmacare/services/tracking_service.py
# Symptom and medication logs
# =============================================================================

from __future__ import annotations
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

import pandas as pd

from asthmacare.errors import RecordValidationError
from asthmacare.health.models import MAX_SEVERITY, MIN_SEVERITY, MedicationEvent, SymptomEntry
from asthmacare.health.insights import symptom_trends
from asthmacare.health.scoring import ControlScore, compute_control_score
from asthmacare.utils.timeutils import resolve_now
from .base_service import BaseService, ServiceResult


def _timestamp(value: Optional[datetime]) -> str:
    return resolve_now(value).isoformat()


class SymptomService(BaseService):
    """Symptom diary for the signed-in user."""

    def log(
        self,
        symptom_type: str,
        severity: int,
        triggers: Iterable[str] = (),
        medications_used: Iterable[str] = (),
        notes: Optional[str] = None,
        recorded_at: Optional[datetime] = None,
    ) -> ServiceResult:
        try:
            severity = int(severity)
        except (TypeError, ValueError):
            severity = None
        if severity is None or not MIN_SEVERITY <= severity <= MAX_SEVERITY:
            error = RecordValidationError(
                f"Severity must be between {MIN_SEVERITY} and {MAX_SEVERITY}",
                field="severity",
            )
            return ServiceResult.from_exception(error)

        symptoms = self.scoped("symptoms")
        return self.run_query(
            "Log symptom",
            lambda: symptoms.insert({
                "symptom_type": symptom_type,
                "severity": severity,
                "triggers": list(triggers),
                "medications_used": list(medications_used),
                "notes": notes,
                "recorded_at": _timestamp(recorded_at),
            }).execute(),
            single=True,
            table=symptoms.table_name,
        )

    def history(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> ServiceResult:
        """Entries newest first, optionally bounded by [start, end]."""
        symptoms = self.scoped("symptoms")

        def query():
            builder = symptoms.select().order("recorded_at", desc=True)
            if start:
                builder = builder.gte("recorded_at", start.isoformat())
            if end:
                builder = builder.lte("recorded_at", end.isoformat())
            if limit:
                builder = builder.limit(limit)
            return builder.execute()

        return self.run_query("Get symptom history", query, table=symptoms.table_name)

    def recent_entries(self, days: int = 30, now: Optional[datetime] = None) -> List[SymptomEntry]:
        """
        Typed entries from the last ``days`` days.

        Raises:
            DatabaseError: If the history read fails (e.g. PermissionDeniedError)
        """
        now = resolve_now(now)
        result = self.history(start=now - timedelta(days=days)).raise_for_error()
        return [SymptomEntry.from_record(row) for row in result.data]

    def control_score(self, now: Optional[datetime] = None) -> ControlScore:
        now = resolve_now(now)
        return compute_control_score(self.recent_entries(days=30, now=now), now=now)

    def trends(self, days_back: int = 30, now: Optional[datetime] = None) -> pd.DataFrame:
        now = resolve_now(now)
        return symptom_trends(self.recent_entries(days=days_back, now=now), days_back, now)


class MedicationService(BaseService):
    """Medication intake log for the signed-in user."""

    def log(
        self,
        name: str,
        dosage: Optional[str] = None,
        medication_type: str = "other",
        taken_at: Optional[datetime] = None,
        notes: Optional[str] = None,
    ) -> ServiceResult:
        if not name or not name.strip():
            error = RecordValidationError("Medication name is required", field="medication_name")
            return ServiceResult.from_exception(error)

        medications = self.scoped("medications")
        return self.run_query(
            "Log medication",
            lambda: medications.insert({
                "medication_name": name.strip(),
                "dosage": dosage,
                "medication_type": medication_type,
                "taken_at": _timestamp(taken_at),
                "notes": notes,
            }).execute(),
            single=True,
            table=medications.table_name,
        )

    def history(self, limit: Optional[int] = None) -> ServiceResult:
        medications = self.scoped("medications")

        def query():
            builder = medications.select().order("taken_at", desc=True)
            if limit:
                builder = builder.limit(limit)
            return builder.execute()

        return self.run_query("Get medication history", query, table=medications.table_name)

    def events(self, limit: Optional[int] = None) -> List[MedicationEvent]:
        result = self.history(limit=limit).raise_for_error()
        return [MedicationEvent.from_record(row) for row in result.data]
