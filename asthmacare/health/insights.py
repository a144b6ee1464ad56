# =============================================================================
# asthmacare/health/insights.py
# Dashboard aggregates: trends, summaries, insights, reminders
# =============================================================================

from __future__ import annotations
from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd

from .models import AppointmentRecord, AppointmentStatus, MedicationEvent, SymptomEntry
from asthmacare.utils.timeutils import resolve_now

HIGH_SEVERITY_AVERAGE = 3
TREND_COLUMNS = ["date", "avg_severity", "symptom_count"]


def symptom_trends(
    symptoms: Sequence[SymptomEntry],
    days_back: int = 30,
    now: Optional[datetime] = None,
) -> pd.DataFrame:
    """
    Daily symptom trend over the last `days_back` days.

    Returns:
        DataFrame with columns date, avg_severity (2 dp), symptom_count,
        one row per day that has entries, oldest first
    """
    now = resolve_now(now)
    cutoff = now - timedelta(days=days_back)

    rows = [
        {"recorded_at": s.recorded_at, "severity": s.severity}
        for s in symptoms
        if s.recorded_at > cutoff
    ]
    if not rows:
        return pd.DataFrame(columns=TREND_COLUMNS)

    df = pd.DataFrame(rows)
    df["date"] = pd.to_datetime(df["recorded_at"], utc=True).dt.date

    trends = (
        df.groupby("date")["severity"]
        .agg(avg_severity="mean", symptom_count="count")
        .reset_index()
        .sort_values("date")
        .reset_index(drop=True)
    )
    trends["avg_severity"] = trends["avg_severity"].round(2)
    return trends[TREND_COLUMNS]


def summarize_health(
    reports: Sequence[Mapping[str, Any]] = (),
    appointments: Sequence[AppointmentRecord] = (),
    symptoms: Sequence[SymptomEntry] = (),
    medications: Sequence[MedicationEvent] = (),
    contacts: Sequence[Mapping[str, Any]] = (),
    now: Optional[datetime] = None,
) -> Dict[str, int]:
    """Headline counts for the dashboard."""
    now = resolve_now(now)
    today = now.date()

    return {
        "total_reports": len(reports),
        "upcoming_appointments": sum(
            1 for a in appointments
            if a.appointment_date >= today and a.status != AppointmentStatus.CANCELLED
        ),
        "recent_symptoms": sum(
            1 for s in symptoms if now - s.recorded_at < timedelta(days=7)
        ),
        "medications_count": len({m.name for m in medications}),
        "emergency_contacts": len(contacts),
    }


def generate_health_insights(
    symptoms: Sequence[SymptomEntry] = (),
    medications: Sequence[MedicationEvent] = (),
    appointments: Sequence[AppointmentRecord] = (),
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Rule-based insights over the last 30 days.

    Returns:
        {"trends": [], "recommendations": [...], "alerts": [...], "summary": {...}}
    """
    now = resolve_now(now)
    insights: Dict[str, Any] = {
        "trends": [],
        "recommendations": [],
        "alerts": [],
        "summary": {},
    }

    recent = [s for s in symptoms if now - s.recorded_at <= timedelta(days=30)]
    if recent:
        avg_severity = sum(s.severity for s in recent) / len(recent)
        if avg_severity > HIGH_SEVERITY_AVERAGE:
            insights["alerts"].append(
                "High average symptom severity detected in the past month"
            )
            insights["recommendations"].append(
                "Consider consulting with your healthcare provider about treatment adjustments"
            )
        insights["summary"]["avg_severity"] = round(avg_severity, 1)
        insights["summary"]["symptom_count"] = len(recent)

    if medications:
        frequency = Counter(m.name for m in medications)
        insights["summary"]["medication_types"] = len(frequency)
        insights["summary"]["total_medications"] = len(medications)

    if appointments:
        upcoming = [a for a in appointments if a.starts_at > now]
        if not upcoming:
            insights["recommendations"].append(
                "Consider scheduling a routine check-up with your healthcare provider"
            )
        insights["summary"]["total_appointments"] = len(appointments)
        insights["summary"]["upcoming_appointments"] = len(upcoming)

    return insights


def generate_health_report_summary(reports: Sequence[Mapping[str, Any]]) -> Dict[str, Any]:
    """Counts by document type plus storage used. `reports` is newest first."""
    by_type = Counter(r.get("document_type") for r in reports)
    return {
        "total_reports": len(reports),
        "by_type": dict(by_type),
        "recent_uploads": list(reports[:5]),
        "storage_used": sum(r.get("file_size") or 0 for r in reports),
    }


def generate_appointment_reminder(
    appointment: AppointmentRecord,
    now: Optional[datetime] = None,
) -> Dict[str, str]:
    """
    Reminder for an appointment.

    urgent:   starts within the next 24 hours
    upcoming: starts in more than 24 and at most 72 hours
    none:     anything else
    """
    now = resolve_now(now)
    hours = int((appointment.starts_at - now).total_seconds() // 3600)
    doctor = appointment.doctor_name or "your doctor"
    at_time = appointment.appointment_time.strftime("%H:%M")

    if 0 < hours <= 24:
        return {
            "type": "urgent",
            "message": f"Appointment reminder: You have an appointment with {doctor} tomorrow at {at_time}",
        }
    if 24 < hours <= 72:
        days = -(-hours // 24)
        return {
            "type": "upcoming",
            "message": f"Upcoming appointment: You have an appointment with {doctor} in {days} days",
        }
    return {"type": "none", "message": ""}
