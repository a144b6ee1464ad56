"""
Health scoring engine: control score, composite health score and the
aggregates shown on the dashboard.
"""

from .models import (
    AppointmentRecord,
    AppointmentStatus,
    MedicationEvent,
    SymptomEntry,
)
from .scoring import (
    ControlLevel,
    ControlScore,
    classify_control,
    compute_control_score,
    compute_health_score,
)
from .insights import (
    generate_appointment_reminder,
    generate_health_insights,
    generate_health_report_summary,
    summarize_health,
    symptom_trends,
)

__all__ = [
    "AppointmentRecord",
    "AppointmentStatus",
    "MedicationEvent",
    "SymptomEntry",
    "ControlLevel",
    "ControlScore",
    "classify_control",
    "compute_control_score",
    "compute_health_score",
    "generate_appointment_reminder",
    "generate_health_insights",
    "generate_health_report_summary",
    "summarize_health",
    "symptom_trends",
]
