# =============================================================================
# asthmacare/health/scoring.py
# Asthma control score and composite health score
# =============================================================================
"""
Deterministic scoring over a user's recent records.

Both functions are pure: the only clock they read is the `now` argument
(defaulting to the current UTC time when it is not supplied).
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from .models import AppointmentRecord, AppointmentStatus, MedicationEvent, SymptomEntry
from asthmacare.utils.timeutils import resolve_now

MAX_SCORE = 100
POINTS_PER_SEVERITY = 5
CONTROL_WINDOW = timedelta(days=7)

WELL_CONTROLLED_THRESHOLD = 80
PARTLY_CONTROLLED_THRESHOLD = 60


class ControlLevel(str, Enum):
    WELL_CONTROLLED = "Well Controlled"
    PARTLY_CONTROLLED = "Partly Controlled"
    POORLY_CONTROLLED = "Poorly Controlled"


NO_SYMPTOM_RECOMMENDATIONS = (
    "Continue current management plan",
    "Regular check-ups with healthcare provider",
)

RECOMMENDATIONS = {
    ControlLevel.WELL_CONTROLLED: (
        "Continue current management plan",
        "Monitor for any changes in symptoms",
        "Regular check-ups with healthcare provider",
    ),
    ControlLevel.PARTLY_CONTROLLED: (
        "Review medication adherence",
        "Identify and avoid triggers",
        "Consider adjusting treatment plan with doctor",
    ),
    ControlLevel.POORLY_CONTROLLED: (
        "Schedule urgent appointment with healthcare provider",
        "Review and update asthma action plan",
        "Ensure rescue medications are accessible",
        "Consider step-up therapy",
    ),
}


@dataclass(frozen=True)
class ControlScore:
    score: int
    level: ControlLevel
    recommendations: List[str]

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "level": self.level.value,
            "recommendations": list(self.recommendations),
        }


def classify_control(score: int) -> ControlLevel:
    if score >= WELL_CONTROLLED_THRESHOLD:
        return ControlLevel.WELL_CONTROLLED
    if score >= PARTLY_CONTROLLED_THRESHOLD:
        return ControlLevel.PARTLY_CONTROLLED
    return ControlLevel.POORLY_CONTROLLED


def recent_symptoms(
    symptoms: Iterable[SymptomEntry],
    now: datetime,
    window: timedelta = CONTROL_WINDOW,
) -> List[SymptomEntry]:
    """Entries recorded no more than `window` before `now` (inclusive)."""
    return [s for s in symptoms if now - s.recorded_at <= window]


def compute_control_score(
    symptoms: Sequence[SymptomEntry],
    now: Optional[datetime] = None,
) -> ControlScore:
    """
    Asthma control score from the last 7 days of symptoms.

    Every counted entry costs severity * 5 points off 100; the result is
    clamped at 0 and bucketed into a control level with its fixed
    recommendations.

    Args:
        symptoms: The owner's symptom entries (any age)
        now: Reference time for the 7-day window

    Returns:
        ControlScore
    """
    if not symptoms:
        return ControlScore(
            score=MAX_SCORE,
            level=ControlLevel.WELL_CONTROLLED,
            recommendations=list(NO_SYMPTOM_RECOMMENDATIONS),
        )

    now = resolve_now(now)
    counted = recent_symptoms(symptoms, now)

    score = MAX_SCORE - sum(s.severity * POINTS_PER_SEVERITY for s in counted)
    score = max(0, score)

    level = classify_control(score)
    return ControlScore(
        score=score,
        level=level,
        recommendations=list(RECOMMENDATIONS[level]),
    )


def _round_half_up(value: float) -> int:
    # Postgres numeric -> integer casts round halves away from zero
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def compute_health_score(
    symptoms: Sequence[SymptomEntry],
    appointments: Sequence[AppointmentRecord] = (),
    medications: Sequence[MedicationEvent] = (),
    now: Optional[datetime] = None,
) -> int:
    """
    Composite health score, floored at 0 (the medication bonus can lift it past 100).

    100
      - 5 per symptom in the last 7 days
      - 3 * average severity of those symptoms (rounded)
      - 10 per appointment cancelled among those created in the last 30 days
      + 2 * (medication events in the last 30 days / 30), rounded, capped at 10
    """
    now = resolve_now(now)
    month = timedelta(days=30)

    recent = [s for s in symptoms if now - s.recorded_at < CONTROL_WINDOW]
    avg_severity = (sum(s.severity for s in recent) / len(recent)) if recent else 0.0

    missed = sum(
        1 for a in appointments
        if a.status == AppointmentStatus.CANCELLED
        and a.created_at is not None
        and now - a.created_at < month
    )

    adherence = sum(1 for m in medications if now - m.taken_at < month) / 30.0

    score = (
        MAX_SCORE
        - len(recent) * POINTS_PER_SEVERITY
        - _round_half_up(avg_severity * 3)
        - missed * 10
        + min(_round_half_up(adherence * 2), 10)
    )
    return max(score, 0)
