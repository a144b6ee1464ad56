"""
Record types the health engine works on.

Rows come back from Supabase as dicts with ISO timestamps; `from_record`
turns them into typed entries.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Any, FrozenSet, Mapping, Optional

from asthmacare.utils.timeutils import parse_timestamp

MIN_SEVERITY = 1
MAX_SEVERITY = 5


class AppointmentStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


@dataclass(frozen=True)
class SymptomEntry:
    owner_id: str
    severity: int
    recorded_at: datetime
    symptom_type: str = "general"
    triggers: FrozenSet[str] = field(default_factory=frozenset)
    medications_used: FrozenSet[str] = field(default_factory=frozenset)
    notes: Optional[str] = None
    id: Optional[str] = None

    def __post_init__(self):
        if not MIN_SEVERITY <= int(self.severity) <= MAX_SEVERITY:
            raise ValueError(
                f"severity must be between {MIN_SEVERITY} and {MAX_SEVERITY}, got {self.severity}"
            )

    @classmethod
    def from_record(cls, row: Mapping[str, Any]) -> SymptomEntry:
        return cls(
            id=row.get("id"),
            owner_id=row.get("user_id"),
            severity=int(row["severity"]),
            recorded_at=parse_timestamp(row["recorded_at"]),
            symptom_type=row.get("symptom_type") or "general",
            triggers=frozenset(row.get("triggers") or ()),
            medications_used=frozenset(row.get("medications_used") or ()),
            notes=row.get("notes"),
        )


@dataclass(frozen=True)
class MedicationEvent:
    owner_id: str
    name: str
    taken_at: datetime
    dosage: Optional[str] = None
    medication_type: str = "other"
    id: Optional[str] = None

    @classmethod
    def from_record(cls, row: Mapping[str, Any]) -> MedicationEvent:
        return cls(
            id=row.get("id"),
            owner_id=row.get("user_id"),
            name=row["medication_name"],
            dosage=row.get("dosage"),
            medication_type=row.get("medication_type") or "other",
            taken_at=parse_timestamp(row["taken_at"]),
        )


@dataclass(frozen=True)
class AppointmentRecord:
    owner_id: str
    appointment_date: date
    appointment_time: time
    status: AppointmentStatus = AppointmentStatus.PENDING
    doctor_name: Optional[str] = None
    created_at: Optional[datetime] = None
    id: Optional[str] = None

    @property
    def starts_at(self) -> datetime:
        """Appointment start as an aware UTC datetime."""
        return parse_timestamp(datetime.combine(self.appointment_date, self.appointment_time))

    @classmethod
    def from_record(cls, row: Mapping[str, Any]) -> AppointmentRecord:
        appointment_date = row["appointment_date"]
        if isinstance(appointment_date, str):
            appointment_date = date.fromisoformat(appointment_date[:10])

        appointment_time = row.get("appointment_time") or "00:00"
        if isinstance(appointment_time, str):
            appointment_time = time.fromisoformat(appointment_time)

        created_at = row.get("created_at")
        return cls(
            id=row.get("id"),
            owner_id=row.get("user_id"),
            appointment_date=appointment_date,
            appointment_time=appointment_time,
            status=AppointmentStatus(row.get("status") or "pending"),
            doctor_name=row.get("doctor_name"),
            created_at=parse_timestamp(created_at) if created_at else None,
        )
