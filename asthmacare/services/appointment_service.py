# =============================================================================
# asthmacare/services/appointment_service.py
# Appointment booking and lifecycle
# =============================================================================

from __future__ import annotations
from datetime import date, time
from typing import List, Optional, Union

from asthmacare.data.supabase_client import utc_now_iso
from asthmacare.health.models import AppointmentRecord, AppointmentStatus
from asthmacare.utils.timeutils import utc_now
from .base_service import BaseService, ServiceResult

DateLike = Union[date, str]
TimeLike = Union[time, str]


def _iso(value) -> str:
    return value.isoformat() if hasattr(value, "isoformat") else str(value)


class AppointmentService(BaseService):
    """Book, list, cancel and reschedule the signed-in user's appointments."""

    def book(
        self,
        appointment_date: DateLike,
        appointment_time: TimeLike,
        doctor_id: Optional[str] = None,
        appointment_type: Optional[str] = None,
        reason: Optional[str] = None,
        priority: str = "routine",
    ) -> ServiceResult:
        """New appointments always start as pending."""
        appointments = self.scoped("appointments")
        result = self.run_query(
            "Book appointment",
            lambda: appointments.insert({
                "doctor_id": doctor_id,
                "appointment_type": appointment_type,
                "appointment_date": _iso(appointment_date),
                "appointment_time": _iso(appointment_time),
                "reason": reason,
                "priority": priority,
                "status": AppointmentStatus.PENDING.value,
                "created_at": utc_now_iso(),
            }).execute(),
            single=True,
            table=appointments.table_name,
        )

        if result.success:
            # Confirmation delivery is not wired up yet
            self.logger.info("Appointment booked; confirmation email would be sent")
        return result

    def list(
        self,
        status: Optional[str] = None,
        upcoming: bool = False,
        past: bool = False,
        today: Optional[date] = None,
    ) -> ServiceResult:
        """Appointments in chronological order."""
        appointments = self.scoped("appointments")
        today_iso = (today or utc_now().date()).isoformat()

        def query():
            builder = (
                appointments.select()
                .order("appointment_date")
                .order("appointment_time")
            )
            if status:
                builder = builder.eq("status", status)
            if upcoming:
                builder = builder.gte("appointment_date", today_iso)
            if past:
                builder = builder.lt("appointment_date", today_iso)
            return builder.execute()

        return self.run_query("List appointments", query, table=appointments.table_name)

    def records(self, **filters) -> List[AppointmentRecord]:
        """Typed appointments; a failed query raises its DatabaseError."""
        result = self.list(**filters).raise_for_error()
        return [AppointmentRecord.from_record(row) for row in result.data]

    def cancel(self, appointment_id: str) -> ServiceResult:
        appointments = self.scoped("appointments")
        return self.run_query(
            "Cancel appointment",
            lambda: appointments.update({
                "status": AppointmentStatus.CANCELLED.value,
                "cancelled_at": utc_now_iso(),
            }).eq("id", appointment_id).execute(),
            single=True,
            table=appointments.table_name,
        )

    def reschedule(
        self,
        appointment_id: str,
        appointment_date: DateLike,
        appointment_time: TimeLike,
    ) -> ServiceResult:
        appointments = self.scoped("appointments")
        return self.run_query(
            "Reschedule appointment",
            lambda: appointments.update({
                "appointment_date": _iso(appointment_date),
                "appointment_time": _iso(appointment_time),
                "updated_at": utc_now_iso(),
            }).eq("id", appointment_id).execute(),
            single=True,
            table=appointments.table_name,
        )
