# =============================================================================
# asthmacare/services/doctor_service.py
# Shared doctor directory (not owned by any user)
# =============================================================================

from __future__ import annotations
from typing import Optional

from asthmacare.data.supabase_client import TABLES
from .base_service import BaseService, ServiceResult


class DoctorService(BaseService):
    """Read-only access to doctor_profiles."""

    table_name = TABLES["doctor_profiles"]

    def list_doctors(self, specialty: Optional[str] = None, active_only: bool = True) -> ServiceResult:
        def query():
            builder = self.client.table(self.table_name).select("*").order("full_name")
            if specialty:
                builder = builder.eq("specialty", specialty)
            if active_only:
                builder = builder.eq("is_active", True)
            return builder.execute()

        return self.run_query("List doctors", query, table=self.table_name)

    def get_doctor(self, doctor_id: str) -> ServiceResult:
        return self.run_query(
            "Get doctor",
            lambda: self.client.table(self.table_name)
            .select("*")
            .eq("doctor_id", doctor_id)
            .limit(1)
            .execute(),
            single=True,
            table=self.table_name,
        )
