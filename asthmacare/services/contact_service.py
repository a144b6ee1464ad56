# =============================================================================
# asthmacare/services/contact_service.py
# Emergency contacts
# =============================================================================

from __future__ import annotations
from typing import List, Optional

from asthmacare.data.supabase_client import utc_now_iso
from asthmacare.errors import RecordValidationError
from asthmacare.utils.validators import is_valid_email, is_valid_phone_number
from .base_service import BaseService, ServiceResult


class EmergencyContactService(BaseService):
    """People to reach when the user has an emergency."""

    def add(
        self,
        name: str,
        phone: str,
        relationship: Optional[str] = None,
        email: Optional[str] = None,
        is_primary: bool = False,
    ) -> ServiceResult:
        problems: List[RecordValidationError] = []
        if not name or not name.strip():
            problems.append(RecordValidationError("Contact name is required", field="name"))
        if not is_valid_phone_number(phone):
            problems.append(RecordValidationError("Invalid phone number", field="phone_number"))
        if email and not is_valid_email(email):
            problems.append(RecordValidationError("Invalid email address", field="email"))
        if problems:
            return ServiceResult.from_exception(problems[0])

        contacts = self.scoped("emergency_contacts")
        return self.run_query(
            "Add emergency contact",
            lambda: contacts.insert({
                "name": name.strip(),
                "relationship": relationship,
                "phone_number": phone,
                "email": email,
                "is_primary": is_primary,
                "created_at": utc_now_iso(),
            }).execute(),
            single=True,
            table=contacts.table_name,
        )

    def list(self) -> ServiceResult:
        """Primary contact first, then by name."""
        contacts = self.scoped("emergency_contacts")
        return self.run_query(
            "List emergency contacts",
            lambda: (
                contacts.select()
                .order("is_primary", desc=True)
                .order("name")
                .execute()
            ),
            table=contacts.table_name,
        )

    def remove(self, contact_id: str) -> ServiceResult:
        contacts = self.scoped("emergency_contacts")
        return self.run_query(
            "Remove emergency contact",
            lambda: contacts.delete().eq("id", contact_id).execute(),
            table=contacts.table_name,
        )
