# =============================================================================
# asthmacare/services/profile_service.py
# User profile records (one row per user in user_profiles)
# =============================================================================

from __future__ import annotations
from typing import Any, Dict, Optional

from postgrest.exceptions import APIError

from asthmacare.data.supabase_client import OwnerScopedTable, TABLES, utc_now_iso
from asthmacare.errors import classify_api_error
from asthmacare.errors.database import DUPLICATE_KEY
from .base_service import BaseService, ServiceResult

PROFILE_FIELDS = ("full_name", "age_group", "gender", "asthma_severity")


class ProfileService(BaseService):
    """Create, read and update the signed-in user's profile."""

    def create_profile(self, user, metadata: Optional[Dict[str, Any]] = None) -> None:
        """
        Insert the profile row for a freshly signed-up user.

        A duplicate row is ignored. Any other failure is logged and
        swallowed so sign-up still succeeds.
        """
        metadata = metadata or {}
        user_id = getattr(user, "id", None)
        if not user_id:
            self.logger.warning("Profile not created: user has no id")
            return

        row = {"email": getattr(user, "email", None), "created_at": utc_now_iso()}
        row.update({field: metadata.get(field) for field in PROFILE_FIELDS})

        try:
            OwnerScopedTable(self.client, TABLES["user_profiles"], user_id).insert(row).execute()
            self.logger.info("User profile created")
        except APIError as e:
            if getattr(e, "code", None) == DUPLICATE_KEY:
                self.logger.debug("User profile already exists")
                return
            error = classify_api_error(e, table=TABLES["user_profiles"])
            self.logger.error(f"Create profile error: {error}")
        except Exception as e:
            self.logger.error(f"Create profile error: {e}")

    def get_profile(self) -> ServiceResult:
        """The profile row, or ok(None) when it does not exist yet."""
        profiles = self.scoped("user_profiles")
        return self.run_query(
            "Get profile",
            lambda: profiles.select().limit(1).execute(),
            single=True,
            table=profiles.table_name,
        )

    def update_profile(self, updates: Dict[str, Any]) -> ServiceResult:
        profiles = self.scoped("user_profiles")
        values = {**updates, "updated_at": utc_now_iso()}
        with self.log_operation("Update profile"):
            return self.run_query(
                "Update profile",
                lambda: profiles.update(values).execute(),
                table=profiles.table_name,
            )
