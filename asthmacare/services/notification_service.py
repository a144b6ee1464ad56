# =============================================================================
# asthmacare/services/notification_service.py
# In-app notifications and emergency alerts
# =============================================================================

from __future__ import annotations
from typing import Optional

from postgrest.exceptions import APIError

from asthmacare.data.supabase_client import utc_now_iso
from .base_service import BaseService, ServiceResult

EMERGENCY_ALERT_RPC = "create_emergency_alert"


class NotificationService(BaseService):
    """Read and acknowledge notifications; raise emergency alerts."""

    def list(self, unread_only: bool = False, limit: Optional[int] = 50) -> ServiceResult:
        notifications = self.scoped("notifications")

        def query():
            builder = notifications.select().order("created_at", desc=True)
            if unread_only:
                builder = builder.eq("is_read", False)
            if limit:
                builder = builder.limit(limit)
            return builder.execute()

        return self.run_query("List notifications", query, table=notifications.table_name)

    def mark_read(self, notification_id: str) -> ServiceResult:
        notifications = self.scoped("notifications")
        return self.run_query(
            "Mark notification read",
            lambda: notifications.update({"is_read": True, "read_at": utc_now_iso()})
            .eq("id", notification_id)
            .execute(),
            single=True,
            table=notifications.table_name,
        )

    def mark_all_read(self) -> ServiceResult:
        notifications = self.scoped("notifications")
        return self.run_query(
            "Mark all notifications read",
            lambda: notifications.update({"is_read": True, "read_at": utc_now_iso()})
            .eq("is_read", False)
            .execute(),
            table=notifications.table_name,
        )

    def create_emergency_alert(self, message: str, severity: str = "high") -> Optional[str]:
        """
        Raise an emergency alert notification for the signed-in user.

        Returns:
            The new notification id, or None if the alert could not be created
        """
        owner_id = self.require_owner_id()
        try:
            response = self.client.rpc(
                EMERGENCY_ALERT_RPC,
                {"user_uuid": owner_id, "alert_message": message, "severity": severity},
            ).execute()
        except APIError as e:
            self.logger.error(f"Emergency alert dispatch failed: {getattr(e, 'message', e)}")
            return None

        self.logger.warning(f"Emergency alert created (severity: {severity})")
        return response.data
