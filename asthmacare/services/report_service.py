# =============================================================================
# asthmacare/services/report_service.py
# Health report files (object storage) and their metadata rows
# =============================================================================

from __future__ import annotations
from typing import Optional

from asthmacare.data.storage import StorageService
from asthmacare.data.supabase_client import STORAGE_BUCKETS, utc_now_iso
from asthmacare.errors import RecordValidationError, StorageOperationError
from asthmacare.utils.validators import generate_unique_filename, validate_file
from .base_service import BaseService, ServiceResult


class HealthReportService(BaseService):
    """
    Upload, list, download and delete health reports.

    A report is two things: a file in the health-reports bucket and a row in
    health_reports pointing at it. Upload writes the file first and removes
    it again if the row cannot be written. Delete removes the file first and
    deletes the row even if the file removal failed.
    """

    bucket = STORAGE_BUCKETS["health_reports"]

    def __init__(self, client, session=None, storage: Optional[StorageService] = None):
        super().__init__(client, session)
        self.storage = storage or StorageService(client)

    def upload_report(
        self,
        content: bytes,
        filename: str,
        content_type: str,
        document_type: Optional[str] = None,
        display_name: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> ServiceResult:
        owner_id = self.require_owner_id()

        validation = validate_file(len(content), content_type)
        if not validation["valid"]:
            error = RecordValidationError("; ".join(validation["errors"]), field="file")
            return ServiceResult.from_exception(error)

        # Storage policies key on the first folder being the owner id
        path = f"{owner_id}/{generate_unique_filename(filename, owner_id)}"

        with self.log_operation(f"Uploading health report {filename}"):
            try:
                public_url = self.storage.upload(self.bucket, path, content, content_type)
            except StorageOperationError as e:
                return ServiceResult.from_exception(e)

            reports = self.scoped("health_reports")
            result = self.run_query(
                "Save health report",
                lambda: reports.insert({
                    "filename": display_name or filename,
                    "original_filename": filename,
                    "file_path": path,
                    "file_url": public_url,
                    "file_size": len(content),
                    "file_type": content_type,
                    "document_type": document_type or "other",
                    "notes": notes,
                    "created_at": utc_now_iso(),
                }).execute(),
                single=True,
                table=reports.table_name,
            )

            if not result.success:
                self._remove_file(path)
            return result

    def list_reports(
        self,
        document_type: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> ServiceResult:
        """Reports newest first, optionally filtered by document type."""
        reports = self.scoped("health_reports")

        def query():
            builder = reports.select().order("created_at", desc=True)
            if document_type:
                builder = builder.eq("document_type", document_type)
            if limit:
                builder = builder.limit(limit)
            return builder.execute()

        return self.run_query("List health reports", query, table=reports.table_name)

    def _get_report(self, report_id: str) -> ServiceResult:
        reports = self.scoped("health_reports")
        return self.run_query(
            "Get health report",
            lambda: reports.select().eq("id", report_id).limit(1).execute(),
            single=True,
            table=reports.table_name,
        )

    def delete_report(self, report_id: str) -> ServiceResult:
        found = self._get_report(report_id)
        if not found.success:
            return found
        if found.data is None:
            return ServiceResult.fail("Record not found", error_code="DB_404")

        self._remove_file(found.data.get("file_path"))

        reports = self.scoped("health_reports")
        with self.log_operation(f"Deleting health report {report_id}"):
            return self.run_query(
                "Delete health report",
                lambda: reports.delete().eq("id", report_id).execute(),
                table=reports.table_name,
            )

    def download_report(self, report_id: str) -> ServiceResult:
        """File bytes of one of the user's reports."""
        found = self._get_report(report_id)
        if not found.success:
            return found
        if found.data is None:
            return ServiceResult.fail("Record not found", error_code="DB_404")

        return self.safe_execute(
            f"Downloading health report {report_id}",
            self.storage.download,
            self.bucket,
            found.data["file_path"],
        )

    def _remove_file(self, path: Optional[str]) -> None:
        if not path:
            return
        try:
            self.storage.remove(self.bucket, [path])
        except StorageOperationError as e:
            self.logger.error(f"Storage delete failed for {path}: {e}")
