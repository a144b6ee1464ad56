# =============================================================================
# tests/unit/test_health_reports.py
# Unit Tests for health report files + metadata rows
# =============================================================================

import pytest


@pytest.fixture
def reports(mock_supabase, auth_session, mock_storage):
    from asthmacare.services import HealthReportService

    return HealthReportService(mock_supabase, auth_session, storage=mock_storage)


class TestUploadReport:
    """Test upload with compensating file removal"""

    def test_upload_writes_file_then_row(self, reports, query, mock_storage, owner_id):
        query.execute.return_value.data = [{"id": "r1"}]

        result = reports.upload_report(
            b"%PDF-1.4 ...", "spirometry.pdf", "application/pdf",
            document_type="test-result", notes="March results",
        )

        assert result.success
        assert result.data == {"id": "r1"}

        bucket, path, content, content_type = mock_storage.upload.call_args[0]
        assert bucket == "health-reports"
        assert path.startswith(f"{owner_id}/{owner_id}_")
        assert path.endswith(".pdf")

        row = query.insert.call_args[0][0]
        assert row["user_id"] == owner_id
        assert row["file_path"] == path
        assert row["file_url"] == mock_storage.upload.return_value
        assert row["original_filename"] == "spirometry.pdf"
        assert row["file_size"] == len(b"%PDF-1.4 ...")
        assert row["document_type"] == "test-result"
        mock_storage.remove.assert_not_called()

    def test_row_failure_removes_uploaded_file(self, reports, query, mock_storage, api_error):
        query.execute.side_effect = api_error("23502")

        result = reports.upload_report(b"data", "scan.png", "image/png")

        assert not result.success
        path = mock_storage.upload.call_args[0][1]
        mock_storage.remove.assert_called_once_with("health-reports", [path])

    def test_storage_failure_writes_no_row(self, reports, query, mock_storage):
        from asthmacare.errors import StorageOperationError

        mock_storage.upload.side_effect = StorageOperationError("Upload failed: 413")

        result = reports.upload_report(b"data", "scan.png", "image/png")

        assert not result.success
        assert result.error_code == "STORAGE_001"
        query.insert.assert_not_called()

    @pytest.mark.parametrize("size,content_type", [
        (11 * 1024 * 1024, "application/pdf"),
        (10, "text/plain"),
    ])
    def test_invalid_file_rejected(self, reports, mock_storage, size, content_type):
        result = reports.upload_report(b"x" * size, "file", content_type)

        assert not result.success
        assert result.error_code == "DATA_001"
        mock_storage.upload.assert_not_called()

    def test_requires_sign_in(self, mock_supabase, mock_storage):
        from asthmacare.errors import UnauthenticatedError
        from asthmacare.services import HealthReportService

        with pytest.raises(UnauthenticatedError):
            HealthReportService(mock_supabase, storage=mock_storage).upload_report(
                b"data", "scan.png", "image/png"
            )


class TestDeleteReport:
    """Test delete: file first, row regardless"""

    def test_delete_removes_file_and_row(self, reports, query, mock_storage, owner_id):
        query.execute.return_value.data = [{"id": "r1", "file_path": f"{owner_id}/a.pdf"}]

        result = reports.delete_report("r1")

        assert result.success
        mock_storage.remove.assert_called_once_with("health-reports", [f"{owner_id}/a.pdf"])
        query.delete.assert_called_once()

    def test_file_removal_failure_still_deletes_row(self, reports, query, mock_storage):
        from asthmacare.errors import StorageOperationError

        query.execute.return_value.data = [{"id": "r1", "file_path": "u/a.pdf"}]
        mock_storage.remove.side_effect = StorageOperationError("Delete failed")

        result = reports.delete_report("r1")

        assert result.success
        query.delete.assert_called_once()

    def test_missing_report(self, reports, query, mock_storage):
        result = reports.delete_report("nope")

        assert not result.success
        assert result.error_code == "DB_404"
        mock_storage.remove.assert_not_called()
        query.delete.assert_not_called()


class TestListAndDownload:
    """Test listing and download"""

    def test_list_filters_by_type(self, reports, query):
        reports.list_reports(document_type="x-ray", limit=5)

        query.order.assert_called_with("created_at", desc=True)
        query.eq.assert_any_call("document_type", "x-ray")
        query.limit.assert_called_with(5)

    def test_download(self, reports, query, mock_storage):
        query.execute.return_value.data = [{"id": "r1", "file_path": "u/a.pdf"}]

        result = reports.download_report("r1")

        assert result.data == b"%PDF-1.4"
        mock_storage.download.assert_called_once_with("health-reports", "u/a.pdf")
