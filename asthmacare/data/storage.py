# =============================================================================
# asthmacare/data/storage.py
# Object storage helpers (Supabase Storage buckets)
# =============================================================================

from __future__ import annotations
from typing import Iterable, List, Optional, Union

from asthmacare.errors import StorageOperationError
from asthmacare.logging import get_logger

logger = get_logger(__name__)


class StorageService:
    """
    Upload / download / delete files addressed by bucket + path.

    Every failure is raised as StorageOperationError so callers can decide
    whether it is fatal (upload) or only worth a log line (cleanup).
    """

    def __init__(self, client):
        self.client = client

    def _bucket(self, bucket: str):
        return self.client.storage.from_(bucket)

    def upload(
        self,
        bucket: str,
        path: str,
        content: bytes,
        content_type: Optional[str] = None,
        upsert: bool = False,
    ) -> str:
        """
        Upload bytes to a bucket.

        Returns:
            Public URL of the stored object
        """
        file_options = {"cache-control": "3600", "upsert": "true" if upsert else "false"}
        if content_type:
            file_options["content-type"] = content_type

        try:
            self._bucket(bucket).upload(path, content, file_options)
        except Exception as e:
            raise StorageOperationError(
                f"Upload failed: {e}", bucket=bucket, path=path
            ) from e

        logger.info(f"Uploaded {bucket}/{path} ({len(content)} bytes)")
        return self.public_url(bucket, path)

    def download(self, bucket: str, path: str) -> bytes:
        """Download an object's bytes."""
        try:
            return self._bucket(bucket).download(path)
        except Exception as e:
            raise StorageOperationError(
                f"Download failed: {e}", bucket=bucket, path=path
            ) from e

    def remove(self, bucket: str, paths: Union[str, Iterable[str]]) -> List[str]:
        """Delete one or more objects from a bucket."""
        path_list = [paths] if isinstance(paths, str) else list(paths)

        try:
            self._bucket(bucket).remove(path_list)
        except Exception as e:
            raise StorageOperationError(
                f"Delete failed: {e}", bucket=bucket, path=", ".join(path_list)
            ) from e

        logger.info(f"Removed {len(path_list)} object(s) from {bucket}")
        return path_list

    def public_url(self, bucket: str, path: str) -> str:
        """Public URL for an object (only meaningful for public buckets)."""
        return self._bucket(bucket).get_public_url(path)
