# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles uploads of bank transfer slips and proof screenshots to
# Supabase Storage.
# =============================================================================

import logging
import uuid
from pathlib import PurePath

from lib.supabase_client import SupabaseClient
from app.config import settings
from app.exceptions import FileTooLargeError, InvalidFileTypeError, StorageUploadError

logger = logging.getLogger(__name__)

# Storage bucket names
BANK_SLIP_BUCKET = "bank-transfer-slips"
PROOF_BUCKET = "proof-images"


class StorageService:
    """
    Service for Supabase Storage operations.

    Validates file type and size before anything reaches storage.
    """

    @staticmethod
    def validate_upload(content_type: str | None, size_bytes: int) -> None:
        """
        Check an upload against the allowed types and size limit.

        Raises:
            InvalidFileTypeError: If the content type is not allowed
            FileTooLargeError: If the file exceeds MAX_UPLOAD_SIZE_MB
        """
        allowed = settings.allowed_upload_types_list
        if content_type not in allowed:
            raise InvalidFileTypeError(content_type, allowed)

        if size_bytes > settings.max_upload_size_bytes:
            raise FileTooLargeError(size_bytes / (1024 * 1024), settings.MAX_UPLOAD_SIZE_MB)

    @staticmethod
    def build_path(prefix: str, filename: str | None) -> str:
        """
        Build a collision-free storage path that keeps the file extension.

        Example:
            build_path("task-42", "slip.PNG") -> "task-42/3f2a...c1.png"
        """
        suffix = PurePath(filename or "").suffix.lower()
        return f"{prefix}/{uuid.uuid4().hex}{suffix}"

    @staticmethod
    def upload(bucket: str, path: str, content: bytes, content_type: str) -> str:
        """
        Upload raw file content to a bucket.

        Args:
            bucket: Storage bucket name
            path: Path inside the bucket
            content: File bytes
            content_type: MIME type stored with the object

        Returns:
            Storage path

        Raises:
            StorageUploadError: If upload fails
        """
        client = SupabaseClient.get_client()

        try:
            client.storage.from_(bucket).upload(
                path=path,
                file=content,
                file_options={"content-type": content_type, "upsert": "false"}
            )
            logger.info(f"Uploaded file to storage: {bucket}/{path}")
            return path

        except Exception as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(str(e))

    @staticmethod
    def upload_bank_slip(
        task_id: int,
        content: bytes,
        filename: str | None,
        content_type: str | None,
    ) -> str:
        """Validate and upload a bank transfer slip for a task."""
        StorageService.validate_upload(content_type, len(content))
        path = StorageService.build_path(f"task-{task_id}", filename)
        return StorageService.upload(BANK_SLIP_BUCKET, path, content, content_type)

    @staticmethod
    def upload_proof_image(
        application_id: int,
        content: bytes,
        filename: str | None,
        content_type: str | None,
    ) -> str:
        """Validate and upload a proof screenshot for an application."""
        StorageService.validate_upload(content_type, len(content))
        path = StorageService.build_path(f"application-{application_id}", filename)
        return StorageService.upload(PROOF_BUCKET, path, content, content_type)

    @staticmethod
    def delete_file(bucket: str, path: str) -> bool:
        """
        Delete a file from storage.

        Returns:
            True if deleted successfully
        """
        client = SupabaseClient.get_client()

        try:
            client.storage.from_(bucket).remove([path])
            logger.info(f"Deleted file from storage: {bucket}/{path}")
            return True

        except Exception as e:
            logger.error(f"Failed to delete file: {e}")
            return False
