# =============================================================================
# core/services/storage_service.py - Presigned URL Operations
# =============================================================================
# Backs the /api/upload, /api/download and /api/delete endpoints.
# Each call translates to exactly one object store call; nothing here checks
# that the job or user ids name real rows.
# =============================================================================

import logging

from lib.object_store import ObjectStore, ObjectStoreError, build_object_key

logger = logging.getLogger(__name__)


class StorageService:
    """
    Service for object store access through presigned URLs.
    """

    @staticmethod
    def create_upload_url(
        file_name: str,
        file_type: str,
        job_id: int | str,
        user_id: int | str,
        revision_number: int | str,
    ) -> tuple[str, str]:
        """
        Build an object key and presign a PUT for it.

        Args:
            file_name: Original filename (kept as the key's last segment)
            file_type: MIME type the uploader will send
            job_id: Job the file belongs to
            user_id: Provider who owns the job
            revision_number: Revision the file belongs to

        Returns:
            Tuple of (upload URL, object key)

        Raises:
            ObjectStoreError: If signing fails
        """
        key = build_object_key(user_id, job_id, revision_number, file_name)
        upload_url = ObjectStore.presign_upload(key, file_type)

        logger.info(f"Issued upload URL for {key}")
        return upload_url, key

    @staticmethod
    def create_download_url(file_key: str) -> str:
        """
        Presign a GET for an existing key.

        Raises:
            ObjectStoreError: If signing fails
        """
        download_url = ObjectStore.presign_download(file_key)
        logger.info(f"Issued download URL for {file_key}")
        return download_url

    @staticmethod
    def delete_file(file_key: str) -> bool:
        """
        Delete one object. Metadata rows are the caller's business.

        Returns:
            True once the store accepted the delete

        Raises:
            ObjectStoreError: If the delete call fails
        """
        ObjectStore.delete_object(file_key)
        return True

    @staticmethod
    def delete_files_best_effort(file_keys: list[str], context: str) -> list[str]:
        """
        Delete objects whose metadata rows are already gone.

        Failures only leave unreachable objects, so they are logged and
        collected rather than raised.

        Returns:
            Keys that could not be deleted
        """
        failed = []
        for key in file_keys:
            try:
                ObjectStore.delete_object(key)
            except ObjectStoreError as e:
                logger.warning(f"Orphaned object {key} after deleting {context}: {e.message}")
                failed.append(key)
        return failed
