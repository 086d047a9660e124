# =============================================================================
# core/services/job_file_service.py - Job File Metadata & Revisions
# =============================================================================
# Handles the job_files table and revision numbering.
#
# Revision numbers are assigned on the server: the next number is
# max(revision_number) + 1 for the job (1 for the first upload), and the
# (job_id, revision_number) unique constraint in the database turns a
# concurrent duplicate into a conflict instead of a silent repeat.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.config import settings
from app.exceptions import DeleteIncompleteError, JobFileNotFoundError, RevisionConflictError
from core.models.job_file import UploadedBy
from core.services.storage_service import StorageService
from lib.object_store import ObjectStore
from lib.saga import Saga
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)


class JobFileService:
    """Service for files attached to a job."""

    @staticmethod
    def list_files(job_id: int) -> list[dict[str, Any]]:
        """Files on a job, latest revision first."""
        return SupabaseClient.fetch_many(
            "job_files",
            {"job_id": job_id},
            order_by=["revision_number", "uploaded_at"],
            desc=True,
        )

    @staticmethod
    def next_revision_number(job_id: int) -> int:
        """One more than the highest revision on the job, or 1 if it has none."""
        rows = SupabaseClient.fetch_many(
            "job_files",
            {"job_id": job_id},
            columns="revision_number",
            order_by="revision_number",
            desc=True,
            limit=1,
        )
        if not rows or rows[0].get("revision_number") is None:
            return 1
        return int(rows[0]["revision_number"]) + 1

    @staticmethod
    def create_upload_url(
        job_id: int,
        owner_id: UUID | str,
        file_name: str,
        file_type: str,
    ) -> dict[str, Any]:
        """
        Presign an upload for the job's next revision.

        Returns:
            Dict with upload_url, key and the revision_number baked into the key
        """
        revision_number = JobFileService.next_revision_number(job_id)
        upload_url, key = StorageService.create_upload_url(
            file_name=file_name,
            file_type=file_type,
            job_id=job_id,
            user_id=str(owner_id),
            revision_number=revision_number,
        )
        return {"upload_url": upload_url, "key": key, "revision_number": revision_number}

    @staticmethod
    def register_file(
        job_id: int,
        file_key: str,
        file_name: str,
        file_size: int,
        uploaded_by: UploadedBy,
        revision_number: int | None = None,
    ) -> dict[str, Any]:
        """
        Record a finished upload.

        With an explicit revision_number the insert either claims it or
        fails with a conflict. Without one, the next number is claimed,
        retrying on conflict up to REVISION_ASSIGN_ATTEMPTS times.

        Raises:
            RevisionConflictError: If the revision is taken (or could not be claimed)
        """
        attempts = 1 if revision_number is not None else settings.REVISION_ASSIGN_ATTEMPTS
        candidate = revision_number

        for attempt in range(1, attempts + 1):
            if revision_number is None:
                candidate = JobFileService.next_revision_number(job_id)

            try:
                row = SupabaseClient.insert_row("job_files", {
                    "job_id": job_id,
                    "file_key": file_key,
                    "file_name": file_name,
                    "file_size": file_size,
                    "revision_number": candidate,
                    "uploaded_by": uploaded_by.value,
                })
            except SupabaseClientError as e:
                if e.code != "UNIQUE_VIOLATION":
                    raise
                logger.warning(
                    f"Revision {candidate} of job {job_id} taken (attempt {attempt}/{attempts})"
                )
                continue

            logger.info(f"Registered {file_key} as revision {candidate} of job {job_id}")
            return row

        raise RevisionConflictError(job_id, candidate)

    @staticmethod
    def get_file(file_id: int, job_id: int) -> dict[str, Any]:
        """
        Raises:
            JobFileNotFoundError: If no such file on this job
        """
        row = SupabaseClient.fetch_one("job_files", {"id": file_id, "job_id": job_id})
        if not row:
            raise JobFileNotFoundError(file_id)
        return row

    @staticmethod
    def create_download_url(file_id: int, job_id: int) -> str:
        row = JobFileService.get_file(file_id, job_id)
        return StorageService.create_download_url(row["file_key"])

    @staticmethod
    def delete_file(file_id: int, job_id: int) -> dict[str, Any]:
        """
        Remove a file's metadata row and its stored object.

        The row goes first because it can be put back: if the object delete
        fails, the row is re-inserted and the file stays fully usable.

        Raises:
            JobFileNotFoundError: If no such file on this job
            DeleteIncompleteError: If a step failed
        """
        row = JobFileService.get_file(file_id, job_id)

        saga = Saga(f"delete file {file_id}")
        saga.add_step(
            "delete metadata",
            lambda: SupabaseClient.delete_rows("job_files", {"id": file_id}),
            compensate=lambda deleted: SupabaseClient.insert_rows("job_files", deleted or [row]),
        )
        saga.add_step(
            "delete object",
            lambda: ObjectStore.delete_object(row["file_key"]),
        )

        result = saga.run()
        if not result.success:
            raise DeleteIncompleteError(
                what=f"file {file_id}",
                step=result.failed_step,
                error=str(result.error),
                compensated=result.compensated,
            )

        logger.info(f"Deleted file {file_id} ({row['file_key']}) from job {job_id}")
        return row
