# =============================================================================
# core/services/job_service.py - Job Business Logic
# =============================================================================
# Jobs hang off a client through its client_key. Providers reach a job
# through a client they own; clients reach it through their own key.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.exceptions import JobNotFoundError
from core.services.client_service import ClientService
from core.services.storage_service import StorageService
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


class JobService:
    """Service for job operations."""

    @staticmethod
    def list_jobs(client_key: int) -> list[dict[str, Any]]:
        """Jobs under a client key, newest first."""
        return SupabaseClient.fetch_many(
            "jobs",
            {"client_key": client_key},
            order_by="created_at",
            desc=True,
        )

    @staticmethod
    def list_jobs_for_user(client_id: int, user_id: UUID | str) -> list[dict[str, Any]]:
        """
        Jobs of one of the user's clients.

        Raises:
            ClientNotFoundError: If the client doesn't exist or belongs to someone else
        """
        client = ClientService.get_client(client_id, user_id)
        return JobService.list_jobs(client["client_key"])

    @staticmethod
    def get_job_for_user(job_id: int, user_id: UUID | str) -> tuple[dict[str, Any], dict[str, Any]]:
        """
        Get a job the provider owns, with its client.

        Returns:
            Tuple of (job row, client row)

        Raises:
            JobNotFoundError: If the job doesn't exist or its client isn't the user's
        """
        job = SupabaseClient.fetch_one("jobs", {"job_id": job_id})
        if not job:
            raise JobNotFoundError(job_id)

        client = ClientService.get_client_by_key(job["client_key"])
        if not client or str(client.get("user_id")) != str(user_id):
            # Don't reveal that the job exists
            raise JobNotFoundError(job_id)

        return job, client

    @staticmethod
    def get_job_for_client(job_id: int, client_key: int) -> dict[str, Any]:
        """
        Get a job as seen by a client.

        Raises:
            JobNotFoundError: If the job doesn't exist under this client key
        """
        job = SupabaseClient.fetch_one("jobs", {"job_id": job_id, "client_key": client_key})
        if not job:
            raise JobNotFoundError(job_id)
        return job

    @staticmethod
    def create_job(
        client_id: int,
        user_id: UUID | str,
        job_name: str,
        price: float,
        number_rev: int,
        description: str,
    ) -> dict[str, Any]:
        """
        Create a job under one of the user's clients.

        Raises:
            ClientNotFoundError: If the client doesn't exist or belongs to someone else
        """
        client = ClientService.get_client(client_id, user_id)

        job = SupabaseClient.insert_row("jobs", {
            "job_name": job_name,
            "price": price,
            "number_rev": number_rev,
            "description": description,
            "client_key": client["client_key"],
        })

        logger.info(f"Created job: {job['job_id']} for client: {client_id}")
        return job

    @staticmethod
    def delete_job(job_id: int, user_id: UUID | str) -> dict[str, Any]:
        """
        Delete a job.

        Comment and file rows go with it through the database's cascade
        rules. Stored objects are removed afterwards; a failure there only
        leaves an unreachable object and is logged, not raised.

        Raises:
            JobNotFoundError: If the job doesn't exist or isn't the user's
        """
        job, _ = JobService.get_job_for_user(job_id, user_id)

        files = SupabaseClient.fetch_many("job_files", {"job_id": job_id}, columns="file_key")
        SupabaseClient.delete_rows("jobs", {"job_id": job_id})
        logger.info(f"Deleted job: {job_id}")

        StorageService.delete_files_best_effort(
            [row["file_key"] for row in files],
            context=f"job {job_id}",
        )

        return job
