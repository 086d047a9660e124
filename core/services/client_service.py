# =============================================================================
# core/services/client_service.py - Client Business Logic
# =============================================================================
# Handles client CRUD operations for providers.
# Every query filters by the owning user's id: the service-role client
# bypasses RLS, so ownership is enforced here.
# =============================================================================

import logging
import secrets
from typing import Any
from uuid import UUID

from app.exceptions import ClientNotFoundError, DeleteIncompleteError
from core.models.client import CLIENT_KEY_MAX, CLIENT_KEY_MIN
from core.services.storage_service import StorageService
from lib.saga import Saga
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)

# Fresh keys to try if a generated key collides with an existing one
CLIENT_KEY_ATTEMPTS = 5


def generate_client_key() -> int:
    """Random 8-digit key in [10_000_000, 99_999_999]."""
    return CLIENT_KEY_MIN + secrets.randbelow(CLIENT_KEY_MAX - CLIENT_KEY_MIN + 1)


class ClientService:
    """
    Service for client management operations.

    Provides a clean interface between API routes and database.
    """

    @staticmethod
    def list_clients(user_id: UUID | str) -> list[dict[str, Any]]:
        """Clients owned by the user, sorted by name."""
        return SupabaseClient.fetch_many(
            "clients",
            {"user_id": str(user_id)},
            order_by="client_name",
        )

    @staticmethod
    def get_client(client_id: int, user_id: UUID | str) -> dict[str, Any]:
        """
        Get one of the user's clients.

        Raises:
            ClientNotFoundError: If the client doesn't exist or belongs to someone else
        """
        client = SupabaseClient.fetch_one(
            "clients",
            {"id": client_id, "user_id": str(user_id)},
        )
        if not client:
            raise ClientNotFoundError(client_id)
        return client

    @staticmethod
    def get_client_by_key(client_key: int) -> dict[str, Any] | None:
        """Look up the client a job belongs to."""
        return SupabaseClient.fetch_one("clients", {"client_key": client_key})

    @staticmethod
    def create_client(
        user_id: UUID | str,
        client_name: str,
        client_email: str,
    ) -> dict[str, Any]:
        """
        Create a client with a freshly generated key.

        A key that collides with an existing client (unique constraint on
        client_key) is replaced and the insert retried.

        Returns:
            Created client row
        """
        last_error: SupabaseClientError | None = None

        for attempt in range(1, CLIENT_KEY_ATTEMPTS + 1):
            data = {
                "client_name": client_name,
                "client_email": client_email,
                "client_key": generate_client_key(),
                "user_id": str(user_id),
            }
            try:
                client = SupabaseClient.insert_row("clients", data)
            except SupabaseClientError as e:
                if e.code != "UNIQUE_VIOLATION":
                    raise
                logger.warning(f"Client key collision on attempt {attempt}, retrying")
                last_error = e
                continue

            logger.info(f"Created client: {client['id']} for user: {user_id}")
            return client

        raise last_error

    @staticmethod
    def update_client(
        client_id: int,
        user_id: UUID | str,
        client_name: str | None = None,
        client_email: str | None = None,
    ) -> dict[str, Any]:
        """
        Rename a client or change its login email.

        Raises:
            ClientNotFoundError: If the client doesn't exist or belongs to someone else
        """
        client = ClientService.get_client(client_id, user_id)

        update_data = {}
        if client_name:
            update_data["client_name"] = client_name
        if client_email:
            update_data["client_email"] = client_email

        if not update_data:
            return client  # Nothing to update

        updated = SupabaseClient.update_rows(
            "clients",
            update_data,
            {"id": client_id, "user_id": str(user_id)},
        )
        if not updated:
            raise ClientNotFoundError(client_id)

        logger.info(f"Updated client: {client_id}")
        return updated[0]

    @staticmethod
    def delete_client(client_id: int, user_id: UUID | str) -> dict[str, Any]:
        """
        Delete a client and every job under its key.

        Jobs go first. If deleting them fails, the client row is left in
        place. If the client delete fails afterwards, the removed job rows
        are inserted back. Once both rows are gone the stored objects of
        every job file are deleted best-effort; their metadata rows went
        with the jobs through the database cascade.

        Returns:
            The deleted client row

        Raises:
            ClientNotFoundError: If the client doesn't exist or belongs to someone else
            DeleteIncompleteError: If a step failed
        """
        client = ClientService.get_client(client_id, user_id)
        client_key = client["client_key"]
        file_keys = ClientService._file_keys(client_key)

        saga = Saga(f"delete client {client_id}")
        saga.add_step(
            "delete jobs",
            lambda: SupabaseClient.delete_rows("jobs", {"client_key": client_key}),
            compensate=lambda deleted: SupabaseClient.insert_rows("jobs", deleted),
        )
        saga.add_step(
            "delete client",
            lambda: SupabaseClient.delete_rows("clients", {"id": client_id, "user_id": str(user_id)}),
        )

        result = saga.run()
        if not result.success:
            raise DeleteIncompleteError(
                what=f"client {client_id}",
                step=result.failed_step,
                error=str(result.error),
                compensated=result.compensated,
            )

        logger.info(
            f"Deleted client {client_id} and {len(result.results['delete jobs'])} jobs"
        )
        StorageService.delete_files_best_effort(file_keys, context=f"client {client_id}")
        return client

    @staticmethod
    def _file_keys(client_key: int) -> list[str]:
        """Object keys of every file on every job under a client key."""
        jobs = SupabaseClient.fetch_many("jobs", {"client_key": client_key}, columns="job_id")
        return [
            row["file_key"]
            for job in jobs
            for row in SupabaseClient.fetch_many("job_files", {"job_id": job["job_id"]}, columns="file_key")
        ]
