# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single service-role client
# and provides small table helpers used by the service layer:
# - fetch_one / fetch_many for reads
# - insert_rows / update_rows / delete_rows for writes
#
# Password sign-in never touches the shared client: each attempt gets its own
# anon client so one user's session can't leak into another request.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   clients = SupabaseClient.fetch_many("clients", {"user_id": uid}, order_by="client_name")
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import create_client, Client

from app.config import settings
from app.exceptions import ClientSideException

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code for "no (or more than one) row" on .single()
NOT_FOUND_CODE = "PGRST116"

# Postgres unique_violation
UNIQUE_VIOLATION_CODE = "23505"


class SupabaseClientError(ClientSideException):
    """
    Error during Supabase operations.

    Carries the upstream message so callers can surface it verbatim.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=502,
            suggestion=suggestion,
            details=details,
        )

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


def is_not_found(error: Exception) -> bool:
    """True if a PostgREST error means .single() found no row."""
    return NOT_FOUND_CODE in str(error)


def is_unique_violation(error: Exception) -> bool:
    """True if a PostgREST error is a unique-constraint conflict."""
    code = getattr(error, "code", None)
    return code == UNIQUE_VIOLATION_CODE or UNIQUE_VIOLATION_CODE in str(error)


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one service-role client instance is shared
    across the application. All methods are class methods for easy access
    without instantiation.

    Example:
        client_row = SupabaseClient.fetch_one("clients", {"id": 7, "user_id": uid})
        if client_row is None:
            raise ClientNotFoundError(7)
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS), so every
        query built on it must filter by owner explicitly.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def create_auth_client(cls) -> Client:
        """
        Create a fresh anon-key client for a single sign-in attempt.

        Not cached: sign-in stores the session on the client object.
        """
        try:
            return create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to create Supabase auth client: {e}",
                code="AUTH_CLIENT_INIT_FAILED",
                suggestion="Check SUPABASE_URL and SUPABASE_ANON_KEY in your .env file"
            )

    @classmethod
    def reset(cls) -> None:
        """Drop the cached client (tests swap in fakes)."""
        cls._instance = None

    @staticmethod
    def _apply_filters(query, filters: dict[str, Any] | None):
        for column, value in (filters or {}).items():
            query = query.eq(column, value)
        return query

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_one(
        cls,
        table: str,
        filters: dict[str, Any],
        columns: str = "*",
    ) -> dict[str, Any] | None:
        """
        Fetch exactly one row matching every filter.

        Args:
            table: Table name
            filters: Column -> value equality filters (all must match)
            columns: PostgREST select expression

        Returns:
            Row dict, or None if zero or several rows match

        Raises:
            SupabaseClientError: If the query fails for another reason
        """
        client = cls.get_client()

        try:
            query = cls._apply_filters(client.table(table).select(columns), filters)
            response = query.single().execute()
            return response.data

        except Exception as e:
            if is_not_found(e):
                return None
            logger.error(f"Failed to fetch from {table}: {e}")
            raise SupabaseClientError(
                message=f"Failed to fetch from {table}: {e}",
                code="FETCH_FAILED",
                details={"table": table, "filters": filters}
            )

    @classmethod
    def fetch_many(
        cls,
        table: str,
        filters: dict[str, Any] | None = None,
        columns: str = "*",
        order_by: str | list[str] | None = None,
        desc: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """
        Fetch all rows matching the filters.

        Args:
            table: Table name
            filters: Column -> value equality filters
            columns: PostgREST select expression
            order_by: Column (or columns, in priority order) to sort on
            desc: Sort descending
            limit: Maximum rows to return

        Returns:
            List of row dicts (empty if none match)

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        try:
            query = cls._apply_filters(client.table(table).select(columns), filters)

            if order_by:
                for column in [order_by] if isinstance(order_by, str) else order_by:
                    query = query.order(column, desc=desc)
            if limit is not None:
                query = query.limit(limit)

            response = query.execute()
            rows = response.data or []

            logger.debug(f"Fetched {len(rows)} rows from {table}")
            return rows

        except Exception as e:
            logger.error(f"Failed to fetch from {table}: {e}")
            raise SupabaseClientError(
                message=f"Failed to fetch from {table}: {e}",
                code="FETCH_FAILED",
                details={"table": table, "filters": filters or {}}
            )

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @classmethod
    def insert_rows(
        cls,
        table: str,
        rows: list[dict[str, Any]],
    ) -> list[dict[str, Any]]:
        """
        Insert rows and return them as stored (with generated ids).

        Raises:
            SupabaseClientError: If insert fails. Unique conflicts keep the
                upstream error as __cause__ so callers can inspect it.
        """
        if not rows:
            return []

        client = cls.get_client()

        try:
            response = client.table(table).insert(rows).execute()
            return response.data or []

        except Exception as e:
            logger.error(f"Failed to insert into {table}: {e}")
            raise SupabaseClientError(
                message=f"Failed to insert into {table}: {e}",
                code="UNIQUE_VIOLATION" if is_unique_violation(e) else "INSERT_FAILED",
                details={"table": table, "row_count": len(rows)}
            ) from e

    @classmethod
    def insert_row(cls, table: str, row: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a single row.

        Raises:
            SupabaseClientError: If insert fails or returns no data
        """
        inserted = cls.insert_rows(table, [row])
        if not inserted:
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA",
                details={"table": table}
            )
        return inserted[0]

    @classmethod
    def update_rows(
        cls,
        table: str,
        data: dict[str, Any],
        filters: dict[str, Any],
    ) -> list[dict[str, Any]]:
        """
        Update rows matching the filters and return them.

        Raises:
            SupabaseClientError: If update fails
        """
        client = cls.get_client()

        try:
            query = cls._apply_filters(client.table(table).update(data), filters)
            response = query.execute()
            return response.data or []

        except Exception as e:
            logger.error(f"Failed to update {table}: {e}")
            raise SupabaseClientError(
                message=f"Failed to update {table}: {e}",
                code="UPDATE_FAILED",
                details={"table": table, "filters": filters}
            )

    @classmethod
    def delete_rows(
        cls,
        table: str,
        filters: dict[str, Any],
    ) -> list[dict[str, Any]]:
        """
        Delete rows matching the filters and return the deleted rows.

        Refuses an empty filter set rather than wiping the table.

        Raises:
            SupabaseClientError: If delete fails
        """
        if not filters:
            raise SupabaseClientError(
                message=f"Refusing to delete from {table} without filters",
                code="DELETE_UNFILTERED",
            )

        client = cls.get_client()

        try:
            query = cls._apply_filters(client.table(table).delete(), filters)
            response = query.execute()
            deleted = response.data or []

            logger.info(f"Deleted {len(deleted)} rows from {table}")
            return deleted

        except Exception as e:
            logger.error(f"Failed to delete from {table}: {e}")
            raise SupabaseClientError(
                message=f"Failed to delete from {table}: {e}",
                code="DELETE_FAILED",
                details={"table": table, "filters": filters}
            )
