# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - An in-memory stand-in for the Supabase table API (FakeSupabase)
# - A MagicMock boto3 client for the object store
# - TestClient fixtures with user / client logins
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-supabase-jwt-secret-0123456789")
os.environ.setdefault("CLOUDFLARE_ACCOUNT_ID", "testaccount")
os.environ.setdefault("R2_ACCESS_KEY_ID", "test-access-key")
os.environ.setdefault("R2_SECRET_ACCESS_KEY", "test-secret-key")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-client-tokens")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import MagicMock
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from app.auth import AuthUser, ClientPrincipal, get_current_client, get_current_user
from app.main import app
from lib.object_store import ObjectStore
from lib.supabase_client import SupabaseClient


USER_ID = UUID("550e8400-e29b-41d4-a716-446655440000")
OTHER_USER_ID = UUID("660e8400-e29b-41d4-a716-446655440001")


# =============================================================================
# FakeSupabase - in-memory PostgREST table API
# =============================================================================

class FakeAPIError(Exception):
    """Shaped like postgrest's APIError: a code plus a message."""

    def __init__(self, message: str, code: str):
        super().__init__(f"{{'code': '{code}', 'message': '{message}'}}")
        self.code = code
        self.message = message


class FakeResponse:
    def __init__(self, data: Any):
        self.data = data
        self.count = len(data) if isinstance(data, list) else None


# Primary key column per table
PRIMARY_KEYS = {"jobs": "job_id"}

# Unique constraints per table
UNIQUE = {
    "clients": [("client_key",)],
    "job_files": [("job_id", "revision_number")],
}

# Timestamp column filled on insert
TIMESTAMPS = {"jobs": "created_at", "comments": "created_at", "job_files": "uploaded_at"}


class FakeQuery:
    """Chainable query builder recording one operation on one table."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.op = "select"
        self.columns = "*"
        self.filters: list[tuple[str, Any]] = []
        self.orders: list[tuple[str, bool]] = []
        self.limit_n: int | None = None
        self.payload: Any = None
        self.want_single = False

    def select(self, columns: str = "*", count: str | None = None):
        self.op = "select"
        self.columns = columns
        return self

    def insert(self, rows):
        self.op = "insert"
        self.payload = rows if isinstance(rows, list) else [rows]
        return self

    def update(self, data: dict):
        self.op = "update"
        self.payload = data
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column: str, value: Any):
        self.filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False):
        self.orders.append((column, desc))
        return self

    def limit(self, n: int):
        self.limit_n = n
        return self

    def single(self):
        self.want_single = True
        return self

    def _matches(self, row: dict) -> bool:
        return all(row.get(column) == value for column, value in self.filters)

    def execute(self) -> FakeResponse:
        self.db.calls.append((self.table, self.op, dict(self.filters)))

        failure = self.db.failures.get((self.table, self.op))
        if failure is not None:
            raise failure

        rows = self.db.tables.setdefault(self.table, [])

        if self.op == "insert":
            return FakeResponse(self.db.insert(self.table, self.payload))

        if self.op == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(dict(row))
            return FakeResponse(updated)

        if self.op == "delete":
            deleted = [dict(row) for row in rows if self._matches(row)]
            self.db.tables[self.table] = [row for row in rows if not self._matches(row)]
            return FakeResponse(deleted)

        selected = [dict(row) for row in rows if self._matches(row)]
        for column, desc in reversed(self.orders):
            selected.sort(key=lambda r: (r.get(column) is not None, r.get(column)), reverse=desc)
        if self.limit_n is not None:
            selected = selected[: self.limit_n]
        if self.columns != "*":
            wanted = [c.strip() for c in self.columns.split(",")]
            selected = [{c: row.get(c) for c in wanted} for row in selected]

        if self.want_single:
            if len(selected) != 1:
                raise FakeAPIError(
                    "JSON object requested, multiple (or no) rows returned", "PGRST116"
                )
            return FakeResponse(selected[0])

        return FakeResponse(selected)


class FakeSupabase:
    """
    Minimal in-memory Supabase client.

    - tables: table name -> list of row dicts
    - calls: (table, op, filters) for every executed query, in order
    - failures: (table, op) -> exception to raise instead of executing
    """

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.calls: list[tuple[str, str, dict]] = []
        self.failures: dict[tuple[str, str], Exception] = {}
        self.auth = MagicMock()
        self._ids: dict[str, int] = {}
        self._clock = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def _tick(self) -> str:
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    def insert(self, table: str, rows: list[dict]) -> list[dict]:
        existing = self.tables.setdefault(table, [])
        pk = PRIMARY_KEYS.get(table, "id")

        for row in rows:
            for columns in UNIQUE.get(table, []):
                value = tuple(row.get(c) for c in columns)
                if any(tuple(r.get(c) for c in columns) == value for r in existing):
                    raise FakeAPIError(
                        f"duplicate key value violates unique constraint on {columns}", "23505"
                    )

        inserted = []
        for row in rows:
            stored = dict(row)
            if stored.get(pk) is None:
                self._ids[table] = self._ids.get(table, 0) + 1
                stored[pk] = self._ids[table]
            else:
                self._ids[table] = max(self._ids.get(table, 0), stored[pk])
            column = TIMESTAMPS.get(table)
            if column and not stored.get(column):
                stored[column] = self._tick()
            existing.append(stored)
            inserted.append(dict(stored))
        return inserted

    def seed(self, table: str, *rows: dict) -> list[dict]:
        return self.insert(table, list(rows))

    def ops(self, table: str | None = None) -> list[tuple[str, str]]:
        """(table, op) pairs in call order, optionally for one table."""
        return [(t, op) for t, op, _ in self.calls if table is None or t == table]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fake_db():
    """Install a FakeSupabase as the shared Supabase client."""
    db = FakeSupabase()
    SupabaseClient._instance = db
    yield db
    SupabaseClient.reset()


@pytest.fixture
def mock_s3():
    """Install a MagicMock as the shared boto3 client."""
    s3 = MagicMock()
    s3.generate_presigned_url.side_effect = (
        lambda operation, Params, ExpiresIn: (
            f"https://signed.example/{Params['Key']}?op={operation}&expires={ExpiresIn}"
        )
    )
    ObjectStore._instance = s3
    yield s3
    ObjectStore.reset()


@pytest.fixture
def api():
    """TestClient for the app; dependency overrides are cleared afterwards."""
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def as_user(api):
    """Log the TestClient in as provider USER_ID."""
    user = AuthUser(id=USER_ID, email="owner@studio.com")
    app.dependency_overrides[get_current_user] = lambda: user
    return user


@pytest.fixture
def as_other_user(api):
    """Log the TestClient in as a different provider."""
    user = AuthUser(id=OTHER_USER_ID, email="other@studio.com")
    app.dependency_overrides[get_current_user] = lambda: user
    return user


@pytest.fixture
def acme(fake_db):
    """A client owned by USER_ID."""
    return fake_db.seed("clients", {
        "client_name": "Acme",
        "client_email": "a@acme.com",
        "client_key": 48213377,
        "user_id": str(USER_ID),
    })[0]


@pytest.fixture
def acme_job(fake_db, acme):
    """A job under the Acme client."""
    return fake_db.seed("jobs", {
        "job_name": "Launch video",
        "price": 1500.0,
        "number_rev": 3,
        "description": "60s teaser",
        "client_key": acme["client_key"],
    })[0]


@pytest.fixture
def as_acme(api, acme):
    """Log the TestClient in as the Acme client."""
    principal = ClientPrincipal(
        id=acme["id"],
        client_key=acme["client_key"],
        email=acme["client_email"],
        name=acme["client_name"],
    )
    app.dependency_overrides[get_current_client] = lambda: principal
    return principal
