from __future__ import annotations

import asyncpg
import pytest

from core.db import Database, _store_error, sanitize_database_url
from core.errors import DuplicateRecord, StoreError

MISSING_ID = "00000000-0000-4000-8000-000000000000"


class FailingUsers:
    """User store whose every call fails with `error`."""

    def __init__(self, error: Exception) -> None:
        self.error = error

    async def create_user(self, *, username: str) -> dict:
        raise self.error

    async def get_user_by_id(self, user_id: str) -> dict | None:
        raise self.error

    async def get_user_by_username(self, username: str) -> dict | None:
        raise self.error

    async def list_users(self) -> list[dict]:
        raise self.error


class RacingUsers:
    """Sees no existing user, then loses the insert to a concurrent one."""

    async def get_user_by_username(self, username: str) -> dict | None:
        return None

    async def create_user(self, *, username: str) -> dict:
        raise DuplicateRecord("Record already exists.", details="users_username_key")


class FailingPool:
    def __init__(self, error: Exception) -> None:
        self.error = error

    async def fetchrow(self, sql, *args):
        raise self.error

    async def fetch(self, sql, *args):
        raise self.error

    async def execute(self, sql, *args):
        raise self.error


def _failing_database(error: Exception) -> Database:
    db = Database("postgresql://localhost/exercises")
    db._pool = FailingPool(error)
    return db


def test_store_failure_on_listing_is_500_with_details(client):
    client.app.state.store.users = FailingUsers(StoreError("Database error.", details="connection reset"))

    resp = client.get("/api/users")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Database error.", "details": "connection reset"}


def test_store_failure_on_registration_is_500(client):
    client.app.state.store.users = FailingUsers(StoreError("Database error.", details="timeout"))

    resp = client.post("/api/users", json={"username": "alice"})

    assert resp.status_code == 500
    assert resp.json()["error"] == "Database error."


def test_store_failure_on_log_lookup_is_500(client):
    client.app.state.store.users = FailingUsers(StoreError("Database error.", details="timeout"))

    resp = client.get(f"/api/users/{MISSING_ID}/logs")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Database error.", "details": "timeout"}


def test_duplicate_on_insert_race_is_400(client):
    client.app.state.store.users = RacingUsers()

    resp = client.post("/api/users", json={"username": "alice"})

    assert resp.status_code == 400
    assert resp.json() == {"error": "Username already taken!"}


def test_unique_violation_maps_to_duplicate_record():
    error = _store_error(asyncpg.UniqueViolationError("duplicate key value"))

    assert isinstance(error, DuplicateRecord)
    assert error.status_code == 500
    assert "duplicate key value" in error.details


@pytest.mark.parametrize(
    "exc",
    [
        asyncpg.DataError("invalid input for query argument $4"),
        asyncpg.InterfaceError("connection is closed"),
        ConnectionResetError("reset by peer"),
    ],
)
def test_other_failures_map_to_store_error(exc):
    error = _store_error(exc)

    assert type(error) is StoreError
    assert error.message == "Database error."


@pytest.mark.anyio
@pytest.mark.parametrize(
    "exc, expected",
    [
        (asyncpg.UniqueViolationError("duplicate key value"), DuplicateRecord),
        (asyncpg.DataError("value out of int32 range"), StoreError),
        (asyncpg.ConnectionDoesNotExistError("connection was closed"), StoreError),
        (OSError("network unreachable"), StoreError),
    ],
)
async def test_database_wraps_driver_errors(exc, expected):
    db = _failing_database(exc)

    with pytest.raises(expected) as excinfo:
        await db.fetch_one("SELECT 1")
    assert excinfo.value.__cause__ is exc

    with pytest.raises(expected):
        await db.fetch_all("SELECT 1")
    with pytest.raises(expected):
        await db.execute("SELECT 1")


def test_database_pool_requires_connect():
    with pytest.raises(RuntimeError, match="connect"):
        Database("postgresql://localhost/exercises").pool


@pytest.mark.parametrize(
    "url, expected",
    [
        ("postgresql://u:p@db/app", "postgresql://u:p@db/app"),
        ("postgresql://u:p@db/app?sslmode=require", "postgresql://u:p@db/app"),
        (
            "postgresql://u:p@db/app?sslmode=disable&application_name=tracker",
            "postgresql://u:p@db/app?application_name=tracker",
        ),
    ],
)
def test_sanitize_database_url_drops_sslmode(url, expected):
    assert sanitize_database_url(url) == expected
