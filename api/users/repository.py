"""
User persistence.

`UserRepository` runs raw SQL against Postgres through `core.db.Database`.
`MemoryUserRepository` keeps rows in process memory and backs
`DATABASE_URL=memory://` (local runs and tests).
"""

from __future__ import annotations

from typing import Any

from core.db import Database
from core.errors import DuplicateRecord, StoreError
from core.ids import new_id


def _to_user(row: dict[str, Any]) -> dict:
    return {"id": str(row["id"]), "username": str(row["username"])}


class UserRepository:
    def __init__(self, db: Database) -> None:
        self._db = db

    async def create_user(self, *, username: str) -> dict:
        row = await self._db.fetch_one(
            """
            INSERT INTO users (id, username)
            VALUES ($1, $2)
            RETURNING id, username
            """,
            new_id(),
            username,
        )
        if row is None:
            raise StoreError("Failed to create user.")
        return _to_user(row)

    async def get_user_by_id(self, user_id: str) -> dict | None:
        row = await self._db.fetch_one(
            """
            SELECT id, username
            FROM users
            WHERE id = $1
            """,
            user_id,
        )
        return _to_user(row) if row is not None else None

    async def get_user_by_username(self, username: str) -> dict | None:
        row = await self._db.fetch_one(
            """
            SELECT id, username
            FROM users
            WHERE username = $1
            """,
            username,
        )
        return _to_user(row) if row is not None else None

    async def list_users(self) -> list[dict]:
        rows = await self._db.fetch_all(
            """
            SELECT id, username
            FROM users
            ORDER BY created_at ASC
            """
        )
        return [_to_user(row) for row in rows]


class MemoryUserRepository:
    def __init__(self) -> None:
        self._users: dict[str, dict] = {}

    async def create_user(self, *, username: str) -> dict:
        if any(user["username"] == username for user in self._users.values()):
            raise DuplicateRecord("Record already exists.", details=f"username={username}")
        user = {"id": new_id(), "username": username}
        self._users[user["id"]] = user
        return dict(user)

    async def get_user_by_id(self, user_id: str) -> dict | None:
        user = self._users.get(user_id)
        return dict(user) if user is not None else None

    async def get_user_by_username(self, username: str) -> dict | None:
        for user in self._users.values():
            if user["username"] == username:
                return dict(user)
        return None

    async def list_users(self) -> list[dict]:
        # dicts keep insertion order, i.e. creation order.
        return [dict(user) for user in self._users.values()]
