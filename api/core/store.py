"""
The store handle shared by request handlers.

A `Store` is built once in the app lifespan, kept on `app.state.store`, and
handed to routes through `Depends(get_store)`. Both the Postgres and the
in-memory repositories satisfy the protocols below.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Protocol

from fastapi import Request

from .db import Database


class UserStore(Protocol):
    async def create_user(self, *, username: str) -> dict: ...

    async def get_user_by_id(self, user_id: str) -> dict | None: ...

    async def get_user_by_username(self, username: str) -> dict | None: ...

    async def list_users(self) -> list[dict]: ...


class ExerciseStore(Protocol):
    async def create_exercise(
        self,
        *,
        user_id: str,
        description: str,
        duration: int,
        date: datetime.date,
    ) -> dict: ...

    async def list_exercises(
        self,
        user_id: str,
        *,
        date_from: datetime.date | None = None,
        date_to: datetime.date | None = None,
        limit: int | None = None,
    ) -> list[dict]: ...


@dataclass
class Store:
    users: UserStore
    exercises: ExerciseStore
    backend: str
    database: Database | None = None

    async def close(self) -> None:
        if self.database is not None:
            await self.database.close()


def get_store(request: Request) -> Store:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise RuntimeError("Store is not initialized. It is opened in the app lifespan.")
    return store
