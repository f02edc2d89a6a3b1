"""
Exercise persistence.

`ExerciseRepository` runs raw SQL against Postgres; `MemoryExerciseRepository`
mirrors the same filtering, ordering and limiting in process memory.
"""

from __future__ import annotations

import datetime
import itertools
from typing import Any

from core.db import Database
from core.errors import StoreError
from core.ids import new_id


def _to_exercise(row: dict[str, Any]) -> dict:
    return {
        "id": str(row["id"]),
        "user_id": str(row["user_id"]),
        "description": str(row["description"]),
        "duration": int(row["duration"]),
        "date": row["date"],
    }


class ExerciseRepository:
    def __init__(self, db: Database) -> None:
        self._db = db

    async def create_exercise(
        self,
        *,
        user_id: str,
        description: str,
        duration: int,
        date: datetime.date,
    ) -> dict:
        row = await self._db.fetch_one(
            """
            INSERT INTO exercises (id, user_id, description, duration, date)
            VALUES ($1, $2, $3, $4, $5)
            RETURNING id, user_id, description, duration, date
            """,
            new_id(),
            user_id,
            description,
            duration,
            date,
        )
        if row is None:
            raise StoreError("Failed to create exercise.")
        return _to_exercise(row)

    async def list_exercises(
        self,
        user_id: str,
        *,
        date_from: datetime.date | None = None,
        date_to: datetime.date | None = None,
        limit: int | None = None,
    ) -> list[dict]:
        """
        A user's exercises, oldest first. Date bounds are inclusive and
        `limit` applies after ordering (LIMIT NULL means no limit).
        """
        rows = await self._db.fetch_all(
            """
            SELECT id, user_id, description, duration, date
            FROM exercises
            WHERE user_id = $1
              AND ($2::date IS NULL OR date >= $2::date)
              AND ($3::date IS NULL OR date <= $3::date)
            ORDER BY date ASC, created_at ASC
            LIMIT $4
            """,
            user_id,
            date_from,
            date_to,
            limit,
        )
        return [_to_exercise(row) for row in rows]


class MemoryExerciseRepository:
    def __init__(self) -> None:
        self._exercises: list[dict] = []
        self._sequence = itertools.count()

    async def create_exercise(
        self,
        *,
        user_id: str,
        description: str,
        duration: int,
        date: datetime.date,
    ) -> dict:
        exercise = {
            "id": new_id(),
            "user_id": user_id,
            "description": description,
            "duration": duration,
            "date": date,
        }
        self._exercises.append({**exercise, "_seq": next(self._sequence)})
        return exercise

    async def list_exercises(
        self,
        user_id: str,
        *,
        date_from: datetime.date | None = None,
        date_to: datetime.date | None = None,
        limit: int | None = None,
    ) -> list[dict]:
        selected = [
            ex
            for ex in self._exercises
            if ex["user_id"] == user_id
            and (date_from is None or ex["date"] >= date_from)
            and (date_to is None or ex["date"] <= date_to)
        ]
        selected.sort(key=lambda ex: (ex["date"], ex["_seq"]))
        if limit is not None:
            selected = selected[:limit]
        return [_to_exercise(ex) for ex in selected]
