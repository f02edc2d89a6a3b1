"""
Exercise API endpoints (nested under a user).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request

from core.payload import read_payload
from core.store import Store, get_store

from . import schemas, service

router = APIRouter()


@router.post("/api/users/{user_id}/exercises")
async def log_exercise(
    user_id: str,
    request: Request,
    store: Store = Depends(get_store),
) -> schemas.ExerciseResponse:
    """
    Log an exercise (`description`, `duration`, optional `date`) for a user.
    """
    payload = await read_payload(request, schemas.LogExerciseRequest)
    return await service.log_exercise(store.users, store.exercises, user_id, payload)


@router.get("/api/users/{user_id}/logs")
async def get_log(
    user_id: str,
    date_from: str | None = Query(default=None, alias="from"),
    date_to: str | None = Query(default=None, alias="to"),
    limit: str | None = Query(default=None),
    store: Store = Depends(get_store),
) -> schemas.LogResponse:
    """
    Return a user's exercises, oldest first, optionally bounded by
    `from`/`to` (inclusive) and truncated to `limit`.
    """
    return await service.get_log(
        store.users,
        store.exercises,
        user_id,
        date_from=date_from,
        date_to=date_to,
        limit=limit,
    )
