"""
Exercise logging and log retrieval.

Both operations resolve the user first: a malformed id is a 400, an unknown
one a 404, and only then are the remaining inputs checked.
"""

from __future__ import annotations

import logging
from datetime import date

from core.errors import InvalidIdentifier, MissingField, NotFound
from core.ids import parse_id
from core.store import ExerciseStore, UserStore

from . import schemas
from .parsing import format_date, parse_date, parse_duration, parse_limit

logger = logging.getLogger(__name__)


async def _resolve_user(users: UserStore, raw_user_id: str) -> dict:
    user_id = parse_id(raw_user_id)
    if user_id is None:
        raise InvalidIdentifier("Invalid User ID format")

    user = await users.get_user_by_id(user_id)
    if user is None:
        raise NotFound("User not found!")
    return user


def _missing_fields(payload: schemas.LogExerciseRequest) -> list[str]:
    missing = []
    if not (payload.description or "").strip():
        missing.append("description")
    duration = payload.duration
    if duration is None or (isinstance(duration, str) and not duration.strip()):
        missing.append("duration")
    return missing


async def log_exercise(
    users: UserStore,
    exercises: ExerciseStore,
    raw_user_id: str,
    payload: schemas.LogExerciseRequest,
) -> schemas.ExerciseResponse:
    user = await _resolve_user(users, raw_user_id)

    missing = _missing_fields(payload)
    if missing:
        raise MissingField("Description and duration are required.", details={"missing": missing})

    duration = parse_duration(payload.duration)
    exercise_date = parse_date(payload.date) or date.today()

    exercise = await exercises.create_exercise(
        user_id=user["id"],
        description=(payload.description or "").strip(),
        duration=duration,
        date=exercise_date,
    )
    logger.info("exercise_logged user_id=%s exercise_id=%s", user["id"], exercise["id"])

    return schemas.ExerciseResponse(
        username=user["username"],
        description=exercise["description"],
        duration=exercise["duration"],
        date=format_date(exercise["date"]),
        id=user["id"],
    )


async def get_log(
    users: UserStore,
    exercises: ExerciseStore,
    raw_user_id: str,
    *,
    date_from: str | None = None,
    date_to: str | None = None,
    limit: str | None = None,
) -> schemas.LogResponse:
    user = await _resolve_user(users, raw_user_id)

    rows = await exercises.list_exercises(
        user["id"],
        date_from=parse_date(date_from, field="from"),
        date_to=parse_date(date_to, field="to"),
        limit=parse_limit(limit),
    )

    log = [
        schemas.LogEntry(
            description=row["description"],
            duration=row["duration"],
            date=format_date(row["date"]),
        )
        for row in rows
    ]
    return schemas.LogResponse(username=user["username"], id=user["id"], count=len(log), log=log)
