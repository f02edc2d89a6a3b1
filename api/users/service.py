"""
User business logic.
"""

from __future__ import annotations

import logging

from core.errors import DuplicateRecord, ValidationError
from core.store import UserStore

from . import schemas

logger = logging.getLogger(__name__)

USERNAME_REQUIRED = "Username must be filled!"
USERNAME_TAKEN = "Username already taken!"


def _to_user_response(user_row: dict) -> schemas.UserResponse:
    return schemas.UserResponse(username=str(user_row["username"]), id=str(user_row["id"]))


async def register(users: UserStore, payload: schemas.CreateUserRequest) -> schemas.UserResponse:
    username = (payload.username or "").strip()
    if not username:
        raise ValidationError(USERNAME_REQUIRED)

    existing = await users.get_user_by_username(username)
    if existing is not None:
        raise ValidationError(USERNAME_TAKEN)

    try:
        user_row = await users.create_user(username=username)
    except DuplicateRecord as exc:
        # Lost a race with a concurrent registration of the same name.
        raise ValidationError(USERNAME_TAKEN) from exc

    logger.info("user_registered user_id=%s", user_row["id"])
    return _to_user_response(user_row)


async def list_users(users: UserStore) -> list[schemas.UserResponse]:
    rows = await users.list_users()
    return [_to_user_response(row) for row in rows]
