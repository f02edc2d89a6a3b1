"""
User API schemas (request/response models).
"""

from __future__ import annotations

from pydantic import BaseModel


class CreateUserRequest(BaseModel):
    # Presence and blankness are checked by the service so the error shape
    # matches the rest of the API.
    username: str | None = None


class UserResponse(BaseModel):
    username: str
    id: str
