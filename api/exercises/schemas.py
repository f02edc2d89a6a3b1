"""
Exercise API schemas (request/response models).
"""

from __future__ import annotations

from pydantic import BaseModel


class LogExerciseRequest(BaseModel):
    description: str | None = None
    # Numbers and numeric strings are both accepted; the service coerces.
    duration: int | str | None = None
    date: str | None = None


class ExerciseResponse(BaseModel):
    """
    Response for a logged exercise. `id` is the owning user's id.
    """

    username: str
    description: str
    duration: int
    date: str
    id: str


class LogEntry(BaseModel):
    description: str
    duration: int
    date: str


class LogResponse(BaseModel):
    username: str
    id: str
    count: int
    log: list[LogEntry]
