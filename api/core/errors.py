"""
API error types and the FastAPI handlers that render them.

Every error response has the shape `{"error": "...", "details": ...}`, where
`details` is present only when there is something to add.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500

    def __init__(self, message: str, *, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(ApiError):
    status_code = 400


class InvalidIdentifier(ValidationError):
    pass


class MissingField(ValidationError):
    pass


class InvalidDate(ValidationError):
    pass


class NotFound(ApiError):
    status_code = 404


class StoreError(ApiError):
    status_code = 500


# Unique-constraint violations; callers translate these into their own errors.
class DuplicateRecord(StoreError):
    pass


def error_body(message: str, details: Any = None) -> dict[str, Any]:
    body: dict[str, Any] = {"error": message}
    if details is not None:
        body["details"] = details
    return body


def describe_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Reduce pydantic error dicts to JSON-safe `{loc, msg}` pairs.
    """
    return [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": str(err.get("msg", ""))}
        for err in errors
    ]


async def _api_error_handler(_: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("store_error message=%s details=%s", exc.message, exc.details)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.details))


async def _request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=error_body("Invalid request.", describe_validation_errors(list(exc.errors()))),
    )


async def _http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error method=%s path=%s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=error_body("Server error", str(exc)))


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
