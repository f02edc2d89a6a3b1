"""
Request-body reading for JSON and HTML-form submissions.

The landing page posts urlencoded forms while API clients send JSON; both end
up validated into the same pydantic request model.
"""

from __future__ import annotations

import json
from typing import Any, TypeVar

from fastapi import Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError, describe_validation_errors

ModelT = TypeVar("ModelT", bound=BaseModel)

FORM_CONTENT_TYPES = {"application/x-www-form-urlencoded", "multipart/form-data"}


def _content_type(request: Request) -> str:
    return request.headers.get("content-type", "").split(";", 1)[0].strip().lower()


async def read_payload(request: Request, model: type[ModelT]) -> ModelT:
    data: Any
    if _content_type(request) in FORM_CONTENT_TYPES:
        form = await request.form()
        # File parts are not part of any request model.
        data = {key: value for key, value in form.items() if isinstance(value, str)}
    else:
        body = await request.body()
        if not body.strip():
            data = {}
        else:
            try:
                data = json.loads(body)
            except ValueError as exc:
                raise ValidationError("Request body must be valid JSON.") from exc

    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object.")

    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(
            "Invalid request body.",
            details=describe_validation_errors(exc.errors()),
        ) from exc
