"""
Record identifiers: UUID4 values carried around as canonical strings.
"""

from __future__ import annotations

import uuid


def new_id() -> str:
    return str(uuid.uuid4())


def parse_id(value: str | None) -> str | None:
    """
    Return the canonical form of `value`, or None if it is not a valid id.

    Accepts the spellings `uuid.UUID` accepts (hyphenated, bare hex, braces,
    `urn:uuid:` prefix).
    """
    raw = (value or "").strip()
    if not raw:
        return None
    try:
        return str(uuid.UUID(raw))
    except ValueError:
        return None
