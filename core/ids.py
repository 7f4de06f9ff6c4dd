"""
Document identifiers.

Every record exposed by the API is keyed by a 24 character hexadecimal
identifier.  The first eight characters encode the creation second so
identifiers sort roughly by age; the remainder is random.
"""
from __future__ import annotations

import re
import secrets
import time

OBJECT_ID_RE = re.compile(r'^[0-9a-fA-F]{24}$')


def new_object_id() -> str:
    return f"{int(time.time()) & 0xFFFFFFFF:08x}{secrets.token_hex(8)}"


def is_object_id(value) -> bool:
    return isinstance(value, str) and bool(OBJECT_ID_RE.match(value))


def ensure_object_id(value, label: str = '') -> str:
    """Return ``value`` lowercased or raise a 400 naming the identifier."""
    if not is_object_id(value):
        from core.exceptions import ValidationError
        raise ValidationError(f"Invalid {label + ' ' if label else ''}ID".strip())
    return value.lower()
