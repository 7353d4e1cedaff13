from __future__ import annotations

import re

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date

_ISO_DATE_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")

INVALID_DATE_MESSAGE = "Invalid date format. Use YYYY-MM-DD"


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def is_iso_date(value: object) -> bool:
    if not isinstance(value, str) or not _ISO_DATE_RE.match(value):
        return False
    try:
        parse_iso_date(value)
    except ValueError:
        return False
    return True


def require_iso_date(value: object) -> str:
    """Return the date string unchanged if it is a real YYYY-MM-DD day."""
    if not is_iso_date(value):
        raise ValidationError(INVALID_DATE_MESSAGE)
    return value  # type: ignore[return-value]
