"""Parsing for timestamptz values returned by PostgREST and the functions."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import TypeAdapter

_DATETIME = TypeAdapter(datetime)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp; naive values are taken as UTC.

    Accepts any fractional-second precision ("...00.12+00:00") and a "Z" suffix.
    """
    if not value:
        return None
    parsed = _DATETIME.validate_python(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
