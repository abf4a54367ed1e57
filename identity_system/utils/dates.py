"""Date parsing for schema:validFrom objects.

Uses dateutil: isoparse covers ISO-8601 including reduced precision
("2019", "2019-06") and a trailing "Z"; anything else goes through
dateutil's free-form parser with missing fields taken from 1970-01-01 UTC.
Values without an offset are read as UTC, so ordering never depends on the
host timezone.
"""

from datetime import datetime, timezone

from dateutil import parser as dateutil_parser

UNPARSEABLE = float("inf")

_MISSING_FIELDS_DEFAULT = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_validity_datetime(value: str) -> datetime | None:
    """Timezone-aware datetime for a validity value, or None if unparseable."""
    text = value.strip()
    if not text:
        return None
    try:
        parsed = dateutil_parser.isoparse(text)
    except (ValueError, OverflowError):
        try:
            parsed = dateutil_parser.parse(text, default=_MISSING_FIELDS_DEFAULT)
        except (ValueError, OverflowError):
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_validity_timestamp(value: str) -> float:
    """Epoch seconds of a validity value; +inf when unparseable."""
    parsed = parse_validity_datetime(value)
    return parsed.timestamp() if parsed is not None else UNPARSEABLE


__all__ = ["UNPARSEABLE", "parse_validity_datetime", "parse_validity_timestamp"]
