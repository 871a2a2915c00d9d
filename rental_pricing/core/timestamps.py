"""
Timestamp parsing for usage metering.

Accepts only UTC timestamps of the form ``YYYY-MM-DDTHH:MM:SS[.fff]Z`` and
converts them to Unix epoch seconds on the proleptic Gregorian calendar.
"""

import calendar
import re
from datetime import datetime
from typing import Any

from .errors import MalformedTimestamp

_TIMESTAMP_PATTERN = re.compile(
    r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"T(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"
    r"(?:\.(?P<fraction>\d{3}))?Z",
    re.ASCII,
)


def parse_timestamp(text: Any, field: str = "timestamp") -> int:
    """Parse a UTC timestamp into whole epoch seconds.

    Month lengths, leap years and time of day are all honoured, so the
    result is exact to the second. Milliseconds are truncated.

    Args:
        text: Timestamp such as "2024-02-29T23:59:59.500Z"
        field: Field name reported on failure

    Returns:
        Seconds since 1970-01-01T00:00:00Z (negative before the epoch)

    Raises:
        MalformedTimestamp: If text deviates from the pattern or names a
            date/time that does not exist
    """
    if not isinstance(text, str):
        raise MalformedTimestamp(
            f"'{field}' must be a string, got {type(text).__name__}",
            field=field,
        )

    match = _TIMESTAMP_PATTERN.fullmatch(text)
    if match is None:
        raise MalformedTimestamp(
            f"'{field}' must match YYYY-MM-DDTHH:MM:SS[.fff]Z, got {text!r}",
            field=field,
        )

    try:
        moment = datetime(
            int(match["year"]),
            int(match["month"]),
            int(match["day"]),
            int(match["hour"]),
            int(match["minute"]),
            int(match["second"]),
        )
    except ValueError as e:
        raise MalformedTimestamp(f"'{field}' is not a valid instant: {text!r} ({e})", field=field)

    return calendar.timegm(moment.timetuple())


def validate_iso_timestamp(text: Any) -> bool:
    """True if text is a well-formed, existing UTC timestamp."""
    try:
        parse_timestamp(text)
    except MalformedTimestamp:
        return False
    return True


def is_timestamp_expired(timestamp: str, current_time: str) -> bool:
    """True if ``timestamp`` lies strictly before ``current_time``.

    Raises:
        MalformedTimestamp: If either timestamp is malformed
    """
    return parse_timestamp(timestamp, "timestamp") < parse_timestamp(current_time, "current_time")
