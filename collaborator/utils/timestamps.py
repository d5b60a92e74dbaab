"""Canonical timestamp handling.

Every timestamp persisted or used as a query bound is rendered as
``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC so that stored values compare correctly
as plain strings.
"""

from datetime import datetime, timezone
from typing import Union

TimestampLike = Union[str, datetime]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """
    Render a datetime in the canonical format.

    Naive datetimes are treated as UTC.

    Args:
        value: Datetime to render

    Returns:
        Canonical UTC string with millisecond precision
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 string into an aware UTC datetime.

    Accepts a trailing ``Z``, explicit offsets, naive values (read as UTC)
    and any fractional-second precision.

    Args:
        value: ISO-8601 timestamp string

    Returns:
        Aware datetime in UTC

    Raises:
        ValueError: If the string is not a recognizable timestamp
    """
    text = value.strip()
    if not text:
        raise ValueError("Empty timestamp")
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    if "T" not in text and " " in text:
        text = text.replace(" ", "T", 1)

    # fromisoformat only takes 3 or 6 fractional digits before Python 3.11
    if "." in text:
        head, _, rest = text.partition(".")
        digits = ""
        for char in rest:
            if not char.isdigit():
                break
            digits += char
        suffix = rest[len(digits):]
        text = f"{head}.{(digits + '000000')[:6]}{suffix}"

    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def normalize_timestamp(value: TimestampLike) -> str:
    """
    Convert a string or datetime into the canonical format.

    Args:
        value: ISO-8601 string or datetime

    Returns:
        Canonical timestamp string
    """
    if isinstance(value, datetime):
        return format_timestamp(value)
    return format_timestamp(parse_timestamp(value))
