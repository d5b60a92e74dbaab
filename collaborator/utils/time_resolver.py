"""Resolution of relative time language into absolute UTC ranges.

Both the manager and the capabilities call into this module so that a
phrase like "yesterday" always maps to the same window for a given
timezone and reference time.
"""

import calendar
import logging
import re
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..context.models import TimeWindow
from .timestamps import format_timestamp, utc_now

logger = logging.getLogger(__name__)

END_OF_DAY = time(23, 59, 59, 999000)

_RELATIVE_SPAN = re.compile(r"\b(?:last|past)\s+(\d+)\s+(hour|day|week)s?\b")
_SINGLE_SPAN = re.compile(r"\b(?:last|past)\s+(hour|day|week)\b")
_NUMERIC_DATE = re.compile(r"(\d{1,2})[/\-](\d{1,2})(?:[/\-](\d{2,4}))?")

_SPAN_UNITS = {"hour": "hours", "day": "days", "week": "weeks"}


def get_zone(timezone: Optional[str]) -> ZoneInfo:
    """Return the ZoneInfo for an IANA name, falling back to UTC."""
    try:
        return ZoneInfo(timezone or "UTC")
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown timezone '{timezone}', falling back to UTC")
        return ZoneInfo("UTC")


def _local_now(timezone: Optional[str], now: Optional[datetime]) -> Tuple[ZoneInfo, datetime]:
    zone = get_zone(timezone)
    reference = now or utc_now()
    return zone, reference.astimezone(zone)


def _days_since_sunday(day: date) -> int:
    # Weeks start on Sunday
    return (day.weekday() + 1) % 7


def _start_of(day: date, zone: ZoneInfo) -> datetime:
    return datetime.combine(day, time(0), tzinfo=zone)


def _end_of(day: date, zone: ZoneInfo) -> datetime:
    return datetime.combine(day, END_OF_DAY, tzinfo=zone)


def _window(start: datetime, end: datetime, description: str) -> TimeWindow:
    return TimeWindow(
        start=format_timestamp(start),
        end=format_timestamp(end),
        description=description,
    )


def resolve_relative_range(
    expression: str,
    timezone: Optional[str] = "UTC",
    now: Optional[datetime] = None,
) -> TimeWindow:
    """
    Resolve a relative time expression to a UTC window.

    Supported expressions are "today", "yesterday", "this week",
    "last week" and "last/past N hours|days|weeks". Anything else
    resolves to the 24 hours ending now.

    Args:
        expression: Relative time expression
        timezone: IANA timezone the expression is relative to
        now: Reference time (defaults to the current time)

    Returns:
        TimeWindow with canonical UTC start and end
    """
    zone, local_now = _local_now(timezone, now)
    text = (expression or "").lower().strip()
    today = local_now.date()

    if text == "today":
        return _window(_start_of(today, zone), local_now, "today")

    if text == "yesterday":
        yesterday = today - timedelta(days=1)
        return _window(_start_of(yesterday, zone), _end_of(yesterday, zone), "yesterday")

    if text == "this week":
        sunday = today - timedelta(days=_days_since_sunday(today))
        return _window(_start_of(sunday, zone), local_now, "this week")

    if text == "last week":
        this_sunday = today - timedelta(days=_days_since_sunday(today))
        last_sunday = this_sunday - timedelta(days=7)
        last_saturday = this_sunday - timedelta(days=1)
        return _window(_start_of(last_sunday, zone), _end_of(last_saturday, zone), "last week")

    match = _RELATIVE_SPAN.search(text)
    if match:
        amount = int(match.group(1))
        unit = _SPAN_UNITS[match.group(2)]
        start = local_now - timedelta(**{unit: amount})
        return _window(start, local_now, f"last {amount} {unit}")

    match = _SINGLE_SPAN.search(text)
    if match:
        unit = _SPAN_UNITS[match.group(1)]
        start = local_now - timedelta(**{unit: 1})
        return _window(start, local_now, f"last 1 {unit}")

    return _window(local_now - timedelta(hours=24), local_now, "last 24 hours")


def find_time_expression(text: str) -> Optional[str]:
    """
    Find time-range language inside a free-form request.

    Args:
        text: User request

    Returns:
        Normalized expression understood by resolve_relative_range, or None
    """
    lowered = (text or "").lower()

    if re.search(r"\byesterday\b", lowered):
        return "yesterday"
    if re.search(r"\blast week\b", lowered):
        return "last week"
    if re.search(r"\bthis week\b", lowered):
        return "this week"

    match = _RELATIVE_SPAN.search(lowered)
    if match:
        return f"last {match.group(1)} {_SPAN_UNITS[match.group(2)]}"
    match = _SINGLE_SPAN.search(lowered)
    if match:
        return f"last 1 {_SPAN_UNITS[match.group(1)]}"

    if re.search(r"\b(today|this morning|this afternoon|earlier today)\b", lowered):
        return "today"
    return None


def resolve_request_window(
    text: str,
    timezone: Optional[str] = "UTC",
    now: Optional[datetime] = None,
) -> Optional[TimeWindow]:
    """Resolve the time language found in a request, if there is any."""
    expression = find_time_expression(text)
    if expression is None:
        return None
    return resolve_relative_range(expression, timezone, now)


def parse_deadline(
    expression: Optional[str],
    timezone: Optional[str] = "UTC",
    now: Optional[datetime] = None,
) -> Optional[str]:
    """
    Parse a natural-language deadline into an end-of-day UTC timestamp.

    Recognized forms, checked in order: "tomorrow"/"next day";
    "end of week"/"this friday"/"friday"; "next week"/"monday";
    "end of month"; numeric M/D or M-D with an optional 2 or 4 digit year.

    Args:
        expression: Deadline text from the user
        timezone: IANA timezone the deadline is relative to
        now: Reference time (defaults to the current time)

    Returns:
        Canonical UTC timestamp at 23:59:59.999 local time, or None if unrecognized
    """
    if not expression:
        return None

    zone, local_now = _local_now(timezone, now)
    text = expression.lower().strip()
    today = local_now.date()
    weekday = _days_since_sunday(today)

    target: Optional[date] = None
    if "tomorrow" in text or "next day" in text:
        target = today + timedelta(days=1)
    elif "end of week" in text or "this friday" in text or "friday" in text:
        target = today + timedelta(days=(5 - weekday + 7) % 7 or 7)
    elif "next week" in text or "monday" in text:
        target = today + timedelta(days=(8 - weekday) % 7 or 7)
    elif "end of month" in text:
        last_day = calendar.monthrange(today.year, today.month)[1]
        target = today.replace(day=last_day)
    else:
        match = _NUMERIC_DATE.search(text)
        if match:
            month, day = int(match.group(1)), int(match.group(2))
            year = today.year
            if match.group(3):
                year = int(match.group(3))
                if year < 100:
                    year += 2000
            try:
                target = date(year, month, day)
            except ValueError:
                logger.debug(f"Ignoring impossible date in deadline '{expression}'")
                return None

    if target is None:
        return None
    return format_timestamp(_end_of(target, zone))
