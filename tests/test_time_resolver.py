"""Tests for relative time resolution."""

from datetime import datetime, timezone

import pytest

from collaborator.utils.time_resolver import (
    find_time_expression,
    parse_deadline,
    resolve_relative_range,
    resolve_request_window,
)

from .conftest import FIXED_NOW


def test_yesterday_in_new_york_spans_the_local_day():
    window = resolve_relative_range("yesterday", "America/New_York", FIXED_NOW)
    assert window.start == "2025-01-14T05:00:00.000Z"
    assert window.end == "2025-01-15T04:59:59.999Z"
    assert window.description == "yesterday"


def test_yesterday_during_daylight_saving_time():
    now = datetime(2025, 7, 10, 20, 0, tzinfo=timezone.utc)
    window = resolve_relative_range("yesterday", "America/Los_Angeles", now)
    assert window.start == "2025-07-09T07:00:00.000Z"
    assert window.end == "2025-07-10T06:59:59.999Z"


def test_yesterday_just_after_local_midnight():
    # 00:30 in Tokyo on Jan 16
    now = datetime(2025, 1, 15, 15, 30, tzinfo=timezone.utc)
    window = resolve_relative_range("yesterday", "Asia/Tokyo", now)
    assert window.start == "2025-01-14T15:00:00.000Z"
    assert window.end == "2025-01-15T14:59:59.999Z"


def test_today_runs_from_local_midnight_to_now():
    window = resolve_relative_range("today", "UTC", FIXED_NOW)
    assert window.start == "2025-01-15T00:00:00.000Z"
    assert window.end == "2025-01-15T17:00:00.000Z"


def test_this_week_starts_on_sunday():
    window = resolve_relative_range("this week", "UTC", FIXED_NOW)
    assert window.start == "2025-01-12T00:00:00.000Z"
    assert window.end == "2025-01-15T17:00:00.000Z"


def test_this_week_on_a_sunday_starts_today():
    now = datetime(2025, 1, 12, 10, 0, tzinfo=timezone.utc)
    window = resolve_relative_range("this week", "UTC", now)
    assert window.start == "2025-01-12T00:00:00.000Z"


def test_last_week_is_previous_sunday_to_saturday():
    window = resolve_relative_range("last week", "UTC", FIXED_NOW)
    assert window.start == "2025-01-05T00:00:00.000Z"
    assert window.end == "2025-01-11T23:59:59.999Z"


def test_last_n_days():
    window = resolve_relative_range("last 3 days", "UTC", FIXED_NOW)
    assert window.start == "2025-01-12T17:00:00.000Z"
    assert window.end == "2025-01-15T17:00:00.000Z"
    assert window.description == "last 3 days"


def test_unknown_expression_means_last_24_hours():
    window = resolve_relative_range("whenever", "UTC", FIXED_NOW)
    assert window.start == "2025-01-14T17:00:00.000Z"
    assert window.end == "2025-01-15T17:00:00.000Z"
    assert window.description == "last 24 hours"


def test_invalid_timezone_falls_back_to_utc():
    window = resolve_relative_range("today", "Mars/Olympus_Mons", FIXED_NOW)
    assert window.start == "2025-01-15T00:00:00.000Z"


def test_window_instruction_lists_exact_timestamps():
    instruction = resolve_relative_range("yesterday", "UTC", FIXED_NOW).to_instruction()
    assert "Start: 2025-01-14T00:00:00.000Z" in instruction
    assert "End: 2025-01-14T23:59:59.999Z" in instruction
    assert "Do not recalculate" in instruction


@pytest.mark.parametrize(
    "text,expected",
    [
        ("What did we discuss yesterday?", "yesterday"),
        ("summarize last week please", "last week"),
        ("any decisions this week?", "this week"),
        ("recap the past 2 weeks", "last 2 weeks"),
        ("what happened in the last hour", "last 1 hours"),
        ("anything important this morning?", "today"),
        ("who owns the budget?", None),
    ],
)
def test_find_time_expression(text, expected):
    assert find_time_expression(text) == expected


def test_resolve_request_window_without_time_language():
    assert resolve_request_window("find the budget thread", "UTC", FIXED_NOW) is None


@pytest.mark.parametrize(
    "expression,expected",
    [
        ("tomorrow", "2025-01-16T23:59:59.999Z"),
        ("by the next day", "2025-01-16T23:59:59.999Z"),
        ("end of week", "2025-01-17T23:59:59.999Z"),
        ("friday", "2025-01-17T23:59:59.999Z"),
        ("next week", "2025-01-20T23:59:59.999Z"),
        ("monday", "2025-01-20T23:59:59.999Z"),
        ("end of month", "2025-01-31T23:59:59.999Z"),
        ("3/15", "2025-03-15T23:59:59.999Z"),
        ("3-15", "2025-03-15T23:59:59.999Z"),
        ("12/25/26", "2026-12-25T23:59:59.999Z"),
        ("12/25/2027", "2027-12-25T23:59:59.999Z"),
    ],
)
def test_parse_deadline(expression, expected):
    assert parse_deadline(expression, "UTC", FIXED_NOW) == expected


def test_end_of_week_on_friday_is_next_friday():
    friday = datetime(2025, 1, 17, 12, 0, tzinfo=timezone.utc)
    assert parse_deadline("end of week", "UTC", friday) == "2025-01-24T23:59:59.999Z"


def test_next_week_on_monday_is_next_monday():
    monday = datetime(2025, 1, 20, 12, 0, tzinfo=timezone.utc)
    assert parse_deadline("next week", "UTC", monday) == "2025-01-27T23:59:59.999Z"


def test_deadline_is_end_of_local_day():
    assert parse_deadline("tomorrow", "America/New_York", FIXED_NOW) == "2025-01-17T04:59:59.999Z"


def test_unrecognized_or_impossible_deadlines():
    assert parse_deadline("someday", "UTC", FIXED_NOW) is None
    assert parse_deadline("2/30", "UTC", FIXED_NOW) is None
    assert parse_deadline("", "UTC", FIXED_NOW) is None
