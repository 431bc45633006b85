"""
Timestamp helpers for GitHub Pulse Overview.

Parses the ISO-8601 strings returned by the GitHub API and renders the
distance between two instants as an English phrase ("3 days",
"about 1 hour") for the "... ago" annotations.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone

from dateutil.relativedelta import relativedelta


MINUTES_IN_DAY = 1440
MINUTES_IN_ALMOST_TWO_DAYS = 2520
MINUTES_IN_MONTH = 43200
MINUTES_IN_TWO_MONTHS = 86400


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_timestamp(value: str | datetime | None) -> datetime | None:
    """
    Parse a timestamp into an aware UTC datetime.

    Supports:
    - ISO datetime with Z suffix: "2024-06-15T12:30:00Z"
    - ISO datetime with offset: "2024-06-15T12:30:00+02:00"
    - ISO date: "2024-06-15" (midnight UTC)

    Returns:
        datetime in UTC, or None if the value is empty or unparseable
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        dt = value
    else:
        try:
            dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except (ValueError, AttributeError):
            return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _calendar_months_between(earlier: datetime, later: datetime) -> int:
    """Whole calendar months from earlier to later."""
    delta = relativedelta(later, earlier)
    return delta.years * 12 + delta.months


def _plural(count: int, unit: str, prefix: str = "") -> str:
    word = unit if count == 1 else f"{unit}s"
    return f"{prefix}{count} {word}"


def format_distance(date: datetime, base: datetime) -> str:
    """
    Describe the distance between two instants in words.

    The order of the arguments does not matter. Examples:
    "less than a minute", "5 minutes", "about 2 hours", "1 day",
    "about 1 month", "over 2 years".
    """
    earlier, later = sorted((date, base))
    seconds = int((later - earlier).total_seconds())
    minutes = _round_half_up(seconds / 60)

    if minutes < 2:
        if minutes == 0:
            return "less than a minute"
        return "1 minute"
    if minutes < 45:
        return _plural(minutes, "minute")
    if minutes < 90:
        return "about 1 hour"
    if minutes < MINUTES_IN_DAY:
        return _plural(_round_half_up(minutes / 60), "hour", prefix="about ")
    if minutes < MINUTES_IN_ALMOST_TWO_DAYS:
        return "1 day"
    if minutes < MINUTES_IN_MONTH:
        return _plural(_round_half_up(minutes / MINUTES_IN_DAY), "day")
    if minutes < MINUTES_IN_TWO_MONTHS:
        return _plural(_round_half_up(minutes / MINUTES_IN_MONTH), "month", prefix="about ")

    months = _calendar_months_between(earlier, later)
    if months < 12:
        return _plural(_round_half_up(minutes / MINUTES_IN_MONTH), "month")

    months_into_year = months % 12
    years = months // 12
    if months_into_year < 3:
        return _plural(years, "year", prefix="about ")
    if months_into_year < 9:
        return _plural(years, "year", prefix="over ")
    return _plural(years + 1, "year", prefix="almost ")
