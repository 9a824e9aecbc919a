"""Date and accounting-period parsing utilities."""

import re
from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

_QUARTER_RE = re.compile(r"^(\d{4})-?q([1-4])$")
_MONTH_RE = re.compile(r"^(\d{4})-(\d{1,2})$")
_YEAR_RE = re.compile(r"^(\d{4})$")


def _quarter_start(day: date) -> date:
    return day.replace(month=3 * ((day.month - 1) // 3) + 1, day=1)


def _unit_start(unit: str, day: date) -> Optional[date]:
    """First day of the week/month/quarter/year containing day."""
    if unit == "week":
        return day - timedelta(days=day.weekday())
    if unit == "month":
        return day.replace(day=1)
    if unit == "quarter":
        return _quarter_start(day)
    if unit == "year":
        return day.replace(month=1, day=1)
    return None


def _unit_step(unit: str) -> relativedelta:
    return {
        "week": relativedelta(weeks=1),
        "month": relativedelta(months=1),
        "quarter": relativedelta(months=3),
        "year": relativedelta(years=1),
    }[unit]


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports:
    - Absolute dates: "2024-01-15", "15 Jan 2024", etc.
    - "today", "yesterday", "tomorrow"
    - "last/this/next" + week, month, quarter or year (first day of that period)
    - "last monday" etc.

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    today = date.today()

    fixed = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if text in fixed:
        return fixed[text]

    words = text.split()
    if len(words) == 2 and words[0] in ("last", "this", "next"):
        which, unit = words
        if which == "last" and unit in WEEKDAYS:
            days_ago = (today.weekday() - WEEKDAYS.index(unit)) % 7 or 7
            return today - timedelta(days=days_ago)
        start = _unit_start(unit, today)
        if start is not None:
            if which == "last":
                return start - _unit_step(unit)
            if which == "next":
                return start + _unit_step(unit)
            return start

    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str) -> tuple[date, date]:
    """Get start and end dates for an accounting period.

    Args:
        period: One of this-/last- week, month, quarter or year, or an explicit
            period such as "2024", "2024-03" or "2024-Q2"

    Returns:
        Tuple of (start_date, end_date), both inclusive. Current periods end today.

    Raises:
        ValueError: If period string is not recognized
    """
    text = period.strip().lower()
    today = date.today()

    match = _QUARTER_RE.match(text)
    if match:
        start = date(int(match.group(1)), 3 * (int(match.group(2)) - 1) + 1, 1)
        return start, start + relativedelta(months=3) - timedelta(days=1)

    match = _MONTH_RE.match(text)
    if match and 1 <= int(match.group(2)) <= 12:
        start = date(int(match.group(1)), int(match.group(2)), 1)
        return start, start + relativedelta(months=1) - timedelta(days=1)

    match = _YEAR_RE.match(text)
    if match:
        year = int(match.group(1))
        return date(year, 1, 1), date(year, 12, 31)

    which, _, unit = text.partition("-")
    start = _unit_start(unit, today)
    if start is not None and which == "this":
        return start, today
    if start is not None and which == "last":
        # Last full period: the one ending the day before the current one starts
        return start - _unit_step(unit), start - timedelta(days=1)

    raise ValueError(
        f"Unknown period: '{period}'. Supported periods: this-/last- week, month, quarter, year, "
        "YYYY, YYYY-MM, YYYY-Qn"
    )
