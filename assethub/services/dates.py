"""
Date helpers for cost and report calculations.
Handles lenient date parsing, report-month boundaries and calendar-month arithmetic.
"""
import calendar
from datetime import date, datetime
from typing import Optional, Tuple
import pytz


def parse_date(value) -> Optional[date]:
    """
    Coerce a stored date value to a date.

    Args:
        value: date, datetime, ISO string ("2024-03-15" or "2024-03-15T09:00:00Z") or None

    Returns:
        The calendar date, or None when the value is missing or unparseable
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def first_day_of(year: int, month: int) -> date:
    return date(year, month, 1)


def last_day_of(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def month_window(year: int, month: int) -> Tuple[date, date]:
    """Inclusive [first day, last day] of a report month."""
    return first_day_of(year, month), last_day_of(year, month)


def previous_month(year: int, month: int) -> Tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1


def months_between(start: date, year: int, month: int) -> int:
    """Whole calendar months from start's month to (year, month); negative when before start."""
    return (year - start.year) * 12 + (month - start.month)


def elapsed_contract_months(start: date, end: date) -> int:
    """
    Billable months of a closed contract.

    The end month counts as a full month when the contract ran at least to
    the same day-of-month it started. Never less than one month.

    Args:
        start: Contract start date
        end: Return date

    Returns:
        Number of billable months (>= 1)
    """
    diff = months_between(start, end.year, end.month)
    if end.day >= start.day:
        diff += 1
    return max(1, diff)


def is_valid_month(year: int, month: int) -> bool:
    return 1 <= month <= 12 and date.min.year <= year <= date.max.year


def _zone(timezone_str: str):
    try:
        return pytz.timezone(timezone_str)
    except pytz.UnknownTimeZoneError:
        return pytz.UTC


def current_year_month(timezone_str: str) -> Tuple[int, int]:
    """Current (year, month) in the given timezone, falling back to UTC."""
    now = datetime.now(_zone(timezone_str))
    return now.year, now.month


def today_in(timezone_str: str) -> date:
    """Today's date in the given timezone, falling back to UTC."""
    return datetime.now(_zone(timezone_str)).date()
