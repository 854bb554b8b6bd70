"""
Datetime utilities for consistent date handling across the application.

Clinic staff record dates in Guatemala local time (UTC-6, no daylight saving),
so every server-generated timestamp uses that offset.
"""

import logging
from datetime import datetime, timezone, timedelta, date
from typing import Optional

logger = logging.getLogger(__name__)

# Guatemala timezone constant (UTC-6)
GUATEMALA_TZ = timezone(timedelta(hours=-6))


def guatemala_now() -> datetime:
    """
    Get current Guatemala datetime (UTC-6).

    Returns:
        Current datetime with Guatemala timezone
    """
    return datetime.now(GUATEMALA_TZ)


def guatemala_today() -> date:
    """Get the current calendar date in Guatemala."""
    return guatemala_now().date()


def strip_time_component(value: str) -> str:
    """
    Drop the time part of an ISO-8601 string.

    "2000-06-15T00:00:00.000Z" becomes "2000-06-15"; plain dates are returned
    trimmed but otherwise untouched.
    """
    value = value.strip()
    if "T" in value:
        return value.split("T", 1)[0]
    return value


def parse_date_string(date_str: str) -> date:
    """
    Parse a date string in YYYY-MM-DD or YYYY/MM/DD format.

    A trailing time component (ISO-8601 "T...") is discarded first, and
    single-digit months/days are normalized.

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    if not date_str or not date_str.strip():
        raise ValueError("Date string cannot be empty")

    date_str = strip_time_component(date_str)

    if '/' in date_str:
        parts = date_str.split('/')
    elif '-' in date_str:
        parts = date_str.split('-')
    else:
        raise ValueError(f"Invalid date format (expected YYYY-MM-DD or YYYY/MM/DD): {date_str}")

    if len(parts) != 3:
        raise ValueError(f"Invalid date format (expected YYYY-MM-DD or YYYY/MM/DD): {date_str}")

    normalized = f"{parts[0].zfill(4)}-{parts[1].zfill(2)}-{parts[2].zfill(2)}"

    try:
        return datetime.strptime(normalized, '%Y-%m-%d').date()
    except ValueError as e:
        raise ValueError(f"Invalid date format (expected YYYY-MM-DD or YYYY/MM/DD): {date_str}") from e


def parse_datetime_string(dt_str: str) -> datetime:
    """
    Parse an ISO-8601 date or datetime string.

    Date-only values become midnight. A trailing "Z" is accepted as UTC.

    Raises:
        ValueError: If the string is not ISO-8601
    """
    if not dt_str or not dt_str.strip():
        raise ValueError("Datetime string cannot be empty")

    value = dt_str.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise ValueError(f"Invalid datetime format (expected ISO-8601): {dt_str}") from e


def calculate_age(birth_date: date, today: Optional[date] = None) -> int:
    """
    Age in whole years on `today` (defaults to the current Guatemala date).

    One year is subtracted when the birthday has not yet happened this year.
    """
    today = today or guatemala_today()
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def age_from_birth_date_string(value: Optional[str], today: Optional[date] = None) -> int:
    """
    Age for a user-supplied birth date string.

    An unparseable or empty value yields 0 instead of raising.
    """
    if not value:
        return 0
    try:
        return calculate_age(parse_date_string(value), today)
    except ValueError:
        logger.warning(f"Invalid birth date {value!r}, using age 0")
        return 0
