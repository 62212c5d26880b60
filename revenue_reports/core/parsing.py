"""
Value normalization helpers shared by the models and services.

Dates coming out of the estimating tool's exports are calendar dates with no
meaningful time of day. Converting them through a timezone-aware datetime can
shift a date like ``2025-01-01`` into the previous year, so every date is
normalized to a ``YYYY-MM-DD`` string and years/months are read from the
string itself.

Accepted date inputs:
- ``datetime.date`` / ``datetime.datetime`` (the date part is taken as-is)
- strings starting with ``YYYY-MM-DD`` (ISO timestamps included)
- ``MM/DD/YYYY`` strings

Anything else normalizes to ``None``.
"""

import math
import re
from datetime import date, datetime
from typing import Any, Optional


_ISO_DATE_RE = re.compile(r'^(\d{4})-(\d{2})-(\d{2})')
_US_DATE_RE = re.compile(r'^(\d{1,2})/(\d{1,2})/(\d{4})$')
_AMOUNT_STRIP_RE = re.compile(r'[$,\s]')


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def _format_ymd(year: int, month: int, day: int) -> Optional[str]:
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def normalize_date_string(value: Any) -> Optional[str]:
    """
    Normalize a date-like value to a ``YYYY-MM-DD`` string.

    Args:
        value: A date, datetime, or date string in a supported format.

    Returns:
        The normalized string, or None if the value is empty or unparseable.

    Example:
        >>> normalize_date_string('2025-03-01T00:00:00Z')
        '2025-03-01'
        >>> normalize_date_string('3/1/2025')
        '2025-03-01'
    """
    if _is_missing(value):
        return None

    # datetime is a subclass of date, so check it first
    if isinstance(value, datetime):
        return _format_ymd(value.year, value.month, value.day)
    if isinstance(value, date):
        return value.isoformat()

    text = str(value).strip()

    iso_match = _ISO_DATE_RE.match(text)
    if iso_match:
        year, month, day = (int(part) for part in iso_match.groups())
        return _format_ymd(year, month, day)

    us_match = _US_DATE_RE.match(text)
    if us_match:
        month, day, year = (int(part) for part in us_match.groups())
        return _format_ymd(year, month, day)

    return None


def year_from_date_string(value: Optional[str]) -> Optional[int]:
    """Read the calendar year from the first four characters of a date string."""
    if not value or len(value) < 4 or not value[:4].isdigit():
        return None
    return int(value[:4])


def month_from_date_string(value: Optional[str]) -> Optional[int]:
    """Read the month (1-12) from characters 6-7 of a ``YYYY-MM-DD`` string."""
    if not value or len(value) < 7 or not value[5:7].isdigit():
        return None
    month = int(value[5:7])
    if 1 <= month <= 12:
        return month
    return None


def parse_date_string(value: Optional[str]) -> Optional[date]:
    """
    Convert a normalized date string into a ``date`` for month arithmetic.

    Returns:
        The date, or None if the string is not a valid ``YYYY-MM-DD`` prefix.
    """
    normalized = normalize_date_string(value)
    if normalized is None:
        return None
    return date.fromisoformat(normalized)


def parse_amount(value: Any) -> Optional[float]:
    """
    Parse a monetary amount from a number or a currency string.

    Args:
        value: A number or a string such as ``"$1,250.00"``.

    Returns:
        The amount as a float, or None if missing or unparseable.
    """
    if _is_missing(value):
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        amount = float(value)
    else:
        try:
            amount = float(_AMOUNT_STRIP_RE.sub('', str(value)))
        except ValueError:
            return None
    if math.isnan(amount) or math.isinf(amount):
        return None
    return amount


__all__ = [
    'normalize_date_string',
    'year_from_date_string',
    'month_from_date_string',
    'parse_date_string',
    'parse_amount',
]
