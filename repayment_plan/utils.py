"""Utility functions for the repayment plan generator.

This module provides helpers for parsing user input into Python data types,
for rounding money to cents and for handling dates, including adding months
and reading/writing RFC 3339 timestamps. It uses Python's ``datetime`` and
``calendar`` modules for the calendar arithmetic.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, getcontext

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

CENT = Decimal("0.01")
_FRACTION = re.compile(r"(?<=:\d\d)\.(\d+)")


def round_money(value: Decimal) -> Decimal:
    """Round a money value to cents, halves away from zero."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    The function strips surrounding whitespace and any thousands commas. It
    raises ``ValueError`` if conversion fails or the value is not finite
    (``NaN`` and ``Infinity`` are rejected).
    """
    try:
        cleaned = value.strip().replace(",", "")
        result = Decimal(cleaned)
    except InvalidOperation as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid numeric value: {value}")
    return result


def parse_rfc3339(value: str) -> datetime:
    """Parse an RFC 3339 timestamp such as ``2018-01-01T00:00:01Z``.

    Parameters
    ----------
    value: str
        A date-time string with a ``T`` separator and either ``Z`` or a
        numeric UTC offset.

    Returns
    -------
    datetime
        A timezone-aware datetime in the offset given by the string.

    Raises
    ------
    ValueError
        If the string is not a complete RFC 3339 timestamp.
    """
    text = value.strip()
    if len(text) < 20 or text[10] not in "Tt":
        raise ValueError(f"Invalid RFC 3339 timestamp: {value}")
    if text[-1] in "Zz":
        text = text[:-1] + "+00:00"
    # fromisoformat only takes 3 or 6 fractional digits before Python 3.11.
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValueError(f"Invalid RFC 3339 timestamp: {value}") from exc
    if parsed.tzinfo is None:
        raise ValueError(f"RFC 3339 timestamp has no UTC offset: {value}")
    return parsed


def format_rfc3339(dt: date) -> str:
    """Format a calendar date as midnight UTC, e.g. ``2018-01-01T00:00:00Z``."""
    return f"{dt.isoformat()}T00:00:00Z"


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)
