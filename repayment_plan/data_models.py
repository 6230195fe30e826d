"""Data models for the repayment plan generator.

This module defines dataclasses for the entities that flow through a single
plan request: the raw payload as received, the validated loan request, the
day-count convention used for interest accrual and the individual entries of
the resulting schedule. All of them are transient and built per request.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, List


class MalformedPayloadError(ValueError):
    """Raised when a request body is not a JSON object of the expected shape."""


@dataclass
class LoanPayload:
    """The four loan inputs exactly as the caller sent them.

    Missing or ``null`` members take their zero value (an empty string or
    ``0``) so that the validator can report them as missing.
    """

    loan_amount: str = ""
    nominal_rate: str = ""
    duration: int = 0
    start_date: str = ""

    @classmethod
    def from_json(cls, obj: Any) -> "LoanPayload":
        """Build a payload from a decoded JSON document.

        Raises
        ------
        MalformedPayloadError
            If ``obj`` is not an object, or one of its members has the wrong
            JSON type (e.g. a number for ``loanAmount`` or a string for
            ``duration``).
        """
        if not isinstance(obj, dict):
            raise MalformedPayloadError("request body must be a JSON object")

        def string_member(key: str) -> str:
            value = obj.get(key)
            if value is None:
                return ""
            if not isinstance(value, str):
                raise MalformedPayloadError(f"{key} must be a string")
            return value

        duration = obj.get("duration")
        if duration is None:
            duration = 0
        elif isinstance(duration, bool) or not isinstance(duration, int):
            raise MalformedPayloadError("duration must be an integer")

        return cls(
            loan_amount=string_member("loanAmount"),
            nominal_rate=string_member("nominalRate"),
            duration=duration,
            start_date=string_member("startDate"),
        )


@dataclass
class LoanRequest:
    """A validated loan request.

    Attributes
    ----------
    loan_amount: Decimal
        The principal borrowed.
    nominal_rate: Decimal
        Nominal annual interest rate in percentage points (``5`` means 5 %).
    duration: int
        Number of monthly periods.
    start_date: date
        Date of the first period. Any time-of-day component of the submitted
        timestamp has already been discarded.
    """

    loan_amount: Decimal
    nominal_rate: Decimal
    duration: int
    start_date: date


@dataclass(frozen=True)
class DayCountConvention:
    """Day-count constants used for interest accrual.

    Interest for a period is ``annual_rate * days_in_month * balance /
    days_in_year`` while the annuity uses ``annual_rate / months_in_year``.
    These values are never derived from the calendar dates of the schedule.
    """

    days_in_month: int
    days_in_year: int
    months_in_year: int


THIRTY_360 = DayCountConvention(days_in_month=30, days_in_year=360, months_in_year=12)


@dataclass(frozen=True)
class RepaymentEntry:
    """One month of the repayment plan.

    All money values are rounded to cents. ``remaining_outstanding_principal``
    always equals ``initial_outstanding_principal - principal``.
    """

    date: date
    initial_outstanding_principal: Decimal
    interest: Decimal
    borrower_payment_amount: Decimal
    principal: Decimal
    remaining_outstanding_principal: Decimal


RepaymentSchedule = List[RepaymentEntry]
