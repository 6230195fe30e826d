"""Output helpers for the repayment plan generator.

This module renders repayment plans either as a simple tab-separated table for
the terminal or as JSON-ready dictionaries using the field names of the HTTP
API. Money values are emitted as floats in the JSON form; they are already
rounded to cents.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

from .data_models import RepaymentEntry
from .utils import format_rfc3339

PLAN_KEY = "RepaymentPlan"


def serialize_entry(entry: RepaymentEntry) -> Dict[str, Any]:
    return {
        "borrowerPaymentAmount": float(entry.borrower_payment_amount),
        "date": format_rfc3339(entry.date),
        "initialOutstandingPrincipal": float(entry.initial_outstanding_principal),
        "interest": float(entry.interest),
        "principal": float(entry.principal),
        "remainingOutstandingPrincipal": float(entry.remaining_outstanding_principal),
    }


def serialize_plan(schedule: Iterable[RepaymentEntry]) -> Dict[str, List[Dict[str, Any]]]:
    """Wrap the serialized entries under the ``RepaymentPlan`` key."""
    return {PLAN_KEY: [serialize_entry(entry) for entry in schedule]}


def print_schedule(schedule: Iterable[RepaymentEntry]) -> None:
    """Print the repayment plan as a simple table."""
    headers = [
        "Period",
        "Date",
        "InitialPrincipal",
        "Payment",
        "Interest",
        "Principal",
        "RemainingPrincipal",
    ]
    print("\t".join(headers))
    for period, entry in enumerate(schedule, start=1):
        row = [
            str(period),
            entry.date.isoformat(),
            f"{entry.initial_outstanding_principal:.2f}",
            f"{entry.borrower_payment_amount:.2f}",
            f"{entry.interest:.2f}",
            f"{entry.principal:.2f}",
            f"{entry.remaining_outstanding_principal:.2f}",
        ]
        print("\t".join(row))
