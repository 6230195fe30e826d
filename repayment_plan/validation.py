"""Input validation for loan requests.

The validator checks every field of a :class:`LoanPayload` in a single pass
and collects all problems it finds, keyed by field name, instead of stopping
at the first one. Callers get back the parsed values together with the error
mapping; an empty mapping means the request is valid.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from .data_models import LoanPayload, LoanRequest
from .utils import decimal_from_str, parse_rfc3339

logger = logging.getLogger(__name__)

ValidationErrors = Dict[str, List[str]]

MISSING = "Required Field Missing"
COMPOUND_FIELD = "LoanAmount, NominalRateCents, Duration"


class LoanValidationError(ValueError):
    """Raised when a loan payload fails validation.

    ``errors`` holds every reason collected for every field.
    """

    def __init__(self, errors: ValidationErrors) -> None:
        super().__init__(
            "; ".join(f"{field}: {', '.join(reasons)}" for field, reasons in errors.items())
        )
        self.errors = errors


def _add(errors: ValidationErrors, field: str, reason: str) -> None:
    errors.setdefault(field, []).append(reason)


def validate(
    payload: LoanPayload,
) -> Tuple[Optional[Decimal], Optional[Decimal], Optional[date], ValidationErrors]:
    """Validate a raw payload.

    Returns
    -------
    loan_amount, nominal_rate, start_date, errors
        The parsed loan amount, nominal rate (percentage points) and start
        date, each ``None`` when missing or unparseable, and the mapping of
        field names to failure reasons.

    Notes
    -----
    Besides the per-field checks, a combined entry is added when the amount
    is not positive, the rate is negative and the duration is not positive
    *at the same time*. A missing or unparseable amount counts as not
    positive and a missing rate as negative; an unparseable rate reads as
    zero and so never satisfies its part. The combined check does not fire for
    any single bad field, so its absence says nothing about the validity of
    an individual field.
    """
    errors: ValidationErrors = {}
    loan_amount: Optional[Decimal] = None
    nominal_rate: Optional[Decimal] = None
    start_date: Optional[date] = None

    if not payload.start_date:
        _add(errors, "StartDate", MISSING)
    else:
        try:
            start_date = parse_rfc3339(payload.start_date).date()
        except ValueError:
            _add(errors, "StartDate", "Could not parse startDate to RFC3339 format")

    if not payload.loan_amount:
        _add(errors, "LoanAmount", MISSING)
    else:
        try:
            loan_amount = decimal_from_str(payload.loan_amount)
        except ValueError:
            _add(errors, "LoanAmount", "Could not convert loanAmount from string to decimal")

    if payload.duration <= 0:
        _add(errors, "Duration", MISSING)

    if not payload.nominal_rate:
        _add(errors, "NominalRate", MISSING)
    else:
        try:
            nominal_rate = decimal_from_str(payload.nominal_rate)
        except ValueError:
            _add(errors, "NominalRate", "Could not convert nominalRate from string to decimal")

    amount_not_positive = loan_amount is None or loan_amount <= 0
    # An unparseable rate reads as zero; only a missing one fails this part.
    if nominal_rate is None:
        rate_negative = not payload.nominal_rate
    else:
        rate_negative = nominal_rate < 0
    if amount_not_positive and rate_negative and payload.duration <= 0:
        _add(errors, COMPOUND_FIELD, "Requests are negative numbers")

    if errors:
        logger.debug("Rejected loan payload %r: %s", payload, errors)
    return loan_amount, nominal_rate, start_date, errors


def build_request(payload: LoanPayload) -> LoanRequest:
    """Validate ``payload`` and return a :class:`LoanRequest`.

    Raises ``LoanValidationError`` carrying every collected reason if the
    payload is invalid.
    """
    loan_amount, nominal_rate, start_date, errors = validate(payload)
    if errors:
        raise LoanValidationError(errors)
    return LoanRequest(
        loan_amount=loan_amount,
        nominal_rate=nominal_rate,
        duration=payload.duration,
        start_date=start_date,
    )
