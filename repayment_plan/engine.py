"""Core calculation engine for the repayment plan generator.

This module builds the monthly repayment plan of a fixed-rate annuity loan.
The level installment comes from the standard annuity formula on the monthly
rate, while the interest of each period accrues on a 30/360 basis applied to
the annual rate. Every money value is rounded to cents as soon as it is
computed, and the next period starts from the rounded figures of the previous
one. The last period pays whatever is left so the balance closes at zero.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from itertools import accumulate

from .data_models import THIRTY_360, DayCountConvention, LoanRequest, RepaymentEntry, RepaymentSchedule
from .utils import add_months, round_money

logger = logging.getLogger(__name__)


def _calculate_annuity_payment(principal: Decimal, rate_per_month: Decimal, term: int) -> Decimal:
    """Return the annuity (equal installment) monthly payment for a loan.

    The formula is:

        payment = P * i / (1 - (1 + i)^-n)

    where ``P`` is the principal, ``i`` is the monthly interest rate and
    ``n`` is the number of payments. When the interest rate is zero, the
    payment simplifies to ``P / n``.
    """
    if term <= 0:
        raise ValueError("Term must be positive")
    if rate_per_month == 0:
        return principal / Decimal(term)
    return (principal * rate_per_month) / (1 - (1 + rate_per_month) ** -term)


def _period_interest(balance: Decimal, annual_rate: Decimal, convention: DayCountConvention) -> Decimal:
    return round_money(
        annual_rate * Decimal(convention.days_in_month) * balance / Decimal(convention.days_in_year)
    )


def _first_entry(
    loan_amount: Decimal,
    annual_rate: Decimal,
    annuity: Decimal,
    start_date: date,
    is_last: bool,
    convention: DayCountConvention,
) -> RepaymentEntry:
    initial = round_money(loan_amount)
    interest = _period_interest(initial, annual_rate, convention)
    if is_last:
        payment = round_money(initial + interest)
        principal = initial
    else:
        payment = round_money(annuity)
        principal = round_money(payment - interest)
    return RepaymentEntry(
        date=start_date,
        initial_outstanding_principal=initial,
        interest=interest,
        borrower_payment_amount=payment,
        principal=principal,
        remaining_outstanding_principal=round_money(initial - principal),
    )


def _next_entry(
    previous: RepaymentEntry,
    index: int,
    start_date: date,
    duration: int,
    annual_rate: Decimal,
    convention: DayCountConvention,
) -> RepaymentEntry:
    """Derive the entry of period ``index + 1`` from the previous one.

    ``index`` counts from zero, so the final period has ``index == duration - 1``.
    """
    initial = previous.remaining_outstanding_principal
    interest = _period_interest(initial, annual_rate, convention)

    # The final period pays off the balance instead of the level installment.
    if index == duration - 1:
        payment = round_money(initial + interest)
        principal = initial
    else:
        payment = previous.borrower_payment_amount
        # Guard against interest larger than the outstanding balance.
        if interest > initial:
            principal = round_money(payment - initial)
        else:
            principal = round_money(payment - interest)

    return RepaymentEntry(
        date=add_months(start_date, index),
        initial_outstanding_principal=initial,
        interest=interest,
        borrower_payment_amount=payment,
        principal=principal,
        remaining_outstanding_principal=round_money(initial - principal),
    )


def generate_plan(
    loan_amount: Decimal,
    nominal_rate: Decimal,
    start_date: date,
    duration: int,
    convention: DayCountConvention = THIRTY_360,
) -> RepaymentSchedule:
    """Compute the repayment plan for a loan.

    Parameters
    ----------
    loan_amount: Decimal
        The principal borrowed. Callers are expected to have validated it.
    nominal_rate: Decimal
        Nominal annual interest rate in percentage points.
    start_date: date
        Date of the first period. Following periods fall on the same day of
        each subsequent month, clamped to the end of shorter months.
    duration: int
        Number of monthly periods; must be positive.
    convention: DayCountConvention
        Day-count constants for interest accrual. Defaults to 30/360.

    Returns
    -------
    RepaymentSchedule
        ``duration`` entries in chronological order. The remaining
        outstanding principal of the last entry is zero.

    Raises
    ------
    ValueError
        If ``duration`` is not positive.
    ArithmeticError
        For rates so negative that the annuity formula has no value.
    """
    annual_rate = nominal_rate / Decimal(100)
    rate_per_month = annual_rate / Decimal(convention.months_in_year)
    annuity = _calculate_annuity_payment(loan_amount, rate_per_month, duration)

    first = _first_entry(loan_amount, annual_rate, annuity, start_date, duration == 1, convention)

    def step(previous: RepaymentEntry, index: int) -> RepaymentEntry:
        return _next_entry(previous, index, start_date, duration, annual_rate, convention)

    schedule = list(accumulate(range(1, duration), step, initial=first))

    logger.debug(
        "Generated %d-period plan for %s at %s%% from %s (installment %s)",
        duration,
        loan_amount,
        nominal_rate,
        start_date,
        first.borrower_payment_amount,
    )
    return schedule


def compute_plan(request: LoanRequest, convention: DayCountConvention = THIRTY_360) -> RepaymentSchedule:
    """Compute the repayment plan for a validated :class:`LoanRequest`."""
    return generate_plan(
        request.loan_amount,
        request.nominal_rate,
        request.start_date,
        request.duration,
        convention,
    )
