"""Command-line interface for the repayment plan generator.

This module uses the ``click`` library to compute a repayment plan from the
terminal. Inputs go through the same validator as the HTTP API, so every
problem with them is reported at once. Results can be printed to the terminal
or exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import List, Optional

import click

from .data_models import LoanPayload, RepaymentEntry
from .engine import compute_plan
from .formatter import print_schedule, serialize_plan
from .utils import format_rfc3339
from .validation import LoanValidationError, build_request


def export_to_json(path: Path, schedule: List[RepaymentEntry]) -> None:
    """Export the plan to a JSON file in the same shape the HTTP API returns."""
    with path.open("w", encoding="utf-8") as f:
        json.dump(serialize_plan(schedule), f, indent=2)


def export_to_csv(path: Path, schedule: List[RepaymentEntry]) -> None:
    """Export the plan to a CSV file."""
    header = [
        "Period",
        "Date",
        "Initial_Outstanding_Principal",
        "Interest",
        "Borrower_Payment_Amount",
        "Principal",
        "Remaining_Outstanding_Principal",
    ]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for period, e in enumerate(schedule, start=1):
            writer.writerow(
                [
                    period,
                    format_rfc3339(e.date),
                    f"{e.initial_outstanding_principal:.2f}",
                    f"{e.interest:.2f}",
                    f"{e.borrower_payment_amount:.2f}",
                    f"{e.principal:.2f}",
                    f"{e.remaining_outstanding_principal:.2f}",
                ]
            )


@click.group()
def cli() -> None:
    """Generate monthly repayment plans for fixed-rate annuity loans."""
    pass


@cli.command()
@click.option("--loan-amount", "-a", "loan_amount", default="", help="Loan amount")
@click.option("--nominal-rate", "-r", "nominal_rate", default="", help="Nominal annual interest rate (percent)")
@click.option("--duration", "-d", "duration", default=0, type=int, help="Loan duration in months")
@click.option("--start-date", "-s", "start_date", default="", help="First period as an RFC 3339 timestamp")
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(
    loan_amount: str,
    nominal_rate: str,
    duration: int,
    start_date: str,
    output: Optional[str],
) -> None:
    """Compute and print the repayment plan."""
    payload = LoanPayload(
        loan_amount=loan_amount,
        nominal_rate=nominal_rate,
        duration=duration,
        start_date=start_date,
    )
    try:
        request = build_request(payload)
    except LoanValidationError as exc:
        lines = [f"{field}: {reason}" for field, reasons in exc.errors.items() for reason in reasons]
        raise click.UsageError("Invalid loan request:\n  " + "\n  ".join(lines))
    try:
        plan = compute_plan(request)
    except ArithmeticError as exc:
        raise click.UsageError(f"Could not compute a repayment plan for the given inputs: {exc}")

    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, plan)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, plan)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
        click.echo(f"Repayment plan exported to {path}")
    else:
        print_schedule(plan)


if __name__ == "__main__":
    cli()
