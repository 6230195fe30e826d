"""HTTP API for the repayment plan generator.

The Flask application exposes a single JSON endpoint, ``POST /generate-plan``.
The request body is decoded into a :class:`LoanPayload`, validated, and the
resulting plan is returned under the ``RepaymentPlan`` key. Validation
failures are reported together under ``Validation Errors``; a body that is not
a JSON object of the expected shape is rejected with a plain-text 400.

Run the server with ``repayment-plan-server --http.addr :8080``.
"""

from __future__ import annotations

import logging
from typing import Tuple

import click
from flask import Flask, jsonify, request

from repayment_plan.data_models import LoanPayload, MalformedPayloadError
from repayment_plan.engine import generate_plan
from repayment_plan.formatter import serialize_plan
from repayment_plan.validation import validate

logger = logging.getLogger(__name__)

ENDPOINT = "/generate-plan"
DEFAULT_LISTEN_ADDRESS = ":8080"
TEXT_PLAIN = {"Content-Type": "text/plain; charset=utf-8"}

app = Flask(__name__)


def parse_listen_address(address: str) -> Tuple[str, int]:
    """Split a ``[host]:port`` listen address into host and port.

    An empty host (``":8080"``) listens on all interfaces. IPv6 hosts are
    written in brackets, e.g. ``"[::1]:8080"``.
    """
    host, sep, port_text = address.rpartition(":")
    if not sep:
        raise ValueError(f"Listen address must be [host]:port; got {address!r}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    try:
        port = int(port_text)
    except ValueError as exc:
        raise ValueError(f"Invalid port in listen address {address!r}") from exc
    if not 0 <= port <= 65535:
        raise ValueError(f"Port out of range in listen address {address!r}")
    return host or "0.0.0.0", port


@app.post(ENDPOINT)
def generate_plan_handler():
    body = request.get_json(force=True, silent=True)
    try:
        payload = LoanPayload.from_json(body)
    except MalformedPayloadError as exc:
        logger.info("Malformed plan request: %s", exc)
        return "Could not unmarshal the request to JSON\n", 400, TEXT_PLAIN

    loan_amount, nominal_rate, start_date, errors = validate(payload)
    if errors:
        logger.info("Validation errors: %s", errors)
        return jsonify({"Validation Errors": errors}), 400

    try:
        plan = generate_plan(loan_amount, nominal_rate, start_date, payload.duration)
    except ArithmeticError as exc:
        logger.info("Could not compute plan for %r: %s", payload, exc)
        return "Could not compute a repayment plan for the given inputs\n", 400, TEXT_PLAIN

    try:
        return jsonify(serialize_plan(plan))
    except (TypeError, ValueError):
        logger.exception("Could not serialize repayment plan")
        return "Could not marshal the response json\n", 500, TEXT_PLAIN


@click.command()
@click.option(
    "--http.addr",
    "--http-addr",
    "http_addr",
    default=DEFAULT_LISTEN_ADDRESS,
    show_default=True,
    help="HTTP listen address",
)
def serve(http_addr: str) -> None:
    """Serve the repayment plan API."""
    try:
        host, port = parse_listen_address(http_addr)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="'--http.addr'")
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.info("Serving repayment plans on %s:%d%s", host, port, ENDPOINT)
    app.run(host=host, port=port, threaded=True)


if __name__ == "__main__":
    serve()
