"""
Tests for the command-line interface.
"""
import csv
import json

from click.testing import CliRunner

from repayment_plan.main import cli
from repayment_plan_web.app import serve

REFERENCE_ARGS = [
    "schedule",
    "--loan-amount",
    "1000",
    "--nominal-rate",
    "5.0",
    "--duration",
    "4",
    "--start-date",
    "2018-01-01T00:00:01Z",
]


def test_schedule_prints_table():
    """The schedule command prints one row per period."""
    result = CliRunner().invoke(cli, REFERENCE_ARGS)

    assert result.exit_code == 0, result.output
    lines = result.output.strip().splitlines()
    assert lines[0].startswith("Period\tDate")
    assert len(lines) == 5
    assert lines[1].split("\t") == ["1", "2018-01-01", "1000.00", "252.61", "4.17", "248.44", "751.56"]
    assert lines[4].split("\t")[-1] == "0.00"


def test_schedule_reports_all_validation_errors():
    """Every invalid option is listed in the usage error."""
    result = CliRunner().invoke(cli, ["schedule", "--loan-amount", "abc"])

    assert result.exit_code == 2
    assert "LoanAmount: Could not convert loanAmount" in result.output
    assert "NominalRate: Required Field Missing" in result.output
    assert "Duration: Required Field Missing" in result.output
    assert "StartDate: Required Field Missing" in result.output


def test_schedule_exports_json(tmp_path):
    """JSON export uses the same shape as the HTTP API."""
    path = tmp_path / "plan.json"
    result = CliRunner().invoke(cli, REFERENCE_ARGS + ["--output", str(path)])

    assert result.exit_code == 0, result.output
    data = json.loads(path.read_text(encoding="utf-8"))
    assert len(data["RepaymentPlan"]) == 4
    assert data["RepaymentPlan"][1]["date"] == "2018-02-01T00:00:00Z"
    assert data["RepaymentPlan"][1]["interest"] == 3.13


def test_schedule_exports_csv(tmp_path):
    """CSV export writes a header and one row per period."""
    path = tmp_path / "plan.csv"
    result = CliRunner().invoke(cli, REFERENCE_ARGS + ["--output", str(path)])

    assert result.exit_code == 0, result.output
    with path.open(newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0][0] == "Period"
    assert len(rows) == 5
    assert rows[3][5] == "250.52"


def test_schedule_rejects_unknown_export_format(tmp_path):
    """Only .json and .csv exports are supported."""
    result = CliRunner().invoke(cli, REFERENCE_ARGS + ["--output", str(tmp_path / "plan.xlsx")])

    assert result.exit_code == 2
    assert "Unsupported output format" in result.output


def test_serve_rejects_bad_listen_address():
    """The server refuses to start on an unparsable address."""
    result = CliRunner().invoke(serve, ["--http.addr", "nonsense"])

    assert result.exit_code == 2
    assert "Listen address must be [host]:port" in result.output
