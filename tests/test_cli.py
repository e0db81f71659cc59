# ruff: noqa: I001
from __future__ import annotations

import io
from pathlib import Path

import pytest
from typer.testing import CliRunner

from atlas_db.client import session_scope
from atlas_finance.cli import app, cmd_import_csv, cmd_summary
from atlas_finance.export import CSV_HEADER, TEMPLATE_FILENAME
from atlas_finance.ingest import ImportVariant
from atlas_finance.logging_setup import configure_logging
from atlas_finance.persistence import load_transactions

from tests.helpers.db import bootstrap_sqlite_db, count_rows

runner = CliRunner()


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    return bootstrap_sqlite_db(tmp_path / "cli.sqlite3")


def _write(tmp_path: Path, name: str, text: str) -> Path:
    p = tmp_path / name
    p.write_text(text, encoding="utf-8")
    return p


def test_import_reports_count(sample_csv: Path):
    result = runner.invoke(app, ["import-csv", "--csv-path", str(sample_csv), "--variant", "ledger"])

    assert result.exit_code == 0, result.output
    assert "5 row(s) imported" in result.output
    assert "warning" not in result.output


def test_import_header_only_is_rejected(tmp_path: Path):
    p = _write(tmp_path, "empty.csv", "date,description,amount\n")

    result = runner.invoke(app, ["import-csv", "--csv-path", str(p)])

    assert result.exit_code == 1
    assert "Error: CSV must have a header and at least one row" in result.output


def test_import_missing_file(tmp_path: Path):
    result = runner.invoke(app, ["import-csv", "--csv-path", str(tmp_path / "nope.csv")])
    assert result.exit_code == 1
    assert "File not found" in result.output


def test_import_show_warnings_lists_defaulted_fields(tmp_path: Path):
    p = _write(tmp_path, "bad.csv", "date,description,amount\n,Coffee,abc\n")

    result = runner.invoke(app, ["import-csv", "--csv-path", str(p), "--show-warnings"])

    assert result.exit_code == 0, result.output
    assert "1 row(s) imported" in result.output
    assert "line 2: date blank_date" in result.output
    assert "line 2: amount unparsable_amount 'abc'" in result.output


def test_import_unknown_variant_exits_2(sample_csv: Path):
    result = runner.invoke(app, ["import-csv", "--csv-path", str(sample_csv), "--variant", "xlsx"])
    assert result.exit_code == 2
    assert "unknown import variant" in result.output


def test_import_persist_then_summary_and_delete_from_db(sample_csv: Path, db_url: str):
    result = runner.invoke(
        app,
        [
            "import-csv",
            "--csv-path",
            str(sample_csv),
            "--variant",
            "ledger",
            "--persist",
            "--database-url",
            db_url,
        ],
    )
    assert result.exit_code == 0, result.output
    assert count_rows(db_url) == 5

    summary = runner.invoke(app, ["summary", "--database-url", db_url])
    assert summary.exit_code == 0, summary.output
    assert "Income:   3500.00" in summary.output
    assert "Runway:   2.8 mo" in summary.output

    with session_scope(database_url=db_url) as s:
        first_id = load_transactions(s)[0].id
    deleted = runner.invoke(app, ["delete", "--id", first_id, "--database-url", db_url])
    assert deleted.exit_code == 0, deleted.output
    assert count_rows(db_url) == 4

    again = runner.invoke(app, ["delete", "--id", first_id, "--database-url", db_url])
    assert again.exit_code == 1
    assert "no transaction with id" in again.output


def test_summary_without_source_reports_missing_database_url():
    result = runner.invoke(app, ["summary"])
    assert result.exit_code == 1
    assert "DATABASE_URL is not set" in result.output


def test_summary_runway_basis_from_env(sample_csv: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("AF_RUNWAY_BASIS", "monthly_average")
    monkeypatch.setenv("AF_IMPORT_VARIANT", "ledger")

    result = runner.invoke(app, ["summary", "--csv-path", str(sample_csv)])

    assert result.exit_code == 0, result.output
    assert "Runway:   5.6 mo" in result.output
    assert "02/25" in result.output


def test_summary_reads_env_from_dotenv(sample_csv: Path):
    Path(".env").write_text("AF_RUNWAY_BASIS=monthly_average\n", encoding="utf-8")

    result = runner.invoke(
        app, ["summary", "--csv-path", str(sample_csv), "--variant", "ledger"]
    )

    assert result.exit_code == 0, result.output
    assert "Runway:   5.6 mo" in result.output


def test_export_to_stdout_and_reimport(sample_csv: Path, tmp_path: Path):
    result = runner.invoke(
        app, ["export-csv", "--csv-path", str(sample_csv), "--variant", "ledger", "-o", "-"]
    )

    assert result.exit_code == 0, result.output
    lines = result.output.strip().split("\n")
    assert lines[0] == CSV_HEADER
    assert lines[1] == '2025-01-03,"Website build",2000,income,Services,Acme Corp'

    exported = _write(tmp_path, "exported.csv", result.output)
    assert cmd_import_csv(str(exported)) == 0


def test_export_default_filename(sample_csv: Path):
    result = runner.invoke(app, ["export-csv", "--csv-path", str(sample_csv), "--variant", "ledger"])

    assert result.exit_code == 0, result.output
    written = list(Path.cwd().glob("finance-transactions-*.csv"))
    assert len(written) == 1
    assert written[0].read_text(encoding="utf-8").startswith(CSV_HEADER + "\n")


def test_template_writes_default_file():
    result = runner.invoke(app, ["template"])

    assert result.exit_code == 0, result.output
    text = (Path.cwd() / TEMPLATE_FILENAME).read_text(encoding="utf-8")
    assert text.split("\n")[0] == CSV_HEADER


def test_profitability_and_anomalies(sample_csv: Path):
    prof = runner.invoke(
        app, ["profitability", "--csv-path", str(sample_csv), "--variant", "ledger"]
    )
    assert prof.exit_code == 0, prof.output
    assert prof.output.strip().split("\n") == [
        "Acme Corp\t1974.50",
        "Globex\t1500.00",
        "Uncategorized\t-899.00",
    ]

    none = runner.invoke(app, ["anomalies", "--csv-path", str(sample_csv), "--variant", "ledger"])
    assert "No significant anomalies detected." in none.output

    some = runner.invoke(
        app,
        ["anomalies", "--csv-path", str(sample_csv), "--variant", "ledger", "--factor", "2"],
    )
    assert some.output.strip() == "Website build: 2000.00 (unusual size)"


def test_cmd_summary_direct_call(sample_csv: Path, capsys: pytest.CaptureFixture[str]):
    rc = cmd_summary(csv_path=str(sample_csv), variant=ImportVariant.LEDGER)

    assert rc == 0
    out = capsys.readouterr().out
    assert "Balance:  2575.50" in out


def test_default_import_logs_row_count_without_fallback_details(tmp_path: Path):
    p = _write(tmp_path, "bad.csv", "date,description,amount\n,Coffee,abc\n")
    buf = io.StringIO()
    configure_logging(stream=buf)

    result = runner.invoke(app, ["import-csv", "--csv-path", str(p)])

    assert result.exit_code == 0, result.output
    assert result.output.strip() == "1 row(s) imported"
    logged = buf.getvalue()
    assert "parsed 1 row(s)" in logged
    assert "default" not in logged


def test_debug_logging_lists_defaulted_fields(tmp_path: Path):
    p = _write(tmp_path, "bad.csv", "date,description,amount\n,Coffee,abc\n")
    buf = io.StringIO()
    configure_logging("DEBUG", stream=buf)

    result = runner.invoke(app, ["import-csv", "--csv-path", str(p)])

    assert result.exit_code == 0, result.output
    assert "line 2: defaulted amount (unparsable_amount)" in buf.getvalue()
    assert "2 field(s) defaulted" in buf.getvalue()
