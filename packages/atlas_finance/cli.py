# ruff: noqa: I001
"""CLI for the ``atlas_finance`` package.

This module exposes callable command handlers (e.g., ``cmd_import_csv``) and
a Typer-based console interface. Environment variables (``DATABASE_URL``,
``AF_RUNWAY_BASIS``, ``AF_IMPORT_VARIANT``, ``ATLAS_FINANCE_LOG_LEVEL``) are
loaded from a local ``.env`` using ``python-dotenv`` before delegating to
command logic. Business logic lives in the library modules; handlers only do
I/O and error reporting.

Transaction sources
-------------------
Read-only commands take either ``--csv-path`` (parse a CSV file) or the
ledger database (``--database-url`` or ``DATABASE_URL``).
"""

from __future__ import annotations

import csv
import os
import sys
from collections.abc import Sequence
from pathlib import Path

import typer
from dotenv import load_dotenv
from sqlalchemy.exc import SQLAlchemyError
from typer.models import OptionInfo

from .aggregate import RunwayBasis, aggregate_by_month, summarize
from .export import TEMPLATE_FILENAME, export_csv, export_filename, template_csv
from .ingest import EmptyOrHeaderOnlyInput, ImportVariant, load_transactions_from_csv
from .insights import (
    DEFAULT_ANOMALY_FACTOR,
    describe_anomaly,
    detect_anomalies,
    profitability_by_client,
    render_runway_report,
)
from .logging_setup import configure_logging, get_logger
from .models import TransactionCreate
from .money import format_cents

_logger = get_logger("atlas_finance.cli")


# ---- Small module-level helpers used by CLI commands -------------------------


def _err(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)


def _resolve_runway_basis(value: str | None) -> RunwayBasis:
    """Option value, else ``AF_RUNWAY_BASIS``, else ``total``."""

    return RunwayBasis.parse(value if value is not None else os.getenv("AF_RUNWAY_BASIS"))


def _resolve_variant(value: str | None) -> ImportVariant:
    """Option value, else ``AF_IMPORT_VARIANT``, else finance-transactions."""

    return ImportVariant.parse(value if value is not None else os.getenv("AF_IMPORT_VARIANT"))


class _SourceError(Exception):
    """A transaction source could not be read; the message is user-facing."""


def _load_source(
    csv_path: str | None,
    *,
    database_url: str | None,
    variant: ImportVariant = ImportVariant.FINANCE_TRANSACTIONS,
) -> list[TransactionCreate]:
    if csv_path is not None:
        try:
            return list(load_transactions_from_csv(csv_path, variant=variant).rows)
        except FileNotFoundError as e:
            raise _SourceError(f"File not found: {csv_path}") from e
        except PermissionError as e:
            raise _SourceError(f"Permission denied: {csv_path}") from e
        except EmptyOrHeaderOnlyInput as e:
            raise _SourceError(str(e)) from e
        except (csv.Error, UnicodeDecodeError) as e:
            raise _SourceError(f"Failed to parse CSV: {e}") from e

    # Local imports keep CLI startup fast for CSV-only use.
    from atlas_db.client import session_scope
    from .persistence import load_transactions

    try:
        with session_scope(database_url=database_url) as session:
            return list(load_transactions(session))
    except RuntimeError as e:
        raise _SourceError(str(e)) from e
    except SQLAlchemyError as e:
        raise _SourceError(f"failed to load transactions from DB: {e}") from e


def _write_output(text: str, output: str) -> None:
    if output == "-":
        sys.stdout.write(text + "\n")
        return
    # Exported files use LF line endings regardless of platform.
    Path(output).write_text(text, encoding="utf-8", newline="\n")
    print(f"Wrote {output}")


# ---- Command handlers ---------------------------------------------------------


def cmd_import_csv(
    csv_path: str,
    *,
    variant: ImportVariant = ImportVariant.FINANCE_TRANSACTIONS,
    persist: bool = False,
    database_url: str | None = None,
    show_warnings: bool = False,
) -> int:
    """Parse a CSV file and optionally persist the rows to the ledger database.

    A file without data rows is rejected as a whole with
    ``Error: CSV must have a header and at least one row``. Otherwise prints
    ``"<n> row(s) imported"``; per-field fallbacks are listed only with
    ``show_warnings``.
    """

    from .ledger import Ledger

    try:
        result = load_transactions_from_csv(csv_path, variant=variant)
    except FileNotFoundError:
        _err(f"File not found: {csv_path}")
        return 1
    except PermissionError:
        _err(f"Permission denied: {csv_path}")
        return 1
    except EmptyOrHeaderOnlyInput as e:
        _err(str(e))
        return 1
    except (csv.Error, UnicodeDecodeError) as e:
        _err(f"Failed to parse CSV: {e}")
        return 1

    if persist:
        from atlas_db.client import session_scope
        from .persistence import save_transactions

        created = Ledger().extend(result.rows)
        try:
            with session_scope(database_url=database_url) as session:
                save_transactions(session, created)
        except (RuntimeError, SQLAlchemyError) as e:
            _err(f"persistence failed: {e}")
            return 1

    print(f"{len(result.rows)} row(s) imported")
    if show_warnings:
        for w in result.warnings:
            where = "header" if w.line == 0 else f"line {w.line}"
            raw = f" {w.raw!r}" if w.raw else ""
            print(f"warning: {where}: {w.field} {w.code.value}{raw}")
    return 0


def cmd_export_csv(
    *,
    csv_path: str | None = None,
    database_url: str | None = None,
    output: str | None = None,
    variant: ImportVariant = ImportVariant.FINANCE_TRANSACTIONS,
) -> int:
    """Write all transactions from the source as export CSV (``-`` for stdout)."""

    try:
        txs = _load_source(csv_path, database_url=database_url, variant=variant)
    except _SourceError as e:
        _err(str(e))
        return 1
    try:
        _write_output(export_csv(txs), output or export_filename())
    except OSError as e:
        _err(f"failed to write export: {e}")
        return 1
    return 0


def cmd_template(*, output: str | None = None) -> int:
    try:
        _write_output(template_csv(), output or TEMPLATE_FILENAME)
    except OSError as e:
        _err(f"failed to write template: {e}")
        return 1
    return 0


def cmd_summary(
    *,
    csv_path: str | None = None,
    database_url: str | None = None,
    runway_basis: RunwayBasis = RunwayBasis.TOTAL,
    variant: ImportVariant = ImportVariant.FINANCE_TRANSACTIONS,
) -> int:
    """Print totals, overall runway and the per-month runway table."""

    try:
        txs = _load_source(csv_path, database_url=database_url, variant=variant)
    except _SourceError as e:
        _err(str(e))
        return 1
    totals = summarize(txs, runway_basis=runway_basis)
    print(render_runway_report(totals, aggregate_by_month(txs)))
    return 0


def cmd_profitability(
    *,
    csv_path: str | None = None,
    database_url: str | None = None,
    variant: ImportVariant = ImportVariant.FINANCE_TRANSACTIONS,
) -> int:
    try:
        txs = _load_source(csv_path, database_url=database_url, variant=variant)
    except _SourceError as e:
        _err(str(e))
        return 1
    for row in profitability_by_client(txs):
        print(f"{row.client}\t{format_cents(row.profit_cents)}")
    return 0


def cmd_anomalies(
    *,
    csv_path: str | None = None,
    database_url: str | None = None,
    factor: float = DEFAULT_ANOMALY_FACTOR,
    variant: ImportVariant = ImportVariant.FINANCE_TRANSACTIONS,
) -> int:
    try:
        txs = _load_source(csv_path, database_url=database_url, variant=variant)
    except _SourceError as e:
        _err(str(e))
        return 1
    found: Sequence[TransactionCreate] = detect_anomalies(txs, factor=factor)
    if not found:
        print("No significant anomalies detected.")
    for t in found:
        print(describe_anomaly(t))
    return 0


def cmd_delete(tx_id: str, *, database_url: str | None = None) -> int:
    from atlas_db.client import session_scope
    from .persistence import delete_transaction

    try:
        with session_scope(database_url=database_url) as session:
            deleted = delete_transaction(session, tx_id)
    except (RuntimeError, SQLAlchemyError) as e:
        _err(f"delete failed: {e}")
        return 1
    if not deleted:
        _err(f"no transaction with id {tx_id!r}")
        return 1
    print(f"Deleted {tx_id}")
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Import, export and analyze the finance ledger (CSV and database). "
        "Loads DATABASE_URL and AF_* settings from a local .env before running."
    ),
)


# Module-level option objects to satisfy ruff B008 (no calls in parameter
# defaults). Typer inspects these when used as default values below.
CSV_PATH_OPTION: OptionInfo = typer.Option(
    ...,  # required
    "--csv-path",
    help="Path to a ledger CSV file",
    dir_okay=False,
    file_okay=True,
    exists=False,  # allow non-existent here; the handler reports nice errors
)
SOURCE_CSV_OPTION: OptionInfo = typer.Option(
    None,
    "--csv-path",
    help="Read transactions from this CSV instead of the database",
    dir_okay=False,
    file_okay=True,
    exists=False,
)
DATABASE_URL_OPTION: OptionInfo = typer.Option(
    None, "--database-url", help="Override DATABASE_URL (falls back to env var)."
)
VARIANT_OPTION: OptionInfo = typer.Option(
    None,
    "--variant",
    help="CSV variant: 'finance' (strips quotes) or 'ledger' (plain). Env: AF_IMPORT_VARIANT.",
)


def _exit(code: int) -> None:
    raise typer.Exit(code=code)


def _variant_or_exit(value: str | None) -> ImportVariant:
    try:
        return _resolve_variant(value)
    except ValueError as e:
        _err(str(e))
        raise typer.Exit(code=2) from e


@app.command("import-csv")
def import_csv_cmd(
    csv_path: Path = CSV_PATH_OPTION,
    variant: str | None = VARIANT_OPTION,
    persist: bool = typer.Option(False, help="Persist imported rows to the database."),
    database_url: str | None = DATABASE_URL_OPTION,
    show_warnings: bool = typer.Option(False, help="List fields that were defaulted."),
) -> None:
    """Import a CSV; the whole file is rejected when it has no data rows."""

    _exit(
        cmd_import_csv(
            str(csv_path),
            variant=_variant_or_exit(variant),
            persist=persist,
            database_url=database_url,
            show_warnings=show_warnings,
        )
    )


@app.command("export-csv")
def export_csv_cmd(
    csv_path: Path | None = SOURCE_CSV_OPTION,
    database_url: str | None = DATABASE_URL_OPTION,
    output: str | None = typer.Option(
        None, "--output", "-o", help="Output file ('-' for stdout). Default: dated filename."
    ),
    variant: str | None = VARIANT_OPTION,
) -> None:
    """Export transactions as CSV."""

    _exit(
        cmd_export_csv(
            csv_path=str(csv_path) if csv_path else None,
            database_url=database_url,
            output=output,
            variant=_variant_or_exit(variant),
        )
    )


@app.command("template")
def template_cmd(
    output: str | None = typer.Option(
        None, "--output", "-o", help=f"Output file ('-' for stdout). Default: {TEMPLATE_FILENAME}."
    ),
) -> None:
    """Write the import template CSV."""

    _exit(cmd_template(output=output))


@app.command("summary")
def summary_cmd(
    csv_path: Path | None = SOURCE_CSV_OPTION,
    database_url: str | None = DATABASE_URL_OPTION,
    runway_basis: str | None = typer.Option(
        None,
        "--runway-basis",
        help="'total' or 'monthly_average' for the overall runway. Env: AF_RUNWAY_BASIS.",
    ),
    variant: str | None = VARIANT_OPTION,
) -> None:
    """Print budget totals and monthly runway."""

    try:
        basis = _resolve_runway_basis(runway_basis)
    except ValueError as e:
        _err(str(e))
        raise typer.Exit(code=2) from e
    _exit(
        cmd_summary(
            csv_path=str(csv_path) if csv_path else None,
            database_url=database_url,
            runway_basis=basis,
            variant=_variant_or_exit(variant),
        )
    )


@app.command("profitability")
def profitability_cmd(
    csv_path: Path | None = SOURCE_CSV_OPTION,
    database_url: str | None = DATABASE_URL_OPTION,
    variant: str | None = VARIANT_OPTION,
) -> None:
    """Print net profit per project/client."""

    _exit(
        cmd_profitability(
            csv_path=str(csv_path) if csv_path else None,
            database_url=database_url,
            variant=_variant_or_exit(variant),
        )
    )


@app.command("anomalies")
def anomalies_cmd(
    csv_path: Path | None = SOURCE_CSV_OPTION,
    database_url: str | None = DATABASE_URL_OPTION,
    factor: float = typer.Option(
        DEFAULT_ANOMALY_FACTOR, help="Flag amounts above this multiple of the mean."
    ),
    variant: str | None = VARIANT_OPTION,
) -> None:
    """List unusually large transactions."""

    _exit(
        cmd_anomalies(
            csv_path=str(csv_path) if csv_path else None,
            database_url=database_url,
            factor=factor,
            variant=_variant_or_exit(variant),
        )
    )


@app.command("delete")
def delete_cmd(
    tx_id: str = typer.Option(..., "--id", help="Transaction id to delete."),
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    """Delete one stored transaction by id."""

    _exit(cmd_delete(tx_id, database_url=database_url))


@app.callback()
def _root() -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures package logging.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()
    _logger.debug("atlas-finance CLI starting")


def main() -> None:  # pragma: no cover - console script entry
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
