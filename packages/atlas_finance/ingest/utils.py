"""Ingest helpers shared by the CLI, the in-memory ledger and library callers.

Exposes variant dispatch over the two CSV adapters and a path-based loader.
The finance-transactions variant is the default because it reads the files
written by :mod:`atlas_finance.export`.
"""

from __future__ import annotations

from datetime import date
from enum import StrEnum
from os import PathLike
from pathlib import Path

from ..models import ImportResult


class ImportVariant(StrEnum):
    LEDGER = "ledger"
    FINANCE_TRANSACTIONS = "finance"

    @classmethod
    def parse(cls, value: str | None) -> ImportVariant:
        """Resolve a user-supplied variant name (``None`` gives the default)."""

        if value is None or not value.strip():
            return cls.FINANCE_TRANSACTIONS
        v = value.strip().lower().replace("_", "-")
        if v in {"finance", "finance-transactions", "quoted"}:
            return cls.FINANCE_TRANSACTIONS
        if v in {"ledger", "plain"}:
            return cls.LEDGER
        raise ValueError(f"unknown import variant: {value!r}")


def parse_transactions_csv(
    text: str,
    *,
    variant: ImportVariant = ImportVariant.FINANCE_TRANSACTIONS,
    today: date | None = None,
) -> ImportResult:
    """Parse CSV text with the adapter for ``variant``.

    Raises :class:`~atlas_finance.ingest.adapters.ledger_csv.EmptyOrHeaderOnlyInput`
    when the text holds no data rows.
    """

    from .adapters import finance_transactions_csv, ledger_csv

    if variant is ImportVariant.LEDGER:
        return ledger_csv.parse(text, today=today)
    return finance_transactions_csv.parse(text, today=today)


def load_transactions_from_csv(
    csv_path: str | PathLike[str],
    *,
    variant: ImportVariant = ImportVariant.FINANCE_TRANSACTIONS,
    today: date | None = None,
) -> ImportResult:
    """Read a UTF-8 CSV file and parse it (a leading BOM is ignored)."""

    p = Path(csv_path)
    text = p.read_text(encoding="utf-8-sig")
    return parse_transactions_csv(text, variant=variant, today=today)


__all__ = ["ImportVariant", "load_transactions_from_csv", "parse_transactions_csv"]
