"""Adapter for finance-transactions CSV files (the exporter's own format).

Identical to :mod:`atlas_finance.ingest.adapters.ledger_csv` except for cell
handling: after splitting on ``,`` and trimming, one pair of surrounding
double quotes is removed and doubled quotes (``""``) inside it are
un-escaped. Quoted commas are not supported; a description containing ``,``
spills into the following columns.
"""

from __future__ import annotations

from datetime import date

from ...models import ImportResult
from .ledger_csv import parse as _parse_ledger


def unquote_cell(cell: str) -> str:
    s = cell.strip()
    if len(s) >= 2 and s.startswith('"') and s.endswith('"'):
        return s[1:-1].replace('""', '"')
    return s


def split_cells(line: str) -> list[str]:
    return [unquote_cell(c) for c in line.split(",")]


def parse(text: str, *, today: date | None = None) -> ImportResult:
    """Parse finance-transactions CSV text; see ``ledger_csv.parse``."""

    # Row mapping, defaults and error semantics are shared with the ledger
    # adapter; only cell splitting differs.
    return _parse_ledger(text, split=split_cells, today=today)


__all__ = ["parse", "split_cells", "unquote_cell"]
