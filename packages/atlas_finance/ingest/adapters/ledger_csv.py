"""Adapter for the ledger CSV template (header + comma-separated rows).

Input contract
--------------
- The first non-blank line is a header; columns are located by substring
  (see :mod:`atlas_finance.ingest.columns`).
- Data lines are split on bare ``,``. Cells are whitespace-trimmed and
  otherwise used verbatim; this variant performs no quote handling.
- Lines that are empty or hold only whitespace are skipped wherever they
  appear; they never become rows and do not count towards the two-line
  minimum below.

Every data line yields exactly one record. Malformed fields are replaced with
defaults and reported as :class:`~atlas_finance.models.RowWarning` entries,
never by dropping the row.

Failure mode
------------
Text with fewer than two non-blank lines raises
:class:`EmptyOrHeaderOnlyInput` (a ``csv.Error``) and nothing is imported.
"""

from __future__ import annotations

import csv
import re
from collections.abc import Callable, Iterator, Sequence
from datetime import date

from ...logging_setup import get_logger
from ...models import (
    ImportResult,
    RowWarning,
    TransactionCreate,
    TransactionType,
    WarningCode,
)
from ...money import parse_amount_cents, signed_cents
from ..columns import ColumnMap, detect_columns

EMPTY_INPUT_MESSAGE = "CSV must have a header and at least one row"
DEFAULT_DESCRIPTION = "Imported"

_LINE_SPLIT_RE = re.compile(r"\r?\n")

_logger = get_logger("atlas_finance.ingest.ledger_csv")

type CellSplitter = Callable[[str], list[str]]


class EmptyOrHeaderOnlyInput(csv.Error):
    """The CSV text has no data rows; the whole import is rejected."""

    def __init__(self, message: str = EMPTY_INPUT_MESSAGE) -> None:
        super().__init__(message)


def split_lines(text: str) -> list[str]:
    """Split on ``\\r?\\n`` and drop blank lines."""

    return [line for line in _LINE_SPLIT_RE.split(text) if line.strip()]


def split_cells(line: str) -> list[str]:
    return [c.strip() for c in line.split(",")]


def _cell(cells: Sequence[str], idx: int | None) -> str:
    if idx is None or idx >= len(cells):
        return ""
    return cells[idx]


def to_transactions(
    data_lines: Sequence[str],
    columns: ColumnMap,
    *,
    split: CellSplitter = split_cells,
    today: date | None = None,
    first_line_no: int = 2,
) -> Iterator[tuple[TransactionCreate, list[RowWarning]]]:
    """Map data lines to creation records, in input order.

    Mapping rules:
    - ``date``: cell as-is; blank → ``today`` (``YYYY-MM-DD``)
    - ``description``: cell as-is; blank → ``"Imported"``
    - ``amount``: non-numeric characters stripped, parsed, rounded to cents;
      unparsable → ``0``
    - ``type``: ``"income"`` (case-insensitive) or else ``expense``
    - ``amount_cents``: magnitude signed by type
    - ``category`` / ``project_client``: cell when non-blank, else ``None``
    """

    fallback_date = (today or date.today()).isoformat()

    for offset, line in enumerate(data_lines):
        line_no = first_line_no + offset
        cells = split(line)
        warnings: list[RowWarning] = []

        date_raw = _cell(cells, columns.date)
        if not date_raw:
            warnings.append(RowWarning(line_no, "date", WarningCode.BLANK_DATE))
        description_raw = _cell(cells, columns.description)
        if not description_raw:
            warnings.append(RowWarning(line_no, "description", WarningCode.BLANK_DESCRIPTION))

        amount_raw = _cell(cells, columns.amount)
        parsed = parse_amount_cents(amount_raw)
        if parsed is None:
            warnings.append(
                RowWarning(line_no, "amount", WarningCode.UNPARSABLE_AMOUNT, amount_raw)
            )
            parsed = 0

        tx_type = TransactionType.from_cell(_cell(cells, columns.type))

        record = TransactionCreate(
            date=date_raw or fallback_date,
            description=description_raw or DEFAULT_DESCRIPTION,
            amount_cents=signed_cents(parsed, income=tx_type is TransactionType.INCOME),
            type=tx_type,
            category=_cell(cells, columns.category) or None,
            project_client=_cell(cells, columns.project_client) or None,
        )
        for w in warnings:
            _logger.debug("line %d: defaulted %s (%s)", w.line, w.field, w.code.value)
        yield record, warnings


def parse(
    text: str,
    *,
    split: CellSplitter = split_cells,
    today: date | None = None,
) -> ImportResult:
    """Parse ledger CSV text into an :class:`~atlas_finance.models.ImportResult`.

    Raises
    ------
    EmptyOrHeaderOnlyInput
        When fewer than two non-blank lines remain.
    """

    lines = split_lines(text)
    if len(lines) < 2:
        raise EmptyOrHeaderOnlyInput()

    columns = detect_columns(lines[0])
    warnings: list[RowWarning] = [
        RowWarning(0, name, WarningCode.MISSING_COLUMN) for name in columns.fallbacks
    ]
    if columns.fallbacks:
        _logger.debug(
            "header missing %s; using positional columns", ", ".join(columns.fallbacks)
        )

    rows: list[TransactionCreate] = []
    for record, row_warnings in to_transactions(lines[1:], columns, split=split, today=today):
        rows.append(record)
        warnings.extend(row_warnings)

    _logger.info("parsed %d row(s)", len(rows))
    _logger.debug("%d field(s) defaulted", len(warnings))
    return ImportResult(rows=tuple(rows), warnings=tuple(warnings))


__all__ = [
    "DEFAULT_DESCRIPTION",
    "EMPTY_INPUT_MESSAGE",
    "EmptyOrHeaderOnlyInput",
    "parse",
    "split_cells",
    "split_lines",
    "to_transactions",
]
