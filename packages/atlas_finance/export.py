"""CSV export of ledger transactions and the import template.

Output format
-------------
Header (exact): ``date,description,amount,type,category,project_client``

One line per transaction in the given order, joined with ``\\n``:

- ``amount``: ``abs(amount_cents) / 100`` in natural decimal form
- ``type``: re-derived from the sign of ``amount_cents``; a stored ``type``
  is ignored so the exported sign and label always agree
- ``description``: wrapped in double quotes with inner quotes doubled
- ``category`` / ``project_client``: empty when absent
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from .models import TransactionCreate, TransactionType
from .money import natural_amount

CSV_HEADER = "date,description,amount,type,category,project_client"
CSV_CONTENT_TYPE = "text/csv;charset=utf-8"
TEMPLATE_FILENAME = "finance-import-template.csv"

TEMPLATE_ROWS: tuple[str, ...] = (
    '2025-02-01,"Consulting fee",1500.00,income,Software,Acme Corp',
    '2025-02-05,"Software subscription",-99.00,expense,Software,',
)


def quote_field(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def transaction_to_row(tx: TransactionCreate) -> str:
    tx_type = TransactionType.from_cents(tx.amount_cents)
    return ",".join(
        [
            tx.date,
            quote_field(tx.description or ""),
            natural_amount(tx.amount_cents),
            tx_type.value,
            tx.category or "",
            tx.project_client or "",
        ]
    )


def export_csv(transactions: Iterable[TransactionCreate]) -> str:
    """Serialize ``transactions`` (any order, kept as given) to CSV text."""

    return "\n".join([CSV_HEADER, *(transaction_to_row(t) for t in transactions)])


def export_filename(today: date | None = None) -> str:
    return f"finance-transactions-{(today or date.today()).isoformat()}.csv"


def template_csv() -> str:
    """Return the import template: header plus one income and one expense row."""

    return "\n".join([CSV_HEADER, *TEMPLATE_ROWS])


__all__ = [
    "CSV_CONTENT_TYPE",
    "CSV_HEADER",
    "TEMPLATE_FILENAME",
    "export_csv",
    "export_filename",
    "quote_field",
    "template_csv",
    "transaction_to_row",
]
