"""Public interface for the ``atlas_finance`` package.

This module exposes the ledger, import/export and aggregation functions plus
the public models as the stable import surface. There is no runtime logic
here, only symbol re-exports. Persistence (``atlas_finance.persistence``) and
the CLI (``atlas_finance.cli``) are imported from their modules directly so
that the SQLAlchemy stack is only loaded when needed.
"""

from .aggregate import RunwayBasis, aggregate_by_month, summarize
from .export import export_csv, export_filename, template_csv
from .ingest import (
    EMPTY_INPUT_MESSAGE,
    EmptyOrHeaderOnlyInput,
    ImportVariant,
    load_transactions_from_csv,
    parse_transactions_csv,
)
from .insights import detect_anomalies, monthly_summary_text, profitability_by_client
from .ledger import Ledger
from .models import (
    ClientProfit,
    ImportResult,
    MonthlyBucket,
    RowWarning,
    SummaryTotals,
    Transaction,
    TransactionCreate,
    TransactionForm,
    TransactionType,
    WarningCode,
)

__all__ = [
    # Ledger
    "Ledger",
    # Import / export
    "EMPTY_INPUT_MESSAGE",
    "EmptyOrHeaderOnlyInput",
    "ImportVariant",
    "load_transactions_from_csv",
    "parse_transactions_csv",
    "export_csv",
    "export_filename",
    "template_csv",
    # Aggregation and reports
    "RunwayBasis",
    "aggregate_by_month",
    "summarize",
    "detect_anomalies",
    "monthly_summary_text",
    "profitability_by_client",
    # Models / types
    "ClientProfit",
    "ImportResult",
    "MonthlyBucket",
    "RowWarning",
    "SummaryTotals",
    "Transaction",
    "TransactionCreate",
    "TransactionForm",
    "TransactionType",
    "WarningCode",
]
