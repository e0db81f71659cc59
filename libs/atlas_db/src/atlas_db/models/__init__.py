"""Shared SQLAlchemy models registry for the workspace database.

Currently includes the finance ledger model used by ``atlas_finance``.
"""

from .finance import Base, FinanceTransactionRow

__all__ = [
    "Base",
    "FinanceTransactionRow",
]
