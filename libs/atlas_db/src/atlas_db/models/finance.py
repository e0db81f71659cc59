from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    Index,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


# ---------------------------
# Core: finance_transactions
# ---------------------------


class FinanceTransactionRow(Base):
    __tablename__ = "finance_transactions"

    # Ids are assigned by the application (hex uuid4 by default).
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    # Insertion order; assigned by the writer (single-writer ledger).
    seq: Mapped[int] = mapped_column(BigInteger, nullable=False)
    # Kept as the imported text; ISO YYYY-MM-DD for well-formed input.
    date: Mapped[str] = mapped_column(String(32), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    amount_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    category: Mapped[str | None] = mapped_column(Text, nullable=True)
    project_client: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint("type in ('income','expense')", name="ck_finance_tx_type"),
        CheckConstraint(
            # Zero is valid for both types (an unparsable import amount is 0).
            "(type = 'income' AND amount_cents >= 0) OR (type = 'expense' AND amount_cents <= 0)",
            name="ck_finance_tx_sign",
        ),
        Index("ix_finance_transactions_project_client", "project_client"),
        Index("ix_finance_transactions_date", "date"),
        Index("ix_finance_transactions_seq", "seq"),
    )


__all__ = [
    "Base",
    "FinanceTransactionRow",
]
