# ruff: noqa: I001
"""Create the finance_transactions ledger table.

Revision ID: 0001_finance_transactions
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0001_finance_transactions"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "finance_transactions",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("seq", sa.BigInteger(), nullable=False),
        sa.Column("date", sa.String(length=32), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("amount_cents", sa.BigInteger(), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("category", sa.Text(), nullable=True),
        sa.Column("project_client", sa.Text(), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.CheckConstraint("type in ('income','expense')", name="ck_finance_tx_type"),
        sa.CheckConstraint(
            "(type = 'income' AND amount_cents >= 0) OR (type = 'expense' AND amount_cents <= 0)",
            name="ck_finance_tx_sign",
        ),
    )
    op.create_index(
        "ix_finance_transactions_project_client",
        "finance_transactions",
        ["project_client"],
        unique=False,
    )
    op.create_index(
        "ix_finance_transactions_date",
        "finance_transactions",
        ["date"],
        unique=False,
    )
    op.create_index(
        "ix_finance_transactions_seq",
        "finance_transactions",
        ["seq"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_finance_transactions_seq", table_name="finance_transactions")
    op.drop_index("ix_finance_transactions_date", table_name="finance_transactions")
    op.drop_index("ix_finance_transactions_project_client", table_name="finance_transactions")
    op.drop_table("finance_transactions")
