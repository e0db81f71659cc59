# ruff: noqa: I001
"""Persistence integration for atlas_finance.

Functions here read and write ledger transactions in the shared database owned
by ``libs/atlas_db``. They rely on the SQLAlchemy ORM model defined in
``atlas_db.models.finance`` and a session provided by ``atlas_db.client``.
Commit/rollback belongs to the caller's ``session_scope``.

Scope:
- Insert transactions (ids assigned by the caller, e.g. a ``Ledger``).
- List transactions with the type/client filters of the ledger API.
- Delete a transaction by id.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from atlas_db.models.finance import FinanceTransactionRow
from .logging_setup import get_logger
from .models import Transaction, TransactionType

_logger = get_logger("atlas_finance.persistence")


def _aware(value: datetime | None) -> datetime:
    # SQLite drops tzinfo on round-trip; values are always written as UTC.
    if value is None:
        return datetime.now(UTC)
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def _to_row(tx: Transaction, *, seq: int) -> FinanceTransactionRow:
    # Zero fits either sign; only then does the record's own type survive.
    if tx.amount_cents == 0:
        tx_type = TransactionType(tx.type)
    else:
        tx_type = TransactionType.from_cents(tx.amount_cents)
    return FinanceTransactionRow(
        id=tx.id,
        seq=seq,
        date=tx.date,
        description=tx.description,
        amount_cents=tx.amount_cents,
        type=tx_type.value,
        category=tx.category,
        project_client=tx.project_client,
        created_at=tx.created_at,
        updated_at=tx.updated_at,
    )


def _from_row(row: FinanceTransactionRow) -> Transaction:
    return Transaction(
        id=row.id,
        date=row.date,
        description=row.description,
        amount_cents=row.amount_cents,
        type=TransactionType(row.type),
        category=row.category,
        project_client=row.project_client,
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


def save_transactions(session: Session, transactions: Iterable[Transaction]) -> int:
    """Insert ``transactions`` and return how many rows were added.

    The stored ``type`` is derived from the sign of ``amount_cents`` so the
    table's sign constraint always holds. A zero amount keeps the record's
    type, so an expense whose amount was unparsable stays an expense.
    """

    start = session.scalar(select(func.coalesce(func.max(FinanceTransactionRow.seq), 0))) or 0
    rows = [_to_row(t, seq=start + i) for i, t in enumerate(transactions, start=1)]
    session.add_all(rows)
    session.flush()
    _logger.info("saved %d transaction(s)", len(rows))
    return len(rows)


def load_transactions(
    session: Session,
    *,
    type: TransactionType | None = None,
    project_client: str | None = None,
) -> list[Transaction]:
    """Return stored transactions in insertion order.

    ``project_client`` matches exactly; ``type`` filters on the stored type.
    """

    stmt = select(FinanceTransactionRow)
    if type is not None:
        stmt = stmt.where(FinanceTransactionRow.type == TransactionType(type).value)
    if project_client is not None:
        stmt = stmt.where(FinanceTransactionRow.project_client == project_client)
    stmt = stmt.order_by(FinanceTransactionRow.seq)
    return [_from_row(r) for r in session.scalars(stmt)]


def delete_transaction(session: Session, tx_id: str) -> bool:
    """Delete one transaction; returns ``False`` when the id is unknown."""

    result = session.execute(delete(FinanceTransactionRow).where(FinanceTransactionRow.id == tx_id))
    deleted = bool(result.rowcount)
    _logger.info("delete %s: %s", tx_id, "ok" if deleted else "not found")
    return deleted


__all__ = ["delete_transaction", "load_transactions", "save_transactions"]
