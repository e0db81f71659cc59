"""Monthly budget/runway aggregation and summary totals.

Both reducers treat the input as a read-only snapshot and work in integer
cents; currency units appear only through the ``Decimal`` properties on the
returned models.

Runway is computed two different ways:

- per month (:func:`aggregate_by_month`): the running balance, clamped at
  zero, divided by that month's expenses; omitted (``None``) for months with
  no expenses.
- overall (:func:`summarize`): the total balance divided by total expenses
  (or by the average monthly expense with ``RunwayBasis.MONTHLY_AVERAGE``);
  ``0`` when there are no expenses, and not clamped.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from enum import StrEnum

from .models import MonthlyBucket, SummaryTotals, TransactionCreate
from .money import round_tenths


class RunwayBasis(StrEnum):
    TOTAL = "total"
    MONTHLY_AVERAGE = "monthly_average"

    @classmethod
    def parse(cls, value: str | None) -> RunwayBasis:
        if value is None or not value.strip():
            return cls.TOTAL
        v = value.strip().lower().replace("-", "_")
        if v in {"monthly_average", "average", "avg"}:
            return cls.MONTHLY_AVERAGE
        if v == "total":
            return cls.TOTAL
        raise ValueError(f"unknown runway basis: {value!r}")


def month_key(tx: TransactionCreate) -> str:
    return tx.date[:7]


def _split_cents(transactions: Iterable[TransactionCreate]) -> tuple[int, int]:
    income = 0
    expenses = 0
    for t in transactions:
        if t.amount_cents >= 0:
            income += t.amount_cents
        else:
            expenses += -t.amount_cents
    return income, expenses


def aggregate_by_month(transactions: Iterable[TransactionCreate]) -> list[MonthlyBucket]:
    """Bucket transactions by ``YYYY-MM`` in ascending month order."""

    by_month: dict[str, list[TransactionCreate]] = defaultdict(list)
    for t in transactions:
        by_month[month_key(t)].append(t)

    buckets: list[MonthlyBucket] = []
    running = 0
    for month in sorted(by_month):
        income, expenses = _split_cents(by_month[month])
        running += income - expenses
        runway: float | None = None
        if expenses > 0:
            runway = round_tenths(max(0, running) / expenses)
        buckets.append(
            MonthlyBucket(
                month=month,
                income_cents=income,
                expenses_cents=expenses,
                running_balance_cents=running,
                runway_months=runway,
            )
        )
    return buckets


def summarize(
    transactions: Iterable[TransactionCreate],
    *,
    runway_basis: RunwayBasis = RunwayBasis.TOTAL,
) -> SummaryTotals:
    """Reduce the whole list to income, expenses, balance and runway."""

    txs = list(transactions)
    income, expenses = _split_cents(txs)

    burn = expenses
    if runway_basis is RunwayBasis.MONTHLY_AVERAGE and expenses > 0:
        months = {month_key(t) for t in txs}
        burn = expenses / len(months)

    runway = round_tenths((income - expenses) / burn) if burn > 0 else 0.0
    return SummaryTotals(income_cents=income, expenses_cents=expenses, runway_months=runway)


__all__ = ["RunwayBasis", "aggregate_by_month", "month_key", "summarize"]
