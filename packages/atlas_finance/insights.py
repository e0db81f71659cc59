"""Quick ledger reports: profitability by client, outliers, a one-line summary."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from typing import TypeVar

from .models import ClientProfit, MonthlyBucket, SummaryTotals, TransactionCreate
from .money import format_cents

UNCATEGORIZED_CLIENT = "Uncategorized"
DEFAULT_ANOMALY_FACTOR = 2.5

T = TypeVar("T", bound=TransactionCreate)


def profitability_by_client(transactions: Iterable[TransactionCreate]) -> list[ClientProfit]:
    """Sum signed cents per ``project_client``, most profitable first.

    Rows without a client are grouped under ``"Uncategorized"``. Ties keep
    first-seen order.
    """

    by_client: dict[str, int] = defaultdict(int)
    for t in transactions:
        by_client[t.project_client or UNCATEGORIZED_CLIENT] += t.amount_cents
    ranked = sorted(by_client.items(), key=lambda kv: kv[1], reverse=True)
    return [ClientProfit(client=k, profit_cents=v) for k, v in ranked]


def detect_anomalies(
    transactions: Sequence[T], *, factor: float = DEFAULT_ANOMALY_FACTOR
) -> list[T]:
    """Return rows whose absolute amount exceeds ``factor`` × the mean absolute amount."""

    if not transactions:
        return []
    mean = sum(abs(t.amount_cents) for t in transactions) / len(transactions)
    threshold = mean * factor
    return [t for t in transactions if abs(t.amount_cents) > threshold]


def describe_anomaly(tx: TransactionCreate) -> str:
    return f"{tx.description}: {format_cents(abs(tx.amount_cents))} (unusual size)"


def monthly_summary_text(transactions: Sequence[TransactionCreate]) -> str:
    income = sum(t.amount_cents for t in transactions if t.amount_cents >= 0)
    expenses = sum(-t.amount_cents for t in transactions if t.amount_cents < 0)
    return (
        f"This month: {len(transactions)} transactions. "
        f"Income: {format_cents(income)}, Expenses: {format_cents(expenses)}, "
        f"Net: {format_cents(income - expenses)}."
    )


def _fmt_runway(value: float | None) -> str:
    if value is None:
        return "n/a"
    return f"{value:.1f} mo"


def render_runway_report(totals: SummaryTotals, buckets: Sequence[MonthlyBucket]) -> str:
    """Plain-text budget report: totals block, then one row per month.

    A non-positive overall runway renders as ``n/a``; so does a month without
    expenses.
    """

    lines = [
        f"Income:   {format_cents(totals.income_cents)}",
        f"Expenses: {format_cents(totals.expenses_cents)}",
        f"Balance:  {format_cents(totals.balance_cents)}",
        f"Runway:   {_fmt_runway(totals.runway_months if totals.runway_months > 0 else None)}",
    ]
    if buckets:
        lines.append("")
        lines.append(f"{'Month':<7} {'Income':>12} {'Expenses':>12} {'Balance':>12} {'Runway':>9}")
        for b in buckets:
            lines.append(
                f"{b.label:<7} {format_cents(b.income_cents):>12} "
                f"{format_cents(b.expenses_cents):>12} {format_cents(b.balance_cents):>12} "
                f"{_fmt_runway(b.runway_months):>9}"
            )
    return "\n".join(lines)


__all__ = [
    "DEFAULT_ANOMALY_FACTOR",
    "UNCATEGORIZED_CLIENT",
    "describe_anomaly",
    "detect_anomalies",
    "monthly_summary_text",
    "profitability_by_client",
    "render_runway_report",
]
