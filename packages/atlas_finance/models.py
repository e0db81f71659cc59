"""Data models for ``atlas_finance``.

Ledger records are plain frozen dataclasses carrying integer cents. Derived
views (monthly buckets, summary totals, client profitability) are computed on
demand and never stored. Manual entry goes through the pydantic
:class:`TransactionForm`, which validates raw form input before producing a
sign-normalized :class:`TransactionCreate`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .money import signed_cents, to_units, units_to_cents

# ---------------------------------------------------------------------------
# Core records
# ---------------------------------------------------------------------------


class TransactionType(StrEnum):
    INCOME = "income"
    EXPENSE = "expense"

    @classmethod
    def from_cell(cls, value: str | None) -> TransactionType:
        """Map a raw cell to a type; anything but ``"income"`` is an expense."""

        if value is not None and value.strip().lower() == cls.INCOME.value:
            return cls.INCOME
        return cls.EXPENSE

    @classmethod
    def from_cents(cls, amount_cents: int) -> TransactionType:
        return cls.INCOME if amount_cents >= 0 else cls.EXPENSE


@dataclass(frozen=True, slots=True, kw_only=True)
class TransactionCreate:
    """A transaction-creation record (no identity, no timestamps).

    ``amount_cents`` is signed: income is non-negative and expenses are
    negative. Every constructor path in this package derives the sign from
    ``type`` via :func:`atlas_finance.money.signed_cents`; readers that need
    a type re-derive it from the sign instead of trusting ``type``.
    """

    date: str
    description: str
    amount_cents: int
    type: TransactionType
    category: str | None = None
    project_client: str | None = None

    @property
    def is_income(self) -> bool:
        return self.amount_cents >= 0

    @property
    def amount(self) -> Decimal:
        return to_units(self.amount_cents)


@dataclass(frozen=True, slots=True, kw_only=True)
class Transaction(TransactionCreate):
    """A ledger transaction with identity assigned by its owning store."""

    id: str
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))


# ---------------------------------------------------------------------------
# Import diagnostics
# ---------------------------------------------------------------------------


class WarningCode(StrEnum):
    MISSING_COLUMN = "missing_column"
    BLANK_DATE = "blank_date"
    BLANK_DESCRIPTION = "blank_description"
    UNPARSABLE_AMOUNT = "unparsable_amount"


@dataclass(frozen=True, slots=True)
class RowWarning:
    """A field that was filled with a default during import.

    ``line`` is the 1-based position among the non-blank input lines (the
    header is line 1); ``0`` marks a header-level warning.
    """

    line: int
    field: str
    code: WarningCode
    raw: str | None = None


@dataclass(frozen=True, slots=True)
class ImportResult:
    """Rows produced by an import plus the fallbacks applied to them."""

    rows: tuple[TransactionCreate, ...]
    warnings: tuple[RowWarning, ...] = ()

    def __len__(self) -> int:
        return len(self.rows)

    @property
    def defaulted_lines(self) -> frozenset[int]:
        return frozenset(w.line for w in self.warnings if w.line > 0)


# ---------------------------------------------------------------------------
# Derived views
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class MonthlyBucket:
    """Income/expense totals for one ``YYYY-MM`` month.

    ``running_balance_cents`` accumulates every month up to and including
    this one. ``runway_months`` is ``None`` when the month has no expenses.
    """

    month: str
    income_cents: int
    expenses_cents: int
    running_balance_cents: int
    runway_months: float | None = None

    @property
    def balance_cents(self) -> int:
        return self.income_cents - self.expenses_cents

    @property
    def income(self) -> Decimal:
        return to_units(self.income_cents)

    @property
    def expenses(self) -> Decimal:
        return to_units(self.expenses_cents)

    @property
    def balance(self) -> Decimal:
        return to_units(self.balance_cents)

    @property
    def running_balance(self) -> Decimal:
        return to_units(self.running_balance_cents)

    @property
    def label(self) -> str:
        """Chart-axis label ``MM/YY`` (``"2025-02"`` gives ``"02/25"``)."""

        return f"{self.month[5:7]}/{self.month[2:4]}"


@dataclass(frozen=True, slots=True)
class SummaryTotals:
    income_cents: int
    expenses_cents: int
    runway_months: float

    @property
    def balance_cents(self) -> int:
        return self.income_cents - self.expenses_cents

    @property
    def income(self) -> Decimal:
        return to_units(self.income_cents)

    @property
    def expenses(self) -> Decimal:
        return to_units(self.expenses_cents)

    @property
    def balance(self) -> Decimal:
        return to_units(self.balance_cents)


@dataclass(frozen=True, slots=True)
class ClientProfit:
    client: str
    profit_cents: int

    @property
    def profit(self) -> Decimal:
        return to_units(self.profit_cents)


# ---------------------------------------------------------------------------
# Manual entry form
# ---------------------------------------------------------------------------


class TransactionForm(BaseModel):
    """Validated manual-entry form for a single transaction.

    ``amount`` accepts the raw text typed by the user (or a number). The sign
    of the stored amount always follows ``type``.
    """

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    date: str = Field(default_factory=lambda: date.today().isoformat())
    description: str
    amount: Decimal
    type: TransactionType = TransactionType.EXPENSE
    category: str | None = None
    project_client: str | None = None

    @field_validator("date", "description")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("must be non-empty")
        return v

    @field_validator("category", "project_client")
    @classmethod
    def _blank_to_none(cls, v: str | None) -> str | None:
        return v or None

    def to_create(self) -> TransactionCreate:
        cents = units_to_cents(self.amount)
        return TransactionCreate(
            date=self.date,
            description=self.description,
            amount_cents=signed_cents(cents, income=self.type is TransactionType.INCOME),
            type=self.type,
            category=self.category,
            project_client=self.project_client,
        )


__all__ = [
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
