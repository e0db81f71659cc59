"""Integer-cents helpers.

All arithmetic in this package runs on signed integer minor units (cents).
Conversion to currency units happens only at formatting/output boundaries via
the helpers below.
"""

from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

# JavaScript-style ``parseFloat`` prefix: optional sign, digits with an
# optional fraction, or a bare fraction.
_LEADING_NUMBER_RE = re.compile(r"^[-+]?(?:\d+(?:\.\d*)?|\.\d+)")
_NON_NUMERIC_RE = re.compile(r"[^0-9.\-]")


def to_units(cents: int) -> Decimal:
    """Return ``cents`` as a two-place ``Decimal`` amount in currency units."""

    return Decimal(cents).scaleb(-2)


def format_cents(cents: int) -> str:
    """Render ``cents`` with exactly two decimals (``-99.00``, ``1500.00``)."""

    return f"{to_units(cents):.2f}"


def natural_amount(cents: int) -> str:
    """Render ``abs(cents)`` in natural decimal form without trailing zeros.

    ``150000`` gives ``"1500"``, ``9950`` gives ``"99.5"``, ``1234`` gives
    ``"12.34"``.
    """

    whole, frac = divmod(abs(cents), 100)
    if frac == 0:
        return str(whole)
    if frac % 10 == 0:
        return f"{whole}.{frac // 10}"
    return f"{whole}.{frac:02d}"


def parse_amount_cents(raw: str | None) -> int | None:
    """Parse a free-form amount cell into cents, or ``None`` when unparsable.

    Every character other than digits, ``.`` and ``-`` is removed first
    (currency symbols, thousands separators, spaces). The leading decimal
    number of what remains is multiplied by 100 and rounded half-up.
    """

    if raw is None:
        return None
    cleaned = _NON_NUMERIC_RE.sub("", raw)
    match = _LEADING_NUMBER_RE.match(cleaned)
    if match is None:
        return None
    try:
        value = Decimal(match.group(0))
    except InvalidOperation:
        return None
    return units_to_cents(value)


def units_to_cents(value: Decimal) -> int:
    """Convert a currency-unit amount to cents, rounding half-up."""

    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def signed_cents(magnitude: int, *, income: bool) -> int:
    """Apply the ledger sign convention: income positive, expense negative."""

    return abs(magnitude) if income else -abs(magnitude)


def round_tenths(value: float) -> float:
    """Round to one decimal place, half-up on the scaled value."""

    return math.floor(value * 10 + 0.5) / 10


__all__ = [
    "format_cents",
    "natural_amount",
    "parse_amount_cents",
    "round_tenths",
    "signed_cents",
    "to_units",
    "units_to_cents",
]
