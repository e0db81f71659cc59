"""Header column detection shared by the ledger CSV adapters.

Headers are matched by lower-cased substring rather than by exact name so
templates with reordered, renamed or extra columns still import. Required
columns that cannot be found fall back to fixed positions.
"""

from __future__ import annotations

from dataclasses import dataclass

# Positional fallbacks for the required columns (date, description, amount).
DEFAULT_DATE_IDX = 0
DEFAULT_DESCRIPTION_IDX = 1
DEFAULT_AMOUNT_IDX = 2


@dataclass(frozen=True, slots=True)
class ColumnMap:
    """Resolved column indices for one CSV header.

    Optional columns are ``None`` when the header does not mention them.
    ``fallbacks`` names the required fields that were resolved positionally.
    """

    date: int
    description: int
    amount: int
    type: int | None = None
    category: int | None = None
    project_client: int | None = None
    fallbacks: tuple[str, ...] = ()


def _find(cells: list[str], *needles: str) -> int | None:
    for idx, cell in enumerate(cells):
        if any(n in cell for n in needles):
            return idx
    return None


def detect_columns(header_line: str) -> ColumnMap:
    """Resolve field positions from a raw header line."""

    cells = header_line.lower().split(",")

    fallbacks: list[str] = []

    def required(name: str, default: int) -> int:
        found = _find(cells, name)
        if found is None:
            fallbacks.append(name)
            return default
        return found

    date_idx = required("date", DEFAULT_DATE_IDX)
    description_idx = required("description", DEFAULT_DESCRIPTION_IDX)
    amount_idx = required("amount", DEFAULT_AMOUNT_IDX)

    return ColumnMap(
        date=date_idx,
        description=description_idx,
        amount=amount_idx,
        type=_find(cells, "type"),
        category=_find(cells, "category"),
        project_client=_find(cells, "project", "client"),
        fallbacks=tuple(fallbacks),
    )


__all__ = ["ColumnMap", "detect_columns"]
