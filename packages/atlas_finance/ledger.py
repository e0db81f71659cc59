"""In-memory transaction ledger.

The ledger owns identity assignment for records it creates: ids come from an
injectable ``id_factory`` and timestamps from an injectable ``clock``.
Records are appended in creation order and are never edited in place; the
only mutation besides adding is deletion by id.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Iterable, Iterator
from dataclasses import fields
from datetime import UTC, date, datetime

from .ingest.utils import ImportVariant, parse_transactions_csv
from .logging_setup import get_logger
from .models import ImportResult, Transaction, TransactionCreate, TransactionForm, TransactionType
from .money import signed_cents

_logger = get_logger("atlas_finance.ledger")

_CREATE_FIELDS = tuple(f.name for f in fields(TransactionCreate))


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Ledger:
    """Ordered, id-addressable collection of :class:`Transaction` records."""

    def __init__(
        self,
        transactions: Iterable[Transaction] = (),
        *,
        id_factory: Callable[[], str] = _new_id,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._items: dict[str, Transaction] = {}
        self._id_factory = id_factory
        self._clock = clock
        for t in transactions:
            self._items[t.id] = t

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(list(self._items.values()))

    def __contains__(self, tx_id: object) -> bool:
        return tx_id in self._items

    def snapshot(self) -> tuple[Transaction, ...]:
        return tuple(self._items.values())

    def get(self, tx_id: str) -> Transaction | None:
        return self._items.get(tx_id)

    # -- creation ----------------------------------------------------------

    def _materialize(self, create: TransactionCreate) -> Transaction:
        tx_id = self._id_factory()
        if tx_id in self._items:
            raise ValueError(f"id_factory returned a duplicate id: {tx_id!r}")
        now = self._clock()
        values = {name: getattr(create, name) for name in _CREATE_FIELDS}
        # Keep the sign convention even for records built by hand.
        values["amount_cents"] = signed_cents(
            create.amount_cents, income=create.type == TransactionType.INCOME
        )
        return Transaction(id=tx_id, created_at=now, updated_at=now, **values)

    def add(self, create: TransactionCreate) -> Transaction:
        tx = self._materialize(create)
        self._items[tx.id] = tx
        return tx

    def add_form(self, form: TransactionForm) -> Transaction:
        return self.add(form.to_create())

    def extend(self, rows: Iterable[TransactionCreate]) -> list[Transaction]:
        """Add every row or none of them."""

        created = [self._materialize(r) for r in rows]
        ids = [t.id for t in created]
        if len(set(ids)) != len(ids):
            raise ValueError("id_factory returned duplicate ids within one batch")
        for t in created:
            self._items[t.id] = t
        return created

    def import_csv(
        self,
        text: str,
        *,
        variant: ImportVariant = ImportVariant.FINANCE_TRANSACTIONS,
        today: date | None = None,
    ) -> tuple[list[Transaction], ImportResult]:
        """Parse ``text`` and add all rows.

        ``EmptyOrHeaderOnlyInput`` propagates with the ledger unchanged.
        """

        result = parse_transactions_csv(text, variant=variant, today=today)
        created = self.extend(result.rows)
        _logger.info("imported %d row(s) into ledger", len(created))
        return created, result

    # -- removal -----------------------------------------------------------

    def delete(self, tx_id: str) -> Transaction:
        """Remove and return the transaction; ``KeyError`` when unknown."""

        try:
            return self._items.pop(tx_id)
        except KeyError:
            raise KeyError(f"no transaction with id {tx_id!r}") from None

    # -- queries -----------------------------------------------------------

    def filter(
        self,
        *,
        type: TransactionType | None = None,
        project_client: str | None = None,
        search: str | None = None,
    ) -> list[Transaction]:
        """Return matching transactions in ledger order.

        - ``type``: exact match on the stored type
        - ``project_client``: case-insensitive substring of the client
        - ``search``: case-insensitive substring of description, category and
          client joined by spaces
        """

        project_q = (project_client or "").lower()
        search_q = (search or "").lower()
        out: list[Transaction] = []
        for t in self._items.values():
            if type is not None and t.type != type:
                continue
            if project_q and project_q not in (t.project_client or "").lower():
                continue
            if search_q:
                haystack = " ".join(
                    v for v in (t.description, t.category, t.project_client) if v
                ).lower()
                if search_q not in haystack:
                    continue
            out.append(t)
        return out


__all__ = ["Ledger"]
