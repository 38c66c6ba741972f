"""Ledger entry persistence, always scoped to the owning account."""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any
from uuid import UUID

from sqlalchemy import delete, select

from app.db.database import Database
from app.db.models import EntryKind, LedgerEntry
from app.utils.errors import ValidationError
from app.utils.time import now_utc

CENT = Decimal("0.01")
UPDATABLE_FIELDS = frozenset({"title", "kind", "amount"})


def normalize_kind(kind: EntryKind | str) -> str:
    """Return the stored value of ``kind`` or raise ValidationError."""
    try:
        return EntryKind(kind).value
    except ValueError as exc:
        raise ValidationError.single(
            "type", 'Type must be either "income" or "expense"'
        ) from exc


def normalize_amount(amount: Decimal | int | str) -> Decimal:
    """Return ``amount`` rounded to cents; non-positive amounts are rejected."""
    try:
        value = Decimal(str(amount))
    except InvalidOperation as exc:
        raise ValidationError.single("amount", "Amount must be a positive number") from exc
    if not value.is_finite() or value.quantize(CENT) <= 0:
        raise ValidationError.single("amount", "Amount must be a positive number")
    return value.quantize(CENT)


def normalize_title(title: str) -> str:
    if not title or len(title) > 255:
        raise ValidationError.single("title", "Title must be between 1 and 255 characters")
    return title


class LedgerStore:
    """CRUD primitives for ledger entries.

    Every call takes the owner's id and filters on it, so an entry owned by
    another account behaves exactly like one that does not exist.
    """

    def __init__(self, db: Database) -> None:
        self.db = db

    def insert(
        self,
        owner_id: UUID,
        title: str,
        kind: EntryKind | str,
        amount: Decimal | int | str,
    ) -> LedgerEntry:
        entry = LedgerEntry(
            owner_id=owner_id,
            title=normalize_title(title),
            kind=normalize_kind(kind),
            amount=normalize_amount(amount),
        )
        with self.db.session() as session:
            session.add(entry)
            session.flush()
            return entry

    def find_by_id(self, owner_id: UUID, entry_id: UUID) -> LedgerEntry | None:
        with self.db.session() as session:
            return session.scalars(
                select(LedgerEntry).where(
                    LedgerEntry.id == entry_id, LedgerEntry.owner_id == owner_id
                )
            ).first()

    def update_partial(
        self,
        owner_id: UUID,
        entry_id: UUID,
        fields: Mapping[str, Any],
    ) -> LedgerEntry | None:
        """Apply only the supplied fields; ``updated_at`` is always refreshed.

        Returns None when the entry does not exist for this owner.
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(
                [{"field": name, "message": "Field cannot be updated"} for name in sorted(unknown)]
            )

        changes: dict[str, Any] = {}
        if "title" in fields:
            changes["title"] = normalize_title(fields["title"])
        if "kind" in fields:
            changes["kind"] = normalize_kind(fields["kind"])
        if "amount" in fields:
            changes["amount"] = normalize_amount(fields["amount"])

        with self.db.session() as session:
            entry = session.scalars(
                select(LedgerEntry)
                .where(LedgerEntry.id == entry_id, LedgerEntry.owner_id == owner_id)
                .with_for_update()
            ).first()
            if entry is None:
                return None
            for name, value in changes.items():
                setattr(entry, name, value)
            entry.updated_at = now_utc()
            session.flush()
            return entry

    def delete(self, owner_id: UUID, entry_id: UUID) -> bool:
        """Hard-delete an entry; True when a row was removed."""
        with self.db.session() as session:
            result = session.execute(
                delete(LedgerEntry)
                .where(LedgerEntry.id == entry_id, LedgerEntry.owner_id == owner_id)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount == 1
