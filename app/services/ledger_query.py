"""Filtered, paginated ledger listings."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import ColumnElement, Select, func, select

from app.db.database import Database
from app.db.models import EntryKind, LedgerEntry
from app.utils.errors import ValidationError

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
# Largest value a BIGINT LIMIT/OFFSET parameter can hold.
MAX_STORE_INT = 2**63 - 1


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def compute(cls, page: int, limit: int, total: int) -> Pagination:
        """Build pagination metadata; ``pages`` is ``ceil(total / limit)``."""
        return cls(page=page, limit=limit, total=total, pages=-(-total // limit))


@dataclass(frozen=True)
class LedgerPage:
    entries: list[LedgerEntry]
    pagination: Pagination


@dataclass(frozen=True)
class ListQuery:
    """One owner's listing request.

    Builds the SQLAlchemy statements for it; every user-supplied value is a
    bound parameter, never part of the SQL text.
    """

    owner_id: UUID
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    kind: EntryKind | None = None

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValidationError.single("page", "Page must be a positive integer")
        if self.limit < 1:
            raise ValidationError.single("limit", "Limit must be a positive integer")
        if self.page > MAX_STORE_INT:
            raise ValidationError.single("page", "Page is too large")
        if self.limit > MAX_STORE_INT:
            raise ValidationError.single("limit", "Limit is too large")
        if self.offset > MAX_STORE_INT:
            raise ValidationError.single("page", "Page is too large for this limit")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def conditions(self) -> list[ColumnElement[bool]]:
        clauses = [LedgerEntry.owner_id == self.owner_id]
        if self.kind is not None:
            clauses.append(LedgerEntry.kind == EntryKind(self.kind).value)
        return clauses

    def select_statement(self) -> Select[tuple[LedgerEntry]]:
        """Newest first; equal timestamps fall back to id order."""
        return (
            select(LedgerEntry)
            .where(*self.conditions())
            .order_by(LedgerEntry.created_at.desc(), LedgerEntry.id.asc())
            .limit(self.limit)
            .offset(self.offset)
        )

    def count_statement(self) -> Select[tuple[int]]:
        return select(func.count()).select_from(LedgerEntry).where(*self.conditions())


class LedgerQueryEngine:
    """Run listing queries against the store."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def list(
        self,
        owner_id: UUID,
        page: int | None = None,
        limit: int | None = None,
        kind: EntryKind | None = None,
    ) -> LedgerPage:
        """Return one page of the owner's entries plus pagination metadata.

        ``page`` and ``limit`` default to 1 and 10. ``limit`` has no upper
        bound here; the HTTP layer decides whether to impose one.
        """
        query = ListQuery(
            owner_id=owner_id,
            page=DEFAULT_PAGE if page is None else page,
            limit=DEFAULT_LIMIT if limit is None else limit,
            kind=kind,
        )
        with self.db.session() as session:
            entries = list(session.scalars(query.select_statement()).all())
            total = session.scalar(query.count_statement()) or 0
        return LedgerPage(
            entries=entries,
            pagination=Pagination.compute(query.page, query.limit, total),
        )
