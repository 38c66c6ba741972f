"""Income/expense totals for one account."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select

from app.db.database import Database
from app.db.models import EntryKind, LedgerEntry

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


@dataclass(frozen=True)
class BalanceSummary:
    total_income: Decimal
    total_expenses: Decimal
    balance: Decimal


class BalanceAggregator:
    """Sum an owner's entries per kind using exact decimal arithmetic."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def summarize(self, owner_id: UUID) -> BalanceSummary:
        statement = (
            select(LedgerEntry.kind, func.sum(LedgerEntry.amount))
            .where(LedgerEntry.owner_id == owner_id)
            .group_by(LedgerEntry.kind)
        )
        with self.db.session() as session:
            totals = {kind: Decimal(str(total or 0)) for kind, total in session.execute(statement)}

        income = totals.get(EntryKind.INCOME.value, ZERO).quantize(CENT)
        expenses = totals.get(EntryKind.EXPENSE.value, ZERO).quantize(CENT)
        return BalanceSummary(
            total_income=income,
            total_expenses=expenses,
            balance=income - expenses,
        )
