"""Balance aggregation tests."""

from __future__ import annotations

import uuid
from decimal import Decimal

import pytest

from app.db.database import Database
from app.services.balance_service import BalanceAggregator
from app.services.ledger_store import LedgerStore


@pytest.fixture()
def store(db: Database) -> LedgerStore:
    return LedgerStore(db)


@pytest.fixture()
def aggregator(db: Database) -> BalanceAggregator:
    return BalanceAggregator(db)


def test_empty_ledger_is_zero(aggregator: BalanceAggregator, owner_id: uuid.UUID) -> None:
    """No entries should mean zero totals, not missing values."""
    summary = aggregator.summarize(owner_id)
    assert summary.total_income == Decimal("0.00")
    assert summary.total_expenses == Decimal("0.00")
    assert summary.balance == Decimal("0.00")


@pytest.mark.parametrize(
    ("kind", "amount", "income_delta", "expense_delta"),
    [
        ("income", "1000.00", Decimal("1000.00"), Decimal("0")),
        ("expense", "12.34", Decimal("0"), Decimal("12.34")),
    ],
)
def test_each_entry_moves_exactly_one_total(
    store: LedgerStore,
    aggregator: BalanceAggregator,
    owner_id: uuid.UUID,
    kind: str,
    amount: str,
    income_delta: Decimal,
    expense_delta: Decimal,
) -> None:
    """Adding an entry changes only the total matching its kind, by its amount."""
    store.insert(owner_id, "seed income", "income", "50.00")
    store.insert(owner_id, "seed expense", "expense", "20.00")
    before = aggregator.summarize(owner_id)

    store.insert(owner_id, "new", kind, amount)
    after = aggregator.summarize(owner_id)

    assert after.total_income - before.total_income == income_delta
    assert after.total_expenses - before.total_expenses == expense_delta
    assert after.balance == after.total_income - after.total_expenses


def test_cents_do_not_drift(store: LedgerStore, aggregator: BalanceAggregator, owner_id: uuid.UUID) -> None:
    """Sums of cent values should stay exact."""
    for _ in range(10):
        store.insert(owner_id, "dime", "income", "0.10")
    store.insert(owner_id, "fee", "expense", "0.30")

    summary = aggregator.summarize(owner_id)
    assert summary.total_income == Decimal("1.00")
    assert summary.balance == Decimal("0.70")
    assert str(summary.balance) == "0.70"


def test_balance_can_be_negative_and_is_owner_scoped(
    store: LedgerStore,
    aggregator: BalanceAggregator,
    owner_id: uuid.UUID,
    other_owner_id: uuid.UUID,
) -> None:
    """Other accounts' entries never affect the summary."""
    store.insert(owner_id, "Rent", "expense", "800")
    store.insert(owner_id, "Gift", "income", "100")
    store.insert(other_owner_id, "Salary", "income", "5000")

    summary = aggregator.summarize(owner_id)
    assert summary.total_income == Decimal("100.00")
    assert summary.total_expenses == Decimal("800.00")
    assert summary.balance == Decimal("-700.00")
