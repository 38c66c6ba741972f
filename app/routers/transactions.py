"""Ledger transaction endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.db.models import EntryKind
from app.dependencies import (
    get_balance_aggregator,
    get_current_principal,
    get_ledger_store,
    get_query_engine,
)
from app.schemas.transaction import (
    BalanceResponse,
    BalanceSummaryResponse,
    MessageResponse,
    PaginationResponse,
    TransactionCreate,
    TransactionEnvelope,
    TransactionListItem,
    TransactionListResponse,
    TransactionResponse,
    TransactionUpdate,
)
from app.services.balance_service import BalanceAggregator
from app.services.ledger_query import DEFAULT_LIMIT, DEFAULT_PAGE, LedgerQueryEngine
from app.services.ledger_store import LedgerStore
from app.services.session_service import Principal
from app.utils.errors import NotFoundError

router = APIRouter()


def _parse_entry_id(entry_id: str) -> UUID:
    # A malformed id cannot belong to the caller, so it is simply not found.
    try:
        return UUID(entry_id)
    except ValueError as exc:
        raise NotFoundError("Transaction") from exc


@router.post("", response_model=TransactionEnvelope, status_code=status.HTTP_201_CREATED)
def create_transaction(
    payload: TransactionCreate,
    principal: Principal = Depends(get_current_principal),
    store: LedgerStore = Depends(get_ledger_store),
) -> TransactionEnvelope:
    """Record an income or expense for the current account."""
    entry = store.insert(principal.account_id, payload.title, payload.type, payload.amount)
    return TransactionEnvelope(
        message="Transaction added successfully",
        transaction=TransactionResponse.from_entry(entry),
    )


@router.get("", response_model=TransactionListResponse)
def list_transactions(
    page: int = Query(default=DEFAULT_PAGE, ge=1),
    limit: int = Query(default=DEFAULT_LIMIT, ge=1),
    kind: EntryKind | None = Query(default=None, alias="type"),
    principal: Principal = Depends(get_current_principal),
    engine: LedgerQueryEngine = Depends(get_query_engine),
) -> TransactionListResponse:
    """Return the current account's entries, newest first."""
    result = engine.list(principal.account_id, page=page, limit=limit, kind=kind)
    return TransactionListResponse(
        transactions=[TransactionListItem.from_entry(entry) for entry in result.entries],
        pagination=PaginationResponse.model_validate(result.pagination, from_attributes=True),
    )


@router.get("/balance", response_model=BalanceResponse)
def get_balance(
    principal: Principal = Depends(get_current_principal),
    aggregator: BalanceAggregator = Depends(get_balance_aggregator),
) -> BalanceResponse:
    """Return income, expense and net totals for the current account."""
    summary = aggregator.summarize(principal.account_id)
    return BalanceResponse(
        summary=BalanceSummaryResponse.model_validate(summary, from_attributes=True)
    )


@router.put("/{entry_id}", response_model=TransactionEnvelope)
def update_transaction(
    entry_id: str,
    payload: TransactionUpdate,
    principal: Principal = Depends(get_current_principal),
    store: LedgerStore = Depends(get_ledger_store),
) -> TransactionEnvelope:
    """Change the supplied fields of one of the current account's entries."""
    entry = store.update_partial(
        principal.account_id, _parse_entry_id(entry_id), payload.changed_fields()
    )
    if entry is None:
        raise NotFoundError("Transaction")
    return TransactionEnvelope(
        message="Transaction updated successfully",
        transaction=TransactionResponse.from_entry(entry),
    )


@router.delete("/{entry_id}", response_model=MessageResponse)
def delete_transaction(
    entry_id: str,
    principal: Principal = Depends(get_current_principal),
    store: LedgerStore = Depends(get_ledger_store),
) -> MessageResponse:
    """Delete one of the current account's entries."""
    if not store.delete(principal.account_id, _parse_entry_id(entry_id)):
        raise NotFoundError("Transaction")
    return MessageResponse(message="Transaction deleted successfully")
