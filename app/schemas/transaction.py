"""Ledger transaction schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel, Field, PlainSerializer, field_validator

from app.db.models import EntryKind, LedgerEntry
from app.utils.time import ensure_utc

# Amounts leave the API as fixed two-digit decimal strings, never floats.
Money = Annotated[
    Decimal,
    PlainSerializer(lambda value: f"{value:.2f}", return_type=str, when_used="json"),
]

MIN_AMOUNT = Decimal("0.01")


class TransactionCreate(BaseModel):
    """Request body for recording an income or expense."""

    title: str = Field(..., min_length=1, max_length=255)
    type: EntryKind
    amount: Decimal = Field(..., ge=MIN_AMOUNT, max_digits=10, decimal_places=2)


class TransactionUpdate(BaseModel):
    """Partial update; omitted fields are left untouched."""

    title: str | None = Field(None, min_length=1, max_length=255)
    type: EntryKind | None = None
    amount: Decimal | None = Field(None, ge=MIN_AMOUNT, max_digits=10, decimal_places=2)

    @field_validator("title", "type", "amount", mode="before")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        # Omitting a field leaves it untouched; null is not a way to clear it.
        if value is None:
            raise ValueError("Field cannot be null")
        return value

    def changed_fields(self) -> dict[str, Any]:
        """Return supplied fields keyed by their storage names."""
        supplied = self.model_dump(exclude_unset=True)
        if "type" in supplied:
            supplied["kind"] = supplied.pop("type")
        return supplied


class TransactionResponse(BaseModel):
    """A single ledger entry with its owner."""

    id: UUID
    user_id: UUID
    title: str
    type: EntryKind
    amount: Money
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entry(cls, entry: LedgerEntry) -> TransactionResponse:
        return cls(
            id=entry.id,
            user_id=entry.owner_id,
            title=entry.title,
            type=EntryKind(entry.kind),
            amount=entry.amount,
            created_at=ensure_utc(entry.created_at),
            updated_at=ensure_utc(entry.updated_at),
        )


class TransactionListItem(BaseModel):
    """Ledger entry as shown in listings."""

    id: UUID
    title: str
    type: EntryKind
    amount: Money
    created_at: datetime

    @classmethod
    def from_entry(cls, entry: LedgerEntry) -> TransactionListItem:
        return cls(
            id=entry.id,
            title=entry.title,
            type=EntryKind(entry.kind),
            amount=entry.amount,
            created_at=ensure_utc(entry.created_at),
        )


class TransactionEnvelope(BaseModel):
    message: str
    transaction: TransactionResponse


class PaginationResponse(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class TransactionListResponse(BaseModel):
    transactions: list[TransactionListItem]
    pagination: PaginationResponse


class BalanceSummaryResponse(BaseModel):
    total_income: Money
    total_expenses: Money
    balance: Money


class BalanceResponse(BaseModel):
    summary: BalanceSummaryResponse


class MessageResponse(BaseModel):
    message: str
