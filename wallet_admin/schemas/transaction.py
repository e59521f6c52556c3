"""Deposit/withdrawal request and review schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from wallet_admin.domain.models.transaction import TransactionKind, TransactionStatus


class DepositCreate(BaseModel):
    """Schema for a user-initiated deposit request."""

    # Amount rules are enforced by the service so they map to InvalidAmountError
    amount: Decimal = Field(..., description="Amount to deposit")
    currency: str = Field(..., min_length=1, max_length=16, description="Currency code, e.g. btc")
    tx_hash: str | None = Field(None, max_length=255, description="On-chain transaction hash")


class WithdrawalCreate(BaseModel):
    """Schema for a user-initiated withdrawal request."""

    amount: Decimal = Field(..., description="Amount to withdraw")
    currency: str = Field(..., min_length=1, max_length=16)
    to_address: str | None = Field(None, max_length=255, description="Destination address")


class RejectRequest(BaseModel):
    reason: str | None = Field(None, max_length=500, description="Shown in the admin notification")


class TransactionResponse(BaseModel):
    """Response schema for a wallet transaction."""

    id: UUID
    transaction_id: str
    account_id: UUID
    kind: TransactionKind
    amount: Decimal
    currency: str
    status: TransactionStatus
    to_address: str | None = None
    tx_hash: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    resolved_at: datetime | None = None
    resolved_by: str | None = None


class NotificationSummary(BaseModel):
    """Admin fan-out result attached to transaction responses."""

    template: str
    success: bool
    error: str | None = None
    recipients: int = 0
    delivered: int = 0
    simulated: int = 0
    failed: int = 0
    results: list[dict[str, Any]] = Field(default_factory=list)


class TransactionActionResponse(BaseModel):
    """A created or resolved transaction plus the notification it triggered."""

    transaction: TransactionResponse
    notification: NotificationSummary | None = None


class PendingTransactionsResponse(BaseModel):
    transactions: list[TransactionResponse]
    total: int
