"""API routes for the admin transaction review queue."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from wallet_admin.core.dependencies import RequireAdmin, get_transaction_service
from wallet_admin.domain.models.transaction import TransactionKind
from wallet_admin.schemas.transaction import (
    PendingTransactionsResponse,
    RejectRequest,
    TransactionActionResponse,
    TransactionResponse,
)
from wallet_admin.services.transaction_service import TransactionService

router = APIRouter(prefix="/admin/transactions", tags=["admin-transactions"])


@router.get("/pending", response_model=PendingTransactionsResponse)
async def list_pending(
    current_user: RequireAdmin,
    kind: TransactionKind | None = Query(None, description="Filter by deposit or withdrawal"),
    limit: int = Query(100, ge=1, le=500),
    service: TransactionService = Depends(get_transaction_service),
) -> dict:
    """List pending transactions, oldest first."""
    transactions = await service.list_pending(kind=kind, limit=limit)
    return {"transactions": transactions, "total": len(transactions)}


@router.get("/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
    transaction_id: UUID,
    current_user: RequireAdmin,
    service: TransactionService = Depends(get_transaction_service),
) -> dict:
    return await service.get(transaction_id)


@router.post("/{transaction_id}/confirm", response_model=TransactionActionResponse)
async def confirm_transaction(
    transaction_id: UUID,
    current_user: RequireAdmin,
    service: TransactionService = Depends(get_transaction_service),
) -> dict:
    """Confirm a pending transaction.

    Deposits are credited to the account; withdrawals were already debited
    when requested.
    """
    result = await service.confirm(transaction_id, admin_id=current_user.user_id)
    return {"transaction": result.transaction, "notification": result.notification_summary()}


@router.post("/{transaction_id}/reject", response_model=TransactionActionResponse)
async def reject_transaction(
    transaction_id: UUID,
    current_user: RequireAdmin,
    request: RejectRequest | None = None,
    service: TransactionService = Depends(get_transaction_service),
) -> dict:
    """Reject a pending transaction. Withdrawal holds are returned."""
    result = await service.reject(
        transaction_id,
        admin_id=current_user.user_id,
        reason=request.reason if request else None,
    )
    return {"transaction": result.transaction, "notification": result.notification_summary()}
