"""API routes for user-initiated deposit and withdrawal requests."""

from fastapi import APIRouter, Depends, status

from wallet_admin.core.dependencies import CurrentAccountId, get_transaction_service
from wallet_admin.domain.models.transaction import TransactionKind
from wallet_admin.schemas.transaction import (
    DepositCreate,
    TransactionActionResponse,
    WithdrawalCreate,
)
from wallet_admin.services.transaction_service import TransactionService

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.post(
    "/deposits",
    response_model=TransactionActionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_deposit(
    request: DepositCreate,
    account_id: CurrentAccountId,
    service: TransactionService = Depends(get_transaction_service),
) -> dict:
    """Request a deposit. The balance is credited when an admin confirms it."""
    result = await service.create(
        TransactionKind.DEPOSIT,
        account_id=account_id,
        amount=request.amount,
        currency=request.currency,
        tx_hash=request.tx_hash,
    )
    return {"transaction": result.transaction, "notification": result.notification_summary()}


@router.post(
    "/withdrawals",
    response_model=TransactionActionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_withdrawal(
    request: WithdrawalCreate,
    account_id: CurrentAccountId,
    service: TransactionService = Depends(get_transaction_service),
) -> dict:
    """Request a withdrawal. The amount is held from the balance immediately."""
    result = await service.create(
        TransactionKind.WITHDRAWAL,
        account_id=account_id,
        amount=request.amount,
        currency=request.currency,
        to_address=request.to_address,
    )
    return {"transaction": result.transaction, "notification": result.notification_summary()}
