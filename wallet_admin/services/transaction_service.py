"""Deposit/withdrawal lifecycle and the balance side effects tied to it.

State changes are committed before admins are notified, so no row lock is
held while mail is being sent. Notification problems never fail a call;
they are returned alongside the transaction.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from wallet_admin.core.errors import (
    AlreadyResolvedError,
    InsufficientBalanceError,
    InvalidAmountError,
    NotFoundError,
    ValidationError,
)
from wallet_admin.domain.models.transaction import (
    TransactionKind,
    TransactionStatus,
    balance_delta_on_resolve,
    generate_reference,
)
from wallet_admin.notifications.fanout import AdminNotifier, FanoutResult
from wallet_admin.notifications.payloads import transaction_notification
from wallet_admin.notifications.templates import NotificationTemplate
from wallet_admin.persistence.account_repository import AccountRepository
from wallet_admin.persistence.transaction_repository import TransactionRepository

logger = logging.getLogger(__name__)

REQUEST_TEMPLATES = {
    TransactionKind.DEPOSIT: NotificationTemplate.DEPOSIT_REQUEST,
    TransactionKind.WITHDRAWAL: NotificationTemplate.WITHDRAWAL_REQUEST,
}

RESOLUTION_TEMPLATES = {
    (TransactionKind.DEPOSIT, TransactionStatus.CONFIRMED): NotificationTemplate.DEPOSIT_CONFIRMED,
    (TransactionKind.WITHDRAWAL, TransactionStatus.CONFIRMED): NotificationTemplate.WITHDRAWAL_PROCESSED,
    (TransactionKind.DEPOSIT, TransactionStatus.REJECTED): NotificationTemplate.DEPOSIT_REJECTED,
    (TransactionKind.WITHDRAWAL, TransactionStatus.REJECTED): NotificationTemplate.WITHDRAWAL_REJECTED,
}


@dataclass
class TransactionResult:
    """A transaction plus the admin notification it triggered, if any."""

    transaction: dict[str, Any]
    notification: FanoutResult | None = None

    def notification_summary(self) -> dict[str, Any] | None:
        return self.notification.summary() if self.notification else None


class TransactionService:
    """Service owning the pending -> confirmed | rejected workflow."""

    def __init__(
        self,
        session: AsyncSession,
        notifier: AdminNotifier,
        notify_on_rejection: bool = False,
    ):
        self.session = session
        self.notifier = notifier
        self.notify_on_rejection = notify_on_rejection
        self.accounts = AccountRepository(session)
        self.transactions = TransactionRepository(session)

    async def get(self, transaction_id: UUID) -> dict[str, Any]:
        """Get a transaction by ID."""
        transaction = await self.transactions.get_by_id(transaction_id)
        if transaction is None:
            raise NotFoundError(
                "Transaction not found", details={"transaction_id": str(transaction_id)}
            )
        return transaction

    async def list_pending(
        self, kind: TransactionKind | None = None, limit: int = 100
    ) -> list[dict[str, Any]]:
        """Pending transactions awaiting an admin decision, oldest first."""
        return await self.transactions.list_pending(kind=kind, limit=limit)

    async def create(
        self,
        kind: TransactionKind,
        account_id: UUID,
        amount: Decimal,
        currency: str,
        to_address: str | None = None,
        tx_hash: str | None = None,
    ) -> TransactionResult:
        """Create a pending deposit or withdrawal request.

        A withdrawal debits the balance immediately; a rejection later
        releases the hold.
        """
        amount = Decimal(amount)
        if not amount.is_finite() or amount <= 0:
            raise InvalidAmountError(
                "Amount must be greater than zero", details={"amount": str(amount)}
            )

        account = await self.accounts.get_by_id(account_id)
        if account is None:
            raise NotFoundError("Account not found", details={"account_id": str(account_id)})

        if kind is TransactionKind.WITHDRAWAL:
            if not to_address or not to_address.strip():
                raise ValidationError("Withdrawal requires a destination address")

            new_balance = await self.accounts.debit_if_sufficient(account_id, amount)
            if new_balance is None:
                raise InsufficientBalanceError(
                    "Insufficient balance",
                    details={
                        "account_id": str(account_id),
                        "requested": str(amount),
                        "available": str(account["balance"]),
                    },
                )
            account = {**account, "balance": new_balance}

        transaction = await self.transactions.create(
            id=uuid4(),
            transaction_id=generate_reference(),
            account_id=account_id,
            kind=kind,
            amount=amount,
            currency=currency.strip().lower(),
            to_address=to_address.strip() if to_address else None,
            tx_hash=tx_hash,
        )
        await self.session.commit()

        logger.info(
            "Transaction requested",
            extra={
                "transaction_id": transaction["transaction_id"],
                "kind": kind.value,
                "amount": str(amount),
                "account_id": str(account_id),
            },
        )

        notification = await self._notify(
            REQUEST_TEMPLATES[kind], transaction_notification(account, transaction)
        )
        return TransactionResult(transaction=transaction, notification=notification)

    async def confirm(self, transaction_id: UUID, admin_id: str) -> TransactionResult:
        """Confirm a pending transaction. Deposits are credited here."""
        return await self._resolve(transaction_id, TransactionStatus.CONFIRMED, admin_id)

    async def reject(
        self, transaction_id: UUID, admin_id: str, reason: str | None = None
    ) -> TransactionResult:
        """Reject a pending transaction. Held withdrawal funds are returned."""
        return await self._resolve(
            transaction_id, TransactionStatus.REJECTED, admin_id, reason=reason
        )

    async def _resolve(
        self,
        transaction_id: UUID,
        status: TransactionStatus,
        admin_id: str,
        reason: str | None = None,
    ) -> TransactionResult:
        # Compare-and-set: only one concurrent caller gets the row back
        transaction = await self.transactions.resolve(transaction_id, status, admin_id)
        if transaction is None:
            existing = await self.transactions.get_by_id(transaction_id)
            if existing is None:
                raise NotFoundError(
                    "Transaction not found", details={"transaction_id": str(transaction_id)}
                )
            raise AlreadyResolvedError(
                f"Transaction already {existing['status']}",
                details={
                    "transaction_id": str(transaction_id),
                    "current_status": existing["status"],
                    "requested_status": status.value,
                },
            )

        kind = TransactionKind(transaction["kind"])
        account_id = transaction["account_id"]
        delta = balance_delta_on_resolve(kind, status, Decimal(transaction["amount"]))
        if delta:
            if await self.accounts.adjust_balance(account_id, delta) is None:
                raise NotFoundError("Account not found", details={"account_id": str(account_id)})

        account = await self.accounts.get_by_id(account_id)
        if account is None:
            raise NotFoundError("Account not found", details={"account_id": str(account_id)})

        metadata: dict[str, Any] = {"newBalance": str(account["balance"])}
        if reason:
            metadata["reason"] = reason
        transaction = await self.transactions.merge_metadata(transaction_id, metadata) or transaction
        await self.session.commit()

        logger.info(
            "Transaction resolved",
            extra={
                "transaction_id": transaction["transaction_id"],
                "kind": kind.value,
                "status": status.value,
                "resolved_by": admin_id,
                "balance_delta": str(delta),
            },
        )

        if status is TransactionStatus.REJECTED and not self.notify_on_rejection:
            return TransactionResult(transaction=transaction)

        notification = await self._notify(
            RESOLUTION_TEMPLATES[(kind, status)], transaction_notification(account, transaction)
        )
        return TransactionResult(transaction=transaction, notification=notification)

    async def _notify(
        self, template: NotificationTemplate, payload: dict[str, Any]
    ) -> FanoutResult | None:
        try:
            return await self.notifier.notify(template, payload)
        except Exception:
            logger.exception(
                "Admin notification failed", extra={"template": template.value}
            )
            return None
