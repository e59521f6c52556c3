"""Wallet transaction models and lifecycle rules."""

import secrets
from decimal import Decimal
from enum import Enum


class TransactionKind(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not TransactionStatus.PENDING


REFERENCE_PREFIX = "TX"


def generate_reference() -> str:
    """Build the human-facing transaction reference shown to admins."""
    return REFERENCE_PREFIX + secrets.token_hex(6).upper()


def balance_delta_on_resolve(
    kind: TransactionKind, status: TransactionStatus, amount: Decimal
) -> Decimal:
    """Balance change applied when an admin resolves a pending request.

    Deposits are credited on confirmation. Withdrawals were debited at
    creation, so only a rejection touches the balance (releasing the hold).
    """
    if kind is TransactionKind.DEPOSIT and status is TransactionStatus.CONFIRMED:
        return amount
    if kind is TransactionKind.WITHDRAWAL and status is TransactionStatus.REJECTED:
        return amount
    return Decimal("0")
