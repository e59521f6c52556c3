"""Schemas package for request/response models."""

from wallet_admin.schemas.account import (
    AccountListResponse,
    AccountResponse,
    AccountStatusResponse,
    Pagination,
    StatusUpdateRequest,
    SuspendedAccount,
    SuspendedAccountsResponse,
)
from wallet_admin.schemas.notification import NotificationTestRequest, NotificationTestResponse
from wallet_admin.schemas.transaction import (
    DepositCreate,
    NotificationSummary,
    PendingTransactionsResponse,
    RejectRequest,
    TransactionActionResponse,
    TransactionResponse,
    WithdrawalCreate,
)

__all__ = [
    "AccountListResponse",
    "AccountResponse",
    "AccountStatusResponse",
    "Pagination",
    "StatusUpdateRequest",
    "SuspendedAccount",
    "SuspendedAccountsResponse",
    "NotificationTestRequest",
    "NotificationTestResponse",
    "DepositCreate",
    "NotificationSummary",
    "PendingTransactionsResponse",
    "RejectRequest",
    "TransactionActionResponse",
    "TransactionResponse",
    "WithdrawalCreate",
]
