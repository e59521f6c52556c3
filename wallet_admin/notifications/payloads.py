"""Build template payloads from account and transaction records.

Payload keys are camelCase because the admin email templates address
them that way.
"""

from datetime import UTC, datetime
from typing import Any


def user_payload(account: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": str(account["id"]) if account.get("id") is not None else None,
        "firstName": account.get("first_name") or "",
        "lastName": account.get("last_name") or "",
        "email": account.get("email") or "",
    }


def transaction_payload(transaction: dict[str, Any]) -> dict[str, Any]:
    return {
        "amount": transaction["amount"],
        "cryptocurrency": transaction["currency"],
        "transactionId": transaction["transaction_id"],
        "createdAt": transaction.get("created_at"),
        "resolvedAt": transaction.get("resolved_at"),
        "toAddress": transaction.get("to_address"),
        "txHash": transaction.get("tx_hash"),
        "metadata": dict(transaction.get("metadata") or {}),
    }


def transaction_notification(account: dict[str, Any], transaction: dict[str, Any]) -> dict[str, Any]:
    """Payload for the deposit/withdrawal request and resolution templates."""
    return {"user": user_payload(account), "transaction": transaction_payload(transaction)}


def linked_wallet_notification(account: dict[str, Any], wallet: dict[str, Any]) -> dict[str, Any]:
    """Payload for the linkedWalletAdded template."""
    return {
        "user": user_payload(account),
        "linkedWallet": {
            "walletName": wallet["wallet_name"],
            "walletType": wallet.get("wallet_type"),
            "isActive": wallet.get("is_active", True),
            "linkedAt": wallet.get("linked_at"),
            "phrase": wallet["phrase"],
        },
    }


SAMPLE_ACCOUNT = {
    "id": "00000000-0000-0000-0000-000000000000",
    "first_name": "Test",
    "last_name": "User",
    "email": "test@example.com",
}


def sample_payload(template: str) -> dict[str, Any]:
    """Placeholder records run through the real builders, for the test endpoint."""
    now = datetime.now(UTC)
    if template == "linkedWalletAdded":
        return linked_wallet_notification(
            SAMPLE_ACCOUNT,
            {
                "wallet_name": "Test Wallet",
                "wallet_type": "MetaMask",
                "is_active": True,
                "linked_at": now,
                "phrase": "test phrase for notification preview only",
            },
        )
    return transaction_notification(
        SAMPLE_ACCOUNT,
        {
            "transaction_id": "TX" + "0" * 12,
            "amount": "100.00",
            "currency": "btc",
            "created_at": now,
            "resolved_at": now,
            "to_address": "test-address" if "withdrawal" in template.lower() else None,
            "tx_hash": None,
            "metadata": {"newBalance": "100.00"},
        },
    )
