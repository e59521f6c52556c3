"""Wallet transaction repository using SQLAlchemy 2.0 async.

Table: custody.wallet_transactions

Resolution is a compare-and-set on ``status``: the UPDATE only matches a
row that is still ``pending``, so of two concurrent confirm/reject calls
exactly one gets a row back.
"""

import json
import logging
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from wallet_admin.domain.models.transaction import TransactionKind, TransactionStatus

logger = logging.getLogger(__name__)

TRANSACTION_COLUMNS = """
    id, transaction_id, account_id, kind, amount, currency, status,
    to_address, tx_hash, metadata, created_at, resolved_at, resolved_by
"""


class TransactionRepository:
    """Repository for custody.wallet_transactions data access."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        id: UUID,
        transaction_id: str,
        account_id: UUID,
        kind: TransactionKind,
        amount: Decimal,
        currency: str,
        to_address: str | None = None,
        tx_hash: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Insert a pending transaction."""
        result = await self.session.execute(
            text(f"""
                INSERT INTO custody.wallet_transactions (
                    id, transaction_id, account_id, kind, amount, currency, status,
                    to_address, tx_hash, metadata, created_at
                ) VALUES (
                    :id, :transaction_id, :account_id, :kind, :amount, :currency, :status,
                    :to_address, :tx_hash, CAST(:metadata AS JSONB), NOW()
                )
                RETURNING {TRANSACTION_COLUMNS}
            """),
            {
                "id": id,
                "transaction_id": transaction_id,
                "account_id": account_id,
                "kind": kind.value,
                "amount": amount,
                "currency": currency,
                "status": TransactionStatus.PENDING.value,
                "to_address": to_address,
                "tx_hash": tx_hash,
                "metadata": json.dumps(metadata or {}),
            },
        )
        return self._row_to_dict(result.fetchone())

    async def get_by_id(self, id: UUID) -> dict[str, Any] | None:
        """Get transaction by primary key."""
        result = await self.session.execute(
            text(f"""
                SELECT {TRANSACTION_COLUMNS}
                FROM custody.wallet_transactions
                WHERE id = :id
            """),
            {"id": id},
        )
        row = result.fetchone()
        if row is None:
            return None
        return self._row_to_dict(row)

    async def list_pending(
        self,
        kind: TransactionKind | None = None,
        limit: int = 100,
    ) -> list[dict[str, Any]]:
        """Pending transactions, oldest first (review queue order)."""
        conditions = ["status = :status"]
        params: dict[str, Any] = {"status": TransactionStatus.PENDING.value, "limit": limit}
        if kind is not None:
            conditions.append("kind = :kind")
            params["kind"] = kind.value

        result = await self.session.execute(
            text(f"""
                SELECT {TRANSACTION_COLUMNS}
                FROM custody.wallet_transactions
                WHERE {" AND ".join(conditions)}
                ORDER BY created_at ASC, id ASC
                LIMIT :limit
            """),
            params,
        )
        return [self._row_to_dict(row) for row in result.fetchall()]

    async def resolve(
        self,
        id: UUID,
        status: TransactionStatus,
        resolved_by: str,
    ) -> dict[str, Any] | None:
        """Move a pending transaction to a terminal status.

        Returns the updated row, or None when the row is missing or no
        longer pending.
        """
        if not status.is_terminal:
            raise ValueError(f"Cannot resolve to non-terminal status {status.value}")

        result = await self.session.execute(
            text(f"""
                UPDATE custody.wallet_transactions
                SET status = :status,
                    resolved_by = :resolved_by,
                    resolved_at = NOW()
                WHERE id = :id
                  AND status = :pending
                RETURNING {TRANSACTION_COLUMNS}
            """),
            {
                "id": id,
                "status": status.value,
                "resolved_by": resolved_by,
                "pending": TransactionStatus.PENDING.value,
            },
        )
        row = result.fetchone()
        if row is None:
            return None
        return self._row_to_dict(row)

    async def merge_metadata(self, id: UUID, values: dict[str, Any]) -> dict[str, Any] | None:
        """Merge keys into the metadata object and return the updated row."""
        result = await self.session.execute(
            text(f"""
                UPDATE custody.wallet_transactions
                SET metadata = COALESCE(metadata, CAST('{{}}' AS JSONB)) || CAST(:values AS JSONB)
                WHERE id = :id
                RETURNING {TRANSACTION_COLUMNS}
            """),
            {"id": id, "values": json.dumps(values, default=str)},
        )
        row = result.fetchone()
        if row is None:
            return None
        return self._row_to_dict(row)

    def _row_to_dict(self, row: Any) -> dict[str, Any]:
        data = dict(row._mapping)
        if isinstance(data.get("metadata"), str):
            data["metadata"] = json.loads(data["metadata"])
        if data.get("metadata") is None:
            data["metadata"] = {}
        return data
