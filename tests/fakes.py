"""In-memory stand-ins for the SQL repositories and the mail transport.

The fakes keep the same atomic contracts as the SQL versions: every
check-and-write happens without an await in between, so it cannot
interleave with another coroutine.
"""

from __future__ import annotations

import copy
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from email.message import EmailMessage
from typing import Any
from uuid import UUID, uuid4

from wallet_admin.domain.models.transaction import TransactionKind, TransactionStatus
from wallet_admin.persistence.account_repository import AccountQuery

_EPOCH = datetime(2024, 1, 1, tzinfo=UTC)


class FakeAccountRepository:
    def __init__(self) -> None:
        self.rows: dict[UUID, dict[str, Any]] = {}
        self.fail_admin_lookup: Exception | None = None

    def add(self, **fields: Any) -> dict[str, Any]:
        account_id = fields.pop("id", None) or uuid4()
        row = {
            "id": account_id,
            "email": "user@example.com",
            "first_name": "Test",
            "last_name": "User",
            "phone": None,
            "country": None,
            "role": "user",
            "is_active": True,
            "balance": Decimal("0"),
            "kyc_status": "not_submitted",
            "last_login": None,
            # Later additions are newer
            "created_at": _EPOCH + timedelta(minutes=len(self.rows)),
            "updated_at": _EPOCH,
            "password_hash": "hashed",
        }
        row.update(fields)
        self.rows[account_id] = row
        return self._public(row)

    def balance(self, account_id: UUID) -> Decimal:
        return self.rows[account_id]["balance"]

    def _public(self, row: dict[str, Any]) -> dict[str, Any]:
        data = copy.deepcopy(row)
        data.pop("password_hash", None)
        return data

    def _matches(self, row: dict[str, Any], query: AccountQuery) -> bool:
        if query.role is not None and row["role"] != query.role.value:
            return False
        if query.is_active is not None and row["is_active"] != query.is_active:
            return False
        if query.search:
            term = query.search.lower()
            return any(term in (row.get(field) or "").lower() for field in query.search_fields)
        return True

    async def get_by_id(self, account_id: UUID) -> dict[str, Any] | None:
        row = self.rows.get(account_id)
        return self._public(row) if row else None

    async def find(
        self, query: AccountQuery, limit: int | None = None, offset: int = 0
    ) -> list[dict[str, Any]]:
        matched = [r for r in self.rows.values() if self._matches(r, query)]
        matched.sort(key=lambda r: (r["created_at"], str(r["id"])), reverse=True)
        if limit is not None:
            matched = matched[offset : offset + limit]
        return [self._public(r) for r in matched]

    async def count(self, query: AccountQuery) -> int:
        return sum(1 for r in self.rows.values() if self._matches(r, query))

    async def update_by_id(self, account_id: UUID, patch: dict[str, Any]) -> dict[str, Any] | None:
        row = self.rows.get(account_id)
        if row is None:
            return None
        row.update(patch)
        return self._public(row)

    async def adjust_balance(self, account_id: UUID, delta: Decimal) -> Decimal | None:
        row = self.rows.get(account_id)
        if row is None:
            return None
        row["balance"] += delta
        return row["balance"]

    async def debit_if_sufficient(self, account_id: UUID, amount: Decimal) -> Decimal | None:
        row = self.rows.get(account_id)
        if row is None or row["balance"] < amount:
            return None
        row["balance"] -= amount
        return row["balance"]

    async def list_admin_emails(self) -> list[str]:
        if self.fail_admin_lookup is not None:
            raise self.fail_admin_lookup
        admins = sorted(
            (r for r in self.rows.values() if r["role"] == "admin"), key=lambda r: r["created_at"]
        )
        return [r["email"] for r in admins]


class FakeTransactionRepository:
    def __init__(self) -> None:
        self.rows: dict[UUID, dict[str, Any]] = {}
        self._clock = _EPOCH

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

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
        row = {
            "id": id,
            "transaction_id": transaction_id,
            "account_id": account_id,
            "kind": kind.value,
            "amount": amount,
            "currency": currency,
            "status": TransactionStatus.PENDING.value,
            "to_address": to_address,
            "tx_hash": tx_hash,
            "metadata": dict(metadata or {}),
            "created_at": self._tick(),
            "resolved_at": None,
            "resolved_by": None,
        }
        self.rows[id] = row
        return copy.deepcopy(row)

    async def get_by_id(self, id: UUID) -> dict[str, Any] | None:
        row = self.rows.get(id)
        return copy.deepcopy(row) if row else None

    async def list_pending(
        self, kind: TransactionKind | None = None, limit: int = 100
    ) -> list[dict[str, Any]]:
        rows = [
            r
            for r in self.rows.values()
            if r["status"] == TransactionStatus.PENDING.value
            and (kind is None or r["kind"] == kind.value)
        ]
        rows.sort(key=lambda r: (r["created_at"], str(r["id"])))
        return [copy.deepcopy(r) for r in rows[:limit]]

    async def resolve(
        self, id: UUID, status: TransactionStatus, resolved_by: str
    ) -> dict[str, Any] | None:
        if not status.is_terminal:
            raise ValueError(f"Cannot resolve to non-terminal status {status.value}")
        row = self.rows.get(id)
        if row is None or row["status"] != TransactionStatus.PENDING.value:
            return None
        row.update(status=status.value, resolved_by=resolved_by, resolved_at=self._tick())
        return copy.deepcopy(row)

    async def merge_metadata(self, id: UUID, values: dict[str, Any]) -> dict[str, Any] | None:
        row = self.rows.get(id)
        if row is None:
            return None
        row["metadata"] = {**row["metadata"], **values}
        return copy.deepcopy(row)


class RecordingTransport:
    """Mail transport that records messages and can fail chosen recipients."""

    def __init__(self, fail_for: set[str] | None = None) -> None:
        self.sent: list[EmailMessage] = []
        self.fail_for = fail_for or set()

    @property
    def recipients(self) -> list[str]:
        return [m["To"] for m in self.sent]

    async def send(self, message: EmailMessage) -> str:
        if message["To"] in self.fail_for:
            raise ConnectionError(f"550 mailbox unavailable: {message['To']}")
        self.sent.append(message)
        return f"<{len(self.sent)}@test>"
