"""Account repository using SQLAlchemy 2.0 async.

Table: custody.accounts

Balance changes go through single-statement updates only
(``balance = balance + :delta``), never a read followed by a write, so
concurrent requests against the same account cannot lose an update.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from wallet_admin.domain.models.account import AccountRole
from wallet_admin.persistence.base import like_pattern

logger = logging.getLogger(__name__)

# password_hash is deliberately absent
ACCOUNT_COLUMNS = """
    id, email, first_name, last_name, phone, country, role, is_active,
    balance, kyc_status, last_login, created_at, updated_at
"""

# Columns an admin patch may touch
_UPDATABLE_COLUMNS = {"is_active", "first_name", "last_name", "phone", "country", "kyc_status"}
_SEARCHABLE_COLUMNS = {"email", "first_name", "last_name", "phone", "country"}


@dataclass(frozen=True)
class AccountQuery:
    """Predicates supported by the account directory."""

    role: AccountRole | None = None
    is_active: bool | None = None
    search: str | None = None
    search_fields: tuple[str, ...] = ("email", "first_name", "last_name")

    def to_sql(self) -> tuple[str, dict[str, Any]]:
        """Render the WHERE clause and its bind parameters."""
        conditions: list[str] = []
        params: dict[str, Any] = {}

        if self.role is not None:
            conditions.append("role = :role")
            params["role"] = self.role.value
        if self.is_active is not None:
            conditions.append("is_active = :is_active")
            params["is_active"] = self.is_active
        if self.search:
            unknown = set(self.search_fields) - _SEARCHABLE_COLUMNS
            if unknown:
                raise ValueError(f"Unsupported search fields: {sorted(unknown)}")
            matches = [f"{field} ILIKE :search ESCAPE '\\'" for field in self.search_fields]
            conditions.append("(" + " OR ".join(matches) + ")")
            params["search"] = like_pattern(self.search)

        where = " AND ".join(conditions) if conditions else "TRUE"
        return where, params


class AccountRepository:
    """Repository for custody.accounts data access."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, account_id: UUID) -> dict[str, Any] | None:
        """Get account by ID."""
        result = await self.session.execute(
            text(f"""
                SELECT {ACCOUNT_COLUMNS}
                FROM custody.accounts
                WHERE id = :account_id
            """),
            {"account_id": account_id},
        )
        row = result.fetchone()
        if row is None:
            return None
        return self._row_to_dict(row)

    async def find(
        self,
        query: AccountQuery,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """Find accounts matching a query, newest first."""
        where, params = query.to_sql()
        sql = f"""
            SELECT {ACCOUNT_COLUMNS}
            FROM custody.accounts
            WHERE {where}
            ORDER BY created_at DESC, id DESC
        """
        if limit is not None:
            sql += " LIMIT :limit OFFSET :offset"
            params.update({"limit": limit, "offset": offset})

        result = await self.session.execute(text(sql), params)
        return [self._row_to_dict(row) for row in result.fetchall()]

    async def count(self, query: AccountQuery) -> int:
        """Count accounts matching a query."""
        where, params = query.to_sql()
        result = await self.session.execute(
            text(f"SELECT COUNT(*) FROM custody.accounts WHERE {where}"),
            params,
        )
        return int(result.scalar_one())

    async def update_by_id(self, account_id: UUID, patch: dict[str, Any]) -> dict[str, Any] | None:
        """Apply a partial update and return the updated account."""
        unknown = set(patch) - _UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Cannot update columns: {sorted(unknown)}")
        if not patch:
            return await self.get_by_id(account_id)

        assignments = [f"{column} = :{column}" for column in sorted(patch)]
        assignments.append("updated_at = NOW()")
        result = await self.session.execute(
            text(f"""
                UPDATE custody.accounts
                SET {", ".join(assignments)}
                WHERE id = :account_id
                RETURNING {ACCOUNT_COLUMNS}
            """),
            {"account_id": account_id, **patch},
        )
        row = result.fetchone()
        if row is None:
            return None
        return self._row_to_dict(row)

    async def adjust_balance(self, account_id: UUID, delta: Decimal) -> Decimal | None:
        """Atomically add ``delta`` to the balance. Returns the new balance."""
        result = await self.session.execute(
            text("""
                UPDATE custody.accounts
                SET balance = balance + :delta,
                    updated_at = NOW()
                WHERE id = :account_id
                RETURNING balance
            """),
            {"account_id": account_id, "delta": delta},
        )
        return result.scalar_one_or_none()

    async def debit_if_sufficient(self, account_id: UUID, amount: Decimal) -> Decimal | None:
        """Atomically debit ``amount`` when the balance covers it.

        Returns the new balance, or None when the account is missing or the
        balance is too low.
        """
        result = await self.session.execute(
            text("""
                UPDATE custody.accounts
                SET balance = balance - :amount,
                    updated_at = NOW()
                WHERE id = :account_id
                  AND balance >= :amount
                RETURNING balance
            """),
            {"account_id": account_id, "amount": amount},
        )
        return result.scalar_one_or_none()

    async def list_admin_emails(self) -> list[str]:
        """Email addresses of every admin account."""
        result = await self.session.execute(
            text("""
                SELECT email
                FROM custody.accounts
                WHERE role = :role
                ORDER BY created_at
            """),
            {"role": AccountRole.ADMIN.value},
        )
        return [row.email for row in result.fetchall()]

    def _row_to_dict(self, row: Any) -> dict[str, Any]:
        data = dict(row._mapping)
        data.pop("password_hash", None)
        return data
