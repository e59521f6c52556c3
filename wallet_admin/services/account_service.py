"""Admin actions on user accounts: suspend, activate, search."""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from wallet_admin.core.errors import NotFoundError, SelfActionForbiddenError
from wallet_admin.domain.models.account import (
    DIRECTORY_SEARCH_FIELDS,
    SUSPENDED_SEARCH_FIELDS,
    AccountRole,
    strip_credentials,
)
from wallet_admin.persistence.account_repository import AccountQuery, AccountRepository
from wallet_admin.persistence.base import PageRequest

logger = logging.getLogger(__name__)


def status_projection(account: dict[str, Any]) -> dict[str, Any]:
    """Shape returned by suspend/activate/status updates."""
    return {
        "id": account["id"],
        "email": account["email"],
        "firstName": account.get("first_name"),
        "lastName": account.get("last_name"),
        "isActive": account["is_active"],
    }


def suspended_projection(account: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": account["id"],
        "email": account["email"],
        "firstName": account.get("first_name"),
        "lastName": account.get("last_name"),
        "kycStatus": account.get("kyc_status"),
        "lastLogin": account.get("last_login"),
        "createdAt": account.get("created_at"),
    }


def _is_same_account(account_id: str | UUID, other_id: str | UUID) -> bool:
    """Compare IDs as UUIDs so case and hyphenation differences still match."""
    try:
        return UUID(str(account_id)) == UUID(str(other_id))
    except ValueError:
        return str(account_id) == str(other_id)


def directory_projection(account: dict[str, Any]) -> dict[str, Any]:
    """Full account view for the admin console, credentials removed."""
    account = strip_credentials(account)
    return {
        "id": account["id"],
        "email": account["email"],
        "firstName": account.get("first_name"),
        "lastName": account.get("last_name"),
        "phone": account.get("phone"),
        "country": account.get("country"),
        "role": account.get("role"),
        "isActive": account.get("is_active"),
        "balance": account.get("balance"),
        "kycStatus": account.get("kyc_status"),
        "lastLogin": account.get("last_login"),
        "createdAt": account.get("created_at"),
        "updatedAt": account.get("updated_at"),
    }


class AccountAdminService:
    """Service for admin account management."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = AccountRepository(session)

    async def get_account(self, account_id: UUID) -> dict[str, Any]:
        account = await self.repo.get_by_id(account_id)
        if account is None:
            raise NotFoundError("User not found", details={"account_id": str(account_id)})
        return directory_projection(account)

    async def set_status(self, account_id: UUID, is_active: bool) -> dict[str, Any]:
        """Set the active flag on an account."""
        account = await self.repo.update_by_id(account_id, {"is_active": is_active})
        if account is None:
            raise NotFoundError("User not found", details={"account_id": str(account_id)})

        logger.info(
            "Account status updated",
            extra={"account_id": str(account_id), "is_active": is_active},
        )
        return status_projection(account)

    async def suspend(self, account_id: UUID, acting_admin_id: str | UUID) -> dict[str, Any]:
        """Suspend an account. An admin can never suspend itself."""
        if _is_same_account(account_id, acting_admin_id):
            raise SelfActionForbiddenError(
                "Cannot suspend your own account",
                details={"account_id": str(account_id)},
            )
        result = await self.set_status(account_id, False)
        logger.info(
            "Account suspended",
            extra={"account_id": str(account_id), "suspended_by": str(acting_admin_id)},
        )
        return result

    async def activate(self, account_id: UUID, acting_admin_id: str | UUID) -> dict[str, Any]:
        result = await self.set_status(account_id, True)
        logger.info(
            "Account activated",
            extra={"account_id": str(account_id), "activated_by": str(acting_admin_id)},
        )
        return result

    async def list_suspended(
        self,
        search: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> dict[str, Any]:
        """Suspended end-user accounts, newest first, one page at a time."""
        page_request = PageRequest(page=page, limit=limit)
        query = AccountQuery(
            role=AccountRole.USER,
            is_active=False,
            search=search,
            search_fields=SUSPENDED_SEARCH_FIELDS,
        )

        accounts = await self.repo.find(
            query, limit=page_request.limit, offset=page_request.offset
        )
        total = await self.repo.count(query)

        return {
            "users": [suspended_projection(a) for a in accounts],
            "pagination": {
                "page": page_request.page,
                "limit": page_request.limit,
                "total": total,
                "pages": page_request.pages(total),
            },
        }

    async def list_all(self, search: str | None = None) -> dict[str, Any]:
        """Every account matching ``search``, newest first, unpaginated."""
        query = AccountQuery(search=search, search_fields=DIRECTORY_SEARCH_FIELDS)
        accounts = await self.repo.find(query)
        return {
            "users": [directory_projection(a) for a in accounts],
            "total": len(accounts),
        }
