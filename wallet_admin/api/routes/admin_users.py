"""API routes for admin account management."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from wallet_admin.core.dependencies import RequireAdmin, get_account_service
from wallet_admin.persistence.base import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from wallet_admin.schemas.account import (
    AccountListResponse,
    AccountResponse,
    AccountStatusResponse,
    StatusUpdateRequest,
    SuspendedAccountsResponse,
)
from wallet_admin.services.account_service import AccountAdminService

router = APIRouter(prefix="/admin/users", tags=["admin-users"])


@router.get("", response_model=AccountListResponse)
async def list_users(
    current_user: RequireAdmin,
    search: str | None = Query(None, max_length=255),
    service: AccountAdminService = Depends(get_account_service),
) -> dict:
    """List all accounts, optionally filtered by a search term."""
    return await service.list_all(search=search)


@router.get("/suspended", response_model=SuspendedAccountsResponse)
async def list_suspended_users(
    current_user: RequireAdmin,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    search: str | None = Query(None, max_length=255),
    service: AccountAdminService = Depends(get_account_service),
) -> dict:
    return await service.list_suspended(search=search, page=page, limit=limit)


@router.get("/{account_id}", response_model=AccountResponse)
async def get_user(
    account_id: UUID,
    current_user: RequireAdmin,
    service: AccountAdminService = Depends(get_account_service),
) -> dict:
    return await service.get_account(account_id)


@router.put("/{account_id}/status", response_model=AccountStatusResponse)
async def update_user_status(
    account_id: UUID,
    request: StatusUpdateRequest,
    current_user: RequireAdmin,
    service: AccountAdminService = Depends(get_account_service),
) -> dict:
    """Set the active flag. Deactivating yourself goes through the suspend rules."""
    if not request.is_active:
        return await service.suspend(account_id, acting_admin_id=current_user.user_id)
    return await service.set_status(account_id, True)


@router.put("/{account_id}/suspend", response_model=AccountStatusResponse)
async def suspend_user(
    account_id: UUID,
    current_user: RequireAdmin,
    service: AccountAdminService = Depends(get_account_service),
) -> dict:
    """Suspend an account. Admins cannot suspend themselves."""
    return await service.suspend(account_id, acting_admin_id=current_user.user_id)


@router.put("/{account_id}/activate", response_model=AccountStatusResponse)
async def activate_user(
    account_id: UUID,
    current_user: RequireAdmin,
    service: AccountAdminService = Depends(get_account_service),
) -> dict:
    return await service.activate(account_id, acting_admin_id=current_user.user_id)
