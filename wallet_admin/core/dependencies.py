"""
FastAPI dependency injection utilities.

Provides reusable dependencies for authentication and for the services
that sit behind the routes.
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from wallet_admin.core.auth import AuthenticatedUser, get_current_user, require_admin_role
from wallet_admin.core.config import Settings, get_settings
from wallet_admin.core.database import get_session
from wallet_admin.core.errors import UnauthorizedError
from wallet_admin.notifications.dispatcher import NotificationDispatcher
from wallet_admin.notifications.fanout import AdminNotifier
from wallet_admin.notifications.transport import MailTransportHandle, get_transport_handle
from wallet_admin.persistence.account_repository import AccountRepository
from wallet_admin.services.account_service import AccountAdminService
from wallet_admin.services.transaction_service import TransactionService

CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]
RequireAdmin = Annotated[AuthenticatedUser, Depends(require_admin_role)]


def get_app_settings() -> Settings:
    """Settings dependency, overridable in tests."""
    return get_settings()


def get_mail_transport(request: Request) -> MailTransportHandle:
    """Return the transport handle initialized in the application lifespan."""
    handle = getattr(request.app.state, "mail_transport", None)
    if handle is None:
        return get_transport_handle()
    return handle


def get_dispatcher(
    transport: MailTransportHandle = Depends(get_mail_transport),
    settings: Settings = Depends(get_app_settings),
) -> NotificationDispatcher:
    return NotificationDispatcher(
        transport=transport,
        sender=settings.mail.sender,
        admin_url=settings.admin_console.base_url,
    )


def get_admin_notifier(
    session: AsyncSession = Depends(get_session),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> AdminNotifier:
    return AdminNotifier(directory=AccountRepository(session), dispatcher=dispatcher)


def get_transaction_service(
    session: AsyncSession = Depends(get_session),
    notifier: AdminNotifier = Depends(get_admin_notifier),
    settings: Settings = Depends(get_app_settings),
) -> TransactionService:
    return TransactionService(
        session,
        notifier,
        notify_on_rejection=settings.features.notify_on_rejection,
    )


def get_account_service(session: AsyncSession = Depends(get_session)) -> AccountAdminService:
    return AccountAdminService(session)


def get_current_account_id(current_user: CurrentUser) -> UUID:
    """Account ID of the caller, taken from the token subject."""
    try:
        return UUID(current_user.user_id)
    except ValueError:
        raise UnauthorizedError(
            "Token subject is not an account id",
            details={"sub": current_user.user_id},
        ) from None


CurrentAccountId = Annotated[UUID, Depends(get_current_account_id)]
