"""API routes package."""

from fastapi import APIRouter

from wallet_admin.api.routes.admin_notifications import router as admin_notifications_router
from wallet_admin.api.routes.admin_transactions import router as admin_transactions_router
from wallet_admin.api.routes.admin_users import router as admin_users_router
from wallet_admin.api.routes.health import router as health_router
from wallet_admin.api.routes.transactions import router as transactions_router

# Routes always exposed; the notification test route is added per environment
api_router = APIRouter()
api_router.include_router(transactions_router)
api_router.include_router(admin_transactions_router)
api_router.include_router(admin_users_router)


__all__ = [
    "api_router",
    "admin_notifications_router",
    "admin_transactions_router",
    "admin_users_router",
    "health_router",
    "transactions_router",
]
