"""Health check routes."""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from wallet_admin import __version__
from wallet_admin.core.database import get_session
from wallet_admin.core.dependencies import get_mail_transport
from wallet_admin.notifications.transport import MailTransportHandle

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str


class ReadyResponse(BaseModel):
    """Readiness check response."""

    status: str
    database: str
    mail_transport: str


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is running.",
)
async def health_check() -> HealthResponse:
    """Return service health status."""
    return HealthResponse(status="healthy", version=__version__)


@router.get(
    "/ready",
    response_model=ReadyResponse,
    summary="Readiness check",
    description="Check the database connection and report the mail transport state.",
)
async def readiness_check(
    session: AsyncSession = Depends(get_session),
    transport: MailTransportHandle = Depends(get_mail_transport),
) -> ReadyResponse:
    """Return service readiness status.

    A disabled mail transport does not make the service unready; sends are
    simulated in that mode.
    """
    try:
        await session.execute(text("SELECT 1"))
        database = "connected"
    except Exception as e:
        logger.warning("Readiness database check failed", extra={"error": str(e)})
        database = "disconnected"

    return ReadyResponse(
        status="ready" if database == "connected" else "degraded",
        database=database,
        mail_transport=transport.state.value,
    )


@router.get(
    "/live",
    summary="Liveness check",
    description="Kubernetes liveness probe endpoint.",
)
async def liveness_check() -> dict:
    """Return liveness status."""
    return {"status": "alive"}
