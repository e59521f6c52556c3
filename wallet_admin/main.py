"""Wallet Admin Service.

Admin backend for a custodial wallet: account management plus the
deposit/withdrawal review workflow with admin email notifications.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from wallet_admin.api.routes import admin_notifications_router, api_router, health_router
from wallet_admin.core.config import AppEnvironment, Settings, get_settings
from wallet_admin.core.database import get_engine, get_session_factory, reset_engine
from wallet_admin.core.errors import WalletAdminError, get_status_code
from wallet_admin.core.logging import setup_logging
from wallet_admin.notifications.transport import init_mail_transport

logger = logging.getLogger(__name__)

# API version prefix
API_V1_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan context manager."""
    settings = get_settings()
    setup_logging(settings)

    logger.info(
        "Starting Wallet Admin Service",
        extra={
            "app": settings.app.name,
            "env": settings.app.env,
            "version": settings.app.version,
        },
    )

    engine = get_engine()
    session_factory = get_session_factory()

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.mail_transport = init_mail_transport(settings.mail)

    logger.info(
        "Mail transport initialized",
        extra={"state": app.state.mail_transport.state.value},
    )

    yield

    await reset_engine()

    logger.info("Wallet Admin Service stopped")


def debug_routes_enabled(settings: Settings) -> bool:
    """The notification test route is never exposed in production."""
    return settings.app.env != AppEnvironment.PROD and settings.features.enable_debug_email


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Wallet Admin API",
        description=(
            "Administrative API for a custodial wallet: account suspension and search, "
            "deposit/withdrawal review and admin email notifications."
        ),
        version=settings.app.version,
        lifespan=lifespan,
        docs_url="/docs" if settings.app.env != AppEnvironment.PROD else None,
        redoc_url="/redoc" if settings.app.env != AppEnvironment.PROD else None,
        openapi_url="/openapi.json" if settings.app.env != AppEnvironment.PROD else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.cors_allowed_origins,
        allow_credentials=settings.security.cors_allow_credentials,
        allow_methods=settings.security.cors_allow_methods,
        allow_headers=settings.security.cors_allow_headers,
    )

    app.include_router(health_router, prefix=API_V1_PREFIX)
    app.include_router(api_router, prefix=API_V1_PREFIX)
    if debug_routes_enabled(settings):
        app.include_router(admin_notifications_router, prefix=API_V1_PREFIX)

    setup_telemetry(app, settings)

    @app.exception_handler(WalletAdminError)
    async def domain_error_handler(  # type: ignore[reportUnusedFunction]
        request: Request, exc: WalletAdminError
    ) -> JSONResponse:
        """Handle domain-specific errors and return appropriate HTTP responses."""
        status_code = get_status_code(exc)
        if status_code >= 500:
            logger.error(
                "Domain error",
                extra={"path": request.url.path, "error": exc.message, "details": exc.details},
            )
        return JSONResponse(
            status_code=status_code,
            content={"detail": exc.message, **({"errors": exc.details} if exc.details else {})},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(  # type: ignore[reportUnusedFunction]
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions and return 500 error responses."""
        logger.exception(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    return app


def setup_telemetry(app: FastAPI, settings: Settings) -> None:
    """Setup OpenTelemetry instrumentation."""
    if not settings.observability.otlp_endpoint:
        return

    resource = Resource(
        attributes={
            SERVICE_NAME: settings.observability.service_name,
        }
    )

    provider = TracerProvider(resource=resource)
    exporter = OTLPSpanExporter(
        endpoint=settings.observability.otlp_endpoint,
        insecure=settings.observability.otlp_insecure,
    )
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    FastAPIInstrumentor.instrument_app(app)


def run() -> None:
    """Run the application using uvicorn."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "wallet_admin.main:create_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.app.env == AppEnvironment.LOCAL,
        workers=1 if settings.app.env == AppEnvironment.LOCAL else settings.server.workers,
        log_level=settings.app.log_level.value.lower(),
    )


if __name__ == "__main__":
    run()
