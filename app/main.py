import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from app.api.v1 import contact
from app.core.config import settings
from app.core.email import MailTransport, build_transport
from app.core.errors import StartupConfigurationFailure, register_exception_handlers
from app.core.logging import setup_logging
from app.core.middleware import OriginAllowListMiddleware, RequestIdMiddleware
from app.services.delivery_gateway import DeliveryGateway

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)


def create_app(transport: Optional[MailTransport] = None) -> FastAPI:
    """
    Build the application.

    The mail transport is created once here (or injected, e.g. by tests) and
    verified during startup; a failed verification aborts the lifespan so the
    server never accepts traffic with a broken mail setup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger.info(f"Starting {settings.PROJECT_NAME} v{settings.VERSION}")
        logger.info(f"Environment: {settings.ENVIRONMENT}")

        missing = settings.missing_mail_settings()
        if missing:
            raise StartupConfigurationFailure(
                f"missing mail settings: {', '.join(missing)}"
            )

        mail_transport = transport or build_transport(settings)
        gateway = DeliveryGateway(
            transport=mail_transport,
            sender_address=settings.EMAIL_USER,
            timeout_seconds=settings.MAIL_TIMEOUT_SECONDS,
        )
        try:
            await gateway.verify()
        except StartupConfigurationFailure as exc:
            logger.critical("Critical startup error, cannot verify mail transport: %s", exc)
            raise

        app.state.delivery_gateway = gateway
        logger.info(f"Allowed frontend origins: {', '.join(settings.cors_origins)}")

        yield

        # Shutdown
        logger.info("Shutting down...")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Relays contact form submissions from the SOEK website by email.",
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url=None,
    )

    # CORS response headers and preflight
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )

    # Disallowed origins never reach a route
    app.add_middleware(OriginAllowListMiddleware, allowed_origins=settings.cors_origins)

    # Request ID Tracing
    app.add_middleware(RequestIdMiddleware)

    register_exception_handlers(app)

    app.include_router(contact.router, tags=["contact"])

    @app.get(
        "/health",
        response_class=PlainTextResponse,
        summary="Health check",
        description="Liveness endpoint for uptime checks.",
    )
    async def health_check():
        """Health check endpoint"""
        return "Server is healthy and running."

    return app


app = create_app()
