"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config import get_settings
from shared.database import close_clients

from .errors import register_exception_handlers
from .routes import customers, health, identity, me, webhooks

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs startup and shutdown logic.
    """
    settings = get_settings()
    logger.info("Starting %s on %s:%s", settings.app_name, settings.host, settings.port)
    yield
    await close_clients()
    logger.info("Shutting down %s", settings.app_name)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Settings are loaded here, so missing required configuration stops the
    process before it serves a single request.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Customer identity and subscription billing API",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    register_exception_handlers(app)

    # Register routes
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(customers.router, prefix="/api/customers", tags=["customers"])
    app.include_router(customers.public_router, prefix="/api/public/customers", tags=["customers"])
    app.include_router(me.router, prefix="/api/me", tags=["me"])
    app.include_router(identity.router, prefix="/api/identity/session", tags=["identity"])
    app.include_router(
        webhooks.router,
        prefix="/api/webhooks/lemonsqueezy/events",
        tags=["webhooks"],
    )

    return app


# Application instance for uvicorn
app = create_app()
