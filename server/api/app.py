"""FastAPI application setup."""
from contextlib import asynccontextmanager
from fastapi import FastAPI
import logging

from api.routes import webhook
from api.routes.health import router as health_router
from config.logging_config import setup_logging
from config.settings import settings
from core.dependencies import init_dependencies, shutdown_dependencies

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    # STARTUP
    init_dependencies()
    logger.info("Application started")
    yield
    # SHUTDOWN
    await shutdown_dependencies()
    logger.info("Application shut down")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""

    # Setup logging
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Nutribot",
        description="LINE bot relaying food photos and chat to a vision model",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Include routers
    app.include_router(health_router, tags=["Health"])
    app.include_router(webhook.router, tags=["Webhook"])

    logger.info("FastAPI application created")
    return app
