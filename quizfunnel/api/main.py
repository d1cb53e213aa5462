"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, quizfunnel.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quizfunnel import __version__
from quizfunnel.boundary.db.connection import Database
from quizfunnel.configs import get_settings
from quizfunnel.observability.logger import configure_logging
from quizfunnel.observability.middleware import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)

from .routers import (
    health_router,
    jobs_router,
    quiz_router,
    receipts_router,
    reports_router,
    webhooks_router,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Builds the Database unless one was injected through create_app and
    disposes what it built on shutdown.
    """
    settings = get_settings()
    configure_logging(settings.log_level, service_name="api")

    owns_database = getattr(app.state, "database", None) is None
    if owns_database:
        app.state.database = Database.from_settings(settings.database)
        logger.info("Application startup: database client created")

    yield

    if owns_database:
        await app.state.database.dispose()
        app.state.database = None
    logger.info("Application shutdown")


def create_app(database: Database | None = None) -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Args:
        database: Persistence client to use; built from settings at startup when None

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="Quiz Funnel Report API",
        description="Paid quiz reports: scoring, payment webhooks, and report polling",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.database = database

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Added last runs first: correlation id is set before the request is logged
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(quiz_router, prefix="/api/v1")
    app.include_router(webhooks_router, prefix="/api/v1")
    app.include_router(reports_router, prefix="/api/v1")
    app.include_router(receipts_router, prefix="/api/v1")
    app.include_router(jobs_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    load_dotenv()
    uvicorn.run(
        "quizfunnel.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
