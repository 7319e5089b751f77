"""FastAPI application factory."""

import os
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from tutordesk.core.logging import configure_logging, get_logger

configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for startup and shutdown events."""
    start_time = datetime.now()
    logger.info("app.startup", message="TutorDesk starting up", timestamp=start_time.isoformat())

    from tutordesk.api.health import set_app_start_time

    set_app_start_time(start_time)

    yield

    logger.info("app.shutdown", message="TutorDesk shutting down gracefully")


def _setup_middleware(app: FastAPI, environment: str, session_secret_key: str) -> None:
    """Configure all middleware in correct order."""
    # Last added = first executed: RequestID -> Session -> SentryContext -> app
    from tutordesk.middleware.logging import RequestIDMiddleware
    from tutordesk.middleware.sentry import SentryContextMiddleware

    app.add_middleware(SentryContextMiddleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=session_secret_key,
        max_age=14 * 24 * 60 * 60,
        https_only=environment == "production",
        same_site="lax",
    )
    app.add_middleware(RequestIDMiddleware)


def _mount_uploads(app: FastAPI) -> None:
    """Serve stored proof-of-payment images."""
    from tutordesk.core.uploads import get_upload_dir

    upload_dir = get_upload_dir().resolve()
    upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=str(upload_dir)), name="uploads")


def _register_routers(app: FastAPI) -> None:
    """Register all API routers."""
    from tutordesk.api.enrollment import router as enrollment_router
    from tutordesk.api.health import router as health_router

    app.include_router(health_router)
    app.include_router(enrollment_router)


def create_app() -> FastAPI:
    """Application factory for TutorDesk."""
    app = FastAPI(
        title="TutorDesk API",
        description="Subject enrollment requests and review for tutoring sessions",
        version="0.1.0",
        lifespan=lifespan,
    )

    from tutordesk.core.exception_handlers import register_exception_handlers
    from tutordesk.core.sentry import init_sentry

    init_sentry()
    register_exception_handlers(app)

    session_secret_key = os.getenv("SESSION_SECRET_KEY", "dev-secret-key-change-in-production")
    environment = os.getenv("ENVIRONMENT", "development")

    _setup_middleware(app, environment, session_secret_key)
    _mount_uploads(app)
    _register_routers(app)

    logger.info("app.configured", message="FastAPI application created successfully")

    return app


def run() -> None:
    """Development server entrypoint."""
    uvicorn.run(
        "tutordesk.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
