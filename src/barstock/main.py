"""FastAPI application factory."""

import os
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from barstock.core.logging import configure_logging, get_logger

configure_logging()
logger = get_logger(__name__)

SESSION_MAX_AGE = 14 * 24 * 60 * 60


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for startup and shutdown events."""
    start_time = datetime.now()
    logger.info("app.startup", timestamp=start_time.isoformat())

    from barstock.api.health import set_app_start_time

    set_app_start_time(start_time)

    yield

    from barstock.core.db import engine

    await engine.dispose()
    logger.info("app.shutdown")


def _setup_middleware(app: FastAPI, environment: str, session_secret_key: str) -> None:
    """Configure middleware. Last added runs first."""
    from barstock.middleware.logging import RequestIDMiddleware
    from barstock.middleware.sentry import SentryContextMiddleware

    app.add_middleware(SentryContextMiddleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=session_secret_key,
        max_age=SESSION_MAX_AGE,
        https_only=environment == "production",
        same_site="lax",
    )
    app.add_middleware(RequestIDMiddleware)


def _register_routers(app: FastAPI) -> None:
    from barstock.api import (
        admin,
        auth,
        daily_stock,
        dashboard,
        health,
        inventory,
        items,
        products,
        reports,
        sales,
    )

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(dashboard.router)
    app.include_router(products.router)
    app.include_router(inventory.router)
    app.include_router(items.router)
    app.include_router(daily_stock.router)
    app.include_router(sales.router)
    app.include_router(reports.router)
    app.include_router(admin.router)


def create_app() -> FastAPI:
    """Application factory for barstock."""
    from barstock.core.exception_handlers import register_exception_handlers
    from barstock.core.sentry import init_sentry

    init_sentry()

    app = FastAPI(
        title="barstock API",
        description="Bar inventory, daily stock sheets and sales",
        version="0.1.0",
        lifespan=lifespan,
    )

    register_exception_handlers(app)

    session_secret_key = os.getenv("SESSION_SECRET_KEY", "dev-secret-key-change-in-production")
    environment = os.getenv("ENVIRONMENT", "development")
    if environment == "production" and session_secret_key.startswith("dev-"):
        logger.warning("app.insecure_session_key", environment=environment)

    _setup_middleware(app, environment, session_secret_key)
    _register_routers(app)

    logger.info("app.configured", environment=environment)
    return app


def run() -> None:
    """Development server entrypoint."""
    uvicorn.run(
        "barstock.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
