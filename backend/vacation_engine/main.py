from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

from fastapi import FastAPI

from vacation_engine.api.health import router as health_router
from vacation_engine.api.router import api_router
from vacation_engine.config import configure_logging, get_settings
from vacation_engine.db import dispose_engine
from vacation_engine.exceptions import setup_exception_handlers
from vacation_engine.middleware import setup_middleware

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Configure logging, fail fast on an unknown timezone, dispose the engine on shutdown."""
    settings = get_settings()
    configure_logging(settings)
    # Every "today" is resolved in this zone; an unknown name must stop startup, not the first request.
    ZoneInfo(settings.timezone)
    logger.info(
        "Starting %s v%s [%s] tz=%s entitlement=%d days",
        settings.app_name,
        settings.app_version,
        settings.environment,
        settings.timezone,
        settings.annual_entitlement_days,
    )
    if not settings.enforce_vacation_balance:
        logger.warning("Vacation balance enforcement is disabled; requests may exceed accrued days")
    yield
    logger.info("Shutting down %s", settings.app_name)
    await dispose_engine()


def create_app() -> FastAPI:
    """Application factory."""
    settings = get_settings()
    exposes_docs = settings.environment != "production"

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Vacation accrual, day-off eligibility and leave approval rules.",
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if exposes_docs else None,
        redoc_url="/redoc" if exposes_docs else None,
    )

    setup_middleware(application, settings)
    setup_exception_handlers(application)

    application.include_router(health_router)
    application.include_router(api_router)

    return application


app = create_app()
