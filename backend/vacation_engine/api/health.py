import logging
from datetime import date
from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel
from sqlalchemy import text

from vacation_engine.api.deps import ContextDep
from vacation_engine.config import get_settings
from vacation_engine.db import SessionDep

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response, including the local date the rules are evaluated against."""

    status: Literal["ok", "degraded", "error"]
    version: str
    environment: str
    timezone: str
    today: date


@router.get("/health", response_model=HealthResponse)
async def health(session: SessionDep, ctx: ContextDep) -> HealthResponse:
    """Report database connectivity and the engine's current local date."""
    settings = get_settings()
    status: Literal["ok", "degraded", "error"] = "ok"

    try:
        await session.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Health check: database connectivity failed")
        status = "degraded"

    return HealthResponse(
        status=status,
        version=settings.app_version,
        environment=settings.environment,
        timezone=settings.timezone,
        today=ctx.today,
    )
