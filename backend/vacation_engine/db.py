from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Annotated, Any

from fastapi import Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from vacation_engine.config import get_settings

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from vacation_engine.config import Settings

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def engine_options(settings: Settings) -> dict[str, Any]:
    """Driver-specific engine keyword arguments.

    SQLite (aiosqlite) is shared across the event loop's tasks and has no
    connection pool to size. asyncpg gets a bounded pool and a per-statement
    timeout so a request stuck behind a row lock fails instead of hanging.
    """
    if settings.database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "connect_args": {"command_timeout": settings.db_statement_timeout_seconds},
    }


def get_engine() -> AsyncEngine:
    """Return the singleton async engine, creating it on first call."""
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = create_async_engine(settings.database_url, echo=settings.debug, **engine_options(settings))
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the singleton async session factory."""
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(get_engine(), expire_on_commit=False)
    return _session_factory


async def get_session() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency yielding a session; uncommitted work is rolled back on error."""
    async with get_session_factory()() as session:
        try:
            yield session
        except Exception:
            logger.debug("Rolling back session after error")
            await session.rollback()
            raise


SessionDep = Annotated[AsyncSession, Depends(get_session)]


async def dispose_engine() -> None:
    """Dispose the engine and reset singletons. Call on app shutdown."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None


def person_lock_key(person_id: uuid.UUID) -> int:
    """Signed 64-bit advisory lock key derived from a person id."""
    return int.from_bytes(person_id.bytes[:8], "big", signed=True)


async def lock_person(session: AsyncSession, person_id: uuid.UUID) -> None:
    """Serialize writers of one person's requests until the current transaction ends.

    On Postgres this takes ``pg_advisory_xact_lock``, so a concurrent submit for
    the same person waits and then sees the committed rows in its overlap check.
    SQLite admits one writer at a time and needs no lock.
    """
    if session.get_bind().dialect.name != "postgresql":
        return
    await session.execute(text("SELECT pg_advisory_xact_lock(:key)"), {"key": person_lock_key(person_id)})
