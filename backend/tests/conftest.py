from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from vacation_engine.db import get_session
from vacation_engine.main import app
from vacation_engine.models import SQLModel
from vacation_engine.services.context import AccrualRules, EngineContext, get_engine_context
from vacation_engine.services.events import InMemoryEventSink, reset_event_sink, set_event_sink
from vacation_engine.services.people import InMemoryPersonDirectory, set_person_directory

from helpers import TODAY, build_people

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator

    from sqlalchemy.ext.asyncio import AsyncEngine

# In-memory SQLite by default; point TEST_DATABASE_URL at Postgres for row-lock behaviour.
TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite://")


@pytest.fixture
def ctx() -> EngineContext:
    """Engine context pinned to a fixed local date."""
    return EngineContext(today=TODAY, rules=AccrualRules())


@pytest.fixture(autouse=True)
def directory() -> Iterator[InMemoryPersonDirectory]:
    """Seed the in-memory person directory for every test."""
    people = InMemoryPersonDirectory()
    for person in build_people():
        people.seed(person)
    set_person_directory(people)
    yield people
    set_person_directory(InMemoryPersonDirectory())


@pytest.fixture(autouse=True)
def event_sink() -> Iterator[InMemoryEventSink]:
    """Collect lifecycle events in memory for every test."""
    sink = InMemoryEventSink()
    set_event_sink(sink)
    yield sink
    reset_event_sink()


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """Create an async engine with all tables."""
    _engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False} if TEST_DATABASE_URL.startswith("sqlite") else {},
    )
    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield _engine
    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await _engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Yield a database session wrapped in a transaction that rolls back after each test."""
    async with engine.connect() as conn:
        txn = await conn.begin()
        session = AsyncSession(bind=conn, expire_on_commit=False)
        yield session
        await session.close()
        await txn.rollback()


@pytest.fixture
async def async_client(db_session: AsyncSession, ctx: EngineContext) -> AsyncIterator[AsyncClient]:
    """Async HTTP client with the database session and engine context overridden."""

    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_session] = _override_get_session
    app.dependency_overrides[get_engine_context] = lambda: ctx
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
