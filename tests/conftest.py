from collections.abc import AsyncGenerator, AsyncIterator, Generator
from contextlib import asynccontextmanager
from unittest.mock import create_autospec

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from portal.commons.dependencies import get_db
from portal.core.db import Base, DatabaseSessionManager
from portal.main import app

pytest_plugins = [
    "tests.auth.fixtures",
    "tests.prompts.fixtures",
    "tests.llms.fixtures",
    "tests.vector_store.fixtures",
    "tests.rag.fixtures",
    "tests.render.fixtures",
    "tests.workflow.fixtures",
    "tests.usecases.fixtures",
    "tests.chat.fixtures",
    "tests.git_analyser.fixtures",
]


@pytest.fixture(scope="session")
async def engine() -> AsyncGenerator[AsyncEngine]:
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    await engine.dispose()


@pytest.fixture(scope="session", autouse=True)
async def setup_db(engine: AsyncEngine) -> AsyncGenerator[None]:
    """
    Create database tables before tests run, and drop them after.
    """
    # Import all models here so SQLAlchemy registers them with Base.metadata
    from portal.auth import models as auth_models  # noqa
    from portal.chat import models as chat_models  # noqa
    from portal.prompts import models as prompts_models  # noqa
    from portal.usecases import models as usecases_models  # noqa
    from portal.vector_store import models as vector_store_models  # noqa
    from portal.workflow import models as workflow_models  # noqa

    async with engine.begin() as conn:
        await conn.execute(text("PRAGMA foreign_keys=ON"))
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(scope="session")
def sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Async sessionmaker bound to the in-memory test engine."""
    return async_sessionmaker(engine, autocommit=False, expire_on_commit=False)


@pytest.fixture(scope="function")
async def db_session(
    sessionmaker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Provides a transactional session for each test function, rolling back at the end."""

    async with sessionmaker() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture(scope="function")
def db_session_mock() -> AsyncSession:
    """Lightweight AsyncSession mock for wiring/unit tests (deps/factories)."""
    return create_autospec(AsyncSession, instance=True)


@pytest.fixture(scope="function")
def db_sessionmanager_mock(
    mocker,
    db_session_mock: AsyncSession,
) -> DatabaseSessionManager:
    """DatabaseSessionManager mock whose .session() yields db_session_mock."""

    db = mocker.create_autospec(DatabaseSessionManager, instance=True)

    @asynccontextmanager
    async def _session() -> AsyncIterator[AsyncSession]:
        yield db_session_mock

    db.session = _session  # type: ignore[method-assign]
    return db


@pytest.fixture(scope="function")
def client(db_session_mock: AsyncSession) -> Generator[TestClient]:
    """
    Provides a TestClient with the database dependency overridden.
    """

    # lifespan seeds the real database, requests do not need it
    @asynccontextmanager
    async def mock_lifespan(_app):  # noqa: ANN001
        yield

    app.router.lifespan_context = mock_lifespan

    async def get_db_override() -> AsyncGenerator[AsyncSession]:
        yield db_session_mock

    app.dependency_overrides[get_db] = get_db_override
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
