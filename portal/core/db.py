import contextlib
import logging
from typing import Any, AsyncIterator

from portal.core.config import settings
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    def __init__(self, host: str, engine_kwargs: dict[str, Any] = None):
        self._engine = create_async_engine(host, **(engine_kwargs or {}))
        # workflow artifacts are read back after commit, keep them loaded
        self._sessionmaker = async_sessionmaker(autocommit=False, expire_on_commit=False, bind=self._engine)

    async def close(self):
        if self._engine is None:
            raise Exception("DatabaseSessionManager is not initialized")
        await self._engine.dispose()

        self._engine = None
        self._sessionmaker = None

    async def cleanup(self):
        if self._engine:
            logger.warning("Closing database connection pool.")
            await self.close()

    @contextlib.asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        if self._sessionmaker is None:
            raise Exception("DatabaseSessionManager is not initialized")

        async with self._sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise


class Base(DeclarativeBase):
    pass


sessionmanager = DatabaseSessionManager(settings.DATABASE_URL, {"echo": False})
