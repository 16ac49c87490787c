"""Infrastructure handles and FastAPI dependencies.

The :class:`AdminStore` is created and opened by the application lifespan and
kept on ``app.state.admin_store``; nothing here is a module-level singleton.
"""

from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
)
from sqlalchemy.ext.asyncio import (
    create_async_engine as _create_async_engine,
)

from edu_admin.config import Settings
from edu_admin.repositories.admin_repository import AdminRepository
from edu_admin.utils.logging import get_logger

logger = get_logger(__name__)


def create_engine(settings: Settings) -> AsyncEngine:
    return _create_async_engine(
        settings.database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,
        echo=settings.debug,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


class AdminStore:
    """Credential store handle with an explicit ``open``/``close`` lifecycle."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.engine: AsyncEngine | None = None
        self.session_factory: async_sessionmaker[AsyncSession] | None = None

    async def open(self) -> None:
        if self.engine is not None:
            return
        self.engine = create_engine(self.settings)
        self.session_factory = create_session_factory(self.engine)
        logger.info("Admin store opened")

    async def close(self) -> None:
        if self.engine is None:
            return
        await self.engine.dispose()
        self.engine = None
        self.session_factory = None
        logger.info("Admin store closed")

    @asynccontextmanager
    async def repository(self) -> AsyncIterator[AdminRepository]:
        """Yield a repository bound to one unit of work.

        Commits when the block exits cleanly, rolls back when it raises.
        """
        if self.session_factory is None:
            raise RuntimeError("AdminStore is not open")
        async with self.session_factory() as session:
            try:
                yield AdminRepository(session)
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def ping(self) -> bool:
        if self.session_factory is None:
            return False
        try:
            async with self.session_factory() as session:
                await session.execute(text("SELECT 1"))
        except Exception:
            logger.warning("Admin store ping failed", exc_info=True)
            return False
        return True


def get_admin_store(request: Request) -> AdminStore:
    return request.app.state.admin_store


async def get_admin_repo(request: Request) -> AsyncGenerator[AdminRepository, None]:
    async with get_admin_store(request).repository() as repo:
        yield repo


AdminRepo = Annotated[AdminRepository, Depends(get_admin_repo)]
