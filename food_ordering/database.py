"""
Database Connection Module
Handles the SQLAlchemy async engine and session factory.

A ``Database`` is created by the application factory and lives on
``app.state``; nothing here is process-global.
"""

import logging

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from food_ordering.core.config import Settings

logger = logging.getLogger(__name__)


# Base class for all our models
class Base(DeclarativeBase):
    pass


class Database:
    """
    Owns one async engine and its session factory.

    Lifecycle:
        db = Database(settings)
        await db.init()      # create tables
        ...
        await db.dispose()   # close pooled connections
    """

    def __init__(self, settings: Settings):
        engine_kwargs = {"echo": settings.database_echo}
        # SQLite connections are not pooled the same way
        if not settings.is_sqlite:
            engine_kwargs["pool_size"] = settings.database_pool_size
            engine_kwargs["max_overflow"] = settings.database_max_overflow

        self.engine: AsyncEngine = create_async_engine(settings.database_url, **engine_kwargs)

        # expire_on_commit=False keeps objects readable after commit
        self.session_maker = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def init(self) -> None:
        """
        Create all tables in database.
        Called once at application startup.
        """
        # Register the models on Base.metadata
        from food_ordering import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created")

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database connections closed")
