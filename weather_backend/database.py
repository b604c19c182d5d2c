"""
Database configuration and session management.

This module contains the SQLAlchemy async engine, session factory,
and the startup bootstrap that verifies the connection and creates
missing tables.
"""

from typing import AsyncIterator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from weather_backend.config import Settings, get_settings
from weather_backend.utils.logging_config import get_logger

logger = get_logger(__name__)

# Base class for all database models
Base = declarative_base()


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine for the configured database URL.

    Args:
        settings: Application settings

    Returns:
        Configured AsyncEngine
    """
    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DEBUG,
        pool_pre_ping=True,
    )


engine = build_engine(get_settings())

# Create async session factory
async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncIterator[AsyncSession]:
    """
    Dependency function to get database session.

    Yields an async database session and ensures proper cleanup.
    """
    async with async_session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db(db_engine: AsyncEngine = engine) -> None:
    """
    Verify the database is reachable and create any missing tables.

    Called once during application startup. Any failure propagates so
    the process stops instead of serving without storage.
    """
    # Register all models with Base.metadata
    import weather_backend.models  # noqa: F401

    async with db_engine.begin() as conn:
        await conn.execute(text("SELECT 1"))
        await conn.run_sync(Base.metadata.create_all)

    logger.info(f"Database connected ({db_engine.url.get_backend_name()})")


async def drop_tables(db_engine: AsyncEngine = engine) -> None:
    """
    Drop all database tables.

    WARNING: This will delete all data. Use with caution.
    """
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
