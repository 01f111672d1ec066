"""
Database session management with async SQLAlchemy 2.0.
Handles connection pooling and session lifecycle.
"""

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)
from typing import AsyncGenerator

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

# Global engine and sessionmaker
engine = None
async_session_maker: async_sessionmaker[AsyncSession] = None


def create_engine():
    """Create async SQLAlchemy engine for the configured database."""
    global engine

    options = {
        "echo": settings.DATABASE_ECHO,
        "pool_pre_ping": True,
    }
    if settings.DATABASE_URL.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
    else:
        options["pool_size"] = 5
        options["max_overflow"] = 10

    engine = create_async_engine(settings.DATABASE_URL, **options)

    logger.info(
        "Database engine created",
        extra={"dialect": engine.dialect.name},
    )

    return engine


def create_sessionmaker():
    """Create async sessionmaker."""
    global async_session_maker

    if engine is None:
        create_engine()

    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    logger.info("Sessionmaker created")
    return async_session_maker


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for getting database session.
    Yields one session per request and ensures it's closed after use.
    """
    if async_session_maker is None:
        create_sessionmaker()

    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db() -> None:
    """Initialize database connection, create tables and seed data."""
    global engine, async_session_maker

    if engine is None:
        create_engine()

    if async_session_maker is None:
        create_sessionmaker()

    from app.db.init_db import create_tables, seed_initial_data

    await create_tables()
    await seed_initial_data()

    logger.info("Database initialized")


async def close_db() -> None:
    """Close database connections."""
    global engine, async_session_maker

    if engine:
        await engine.dispose()
        engine = None
        async_session_maker = None
        logger.info("Database connections closed")
