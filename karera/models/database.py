"""Database setup and session management."""

import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from karera.config import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


# Create async engine with SQLite timeout for concurrent access
engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    connect_args={"timeout": 30},
)

# Session factory
async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_db() -> None:
    """Initialize the database, creating all tables."""
    # Import models to ensure they're registered with Base
    from karera.models import race  # noqa: F401

    async with engine.begin() as conn:
        _text = __import__("sqlalchemy").text

        # Enable WAL mode and busy timeout for concurrent access
        await conn.execute(_text("PRAGMA journal_mode=WAL"))
        await conn.execute(_text("PRAGMA busy_timeout=30000"))

        await conn.run_sync(Base.metadata.create_all)
    logger.info("Race tables ready")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get database session."""
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()
