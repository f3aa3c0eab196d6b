"""Shared test fixtures for Karera."""

from typing import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from karera.engine.race import RaceEngine
from karera.engine.roster import Roster
from karera.models.database import Base

OWNER = "admin"
FIXED_TIMESTAMP = 1_700_000_000_000


@pytest.fixture
async def db_engine():
    """Create an in-memory SQLite engine for testing."""
    from karera.models import race  # noqa: F401  # registers tables

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for testing."""
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with async_session() as session:
        yield session


@pytest.fixture
def roster() -> Roster:
    return Roster()


@pytest.fixture
def race_engine() -> RaceEngine:
    """A fresh engine with a fixed clock and default rules."""
    return RaceEngine(
        owner=OWNER,
        clock=lambda: FIXED_TIMESTAMP,
        min_bets=0,
        enforce_balances=False,
    )


@pytest.fixture
def funded_engine() -> RaceEngine:
    """Engine that debits stakes from account balances."""
    return RaceEngine(
        owner=OWNER,
        clock=lambda: FIXED_TIMESTAMP,
        min_bets=0,
        enforce_balances=True,
    )
