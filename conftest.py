import os
from typing import AsyncGenerator

# Settings are read at import time, so the test environment goes in first
os.environ.update(
    {
        "ENVIRONMENT": "test",
        "DATABASE_URL": "sqlite+aiosqlite://",
        "RATE_LIMIT_ENABLED": "false",
        "BANK_VERIFICATION_PROVIDER": "simulated",
        "BANK_VERIFICATION_DELAY_SECONDS": "0",
        "ENFORCE_ADMIN_ROLE": "true",
    }
)

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from libs.common.config import get_settings
from libs.db.base import Base

# Import models so metadata includes every table
from services.aid_service import models as _aid_models  # noqa: F401

get_settings.cache_clear()
settings = get_settings()


@pytest_asyncio.fixture
async def test_engine():
    """
    A fresh in-memory SQLite database per test.
    StaticPool keeps the single connection alive for the test's duration.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield the session shared by the test body and the app under test.
    """
    session_factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    session = session_factory()
    try:
        yield session
    finally:
        await session.close()
