"""
Pytest configuration and fixtures.
"""

import sys
import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

# Add project root to path
sys.path.append(os.getcwd())

from payments.config import Settings
from payments.database import Base, SQLITE_BUSY_TIMEOUT, create_session_maker
import payments.models  # noqa: F401
from payments.services.payment_cache import PaymentCache
from payments.services.payment_recorder import PaymentRecorder
from payments.services.payment_store import PaymentStore


@pytest.fixture
def db_url(tmp_path) -> str:
    """SQLite file per test; concurrent sessions need real connections."""
    return f"sqlite+aiosqlite:///{tmp_path / 'payments.db'}"


@pytest.fixture
def settings(db_url) -> Settings:
    return Settings(database_url=db_url, app_env="development")


@pytest_asyncio.fixture
async def test_engine(db_url) -> AsyncGenerator[AsyncEngine, None]:
    """Create async engine for tests."""
    engine = create_async_engine(
        db_url,
        echo=False,
        hide_parameters=True,
        connect_args={"timeout": SQLITE_BUSY_TIMEOUT},
    )
    
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    
    yield engine
    
    await engine.dispose()


@pytest.fixture
def store(test_engine) -> PaymentStore:
    return PaymentStore(create_session_maker(test_engine))


@pytest.fixture
def cache() -> PaymentCache:
    return PaymentCache()


@pytest.fixture
def recorder(store, cache) -> PaymentRecorder:
    return PaymentRecorder(store, cache)
