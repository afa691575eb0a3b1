"""
Database engine and session management for the durable store.
Uses SQLAlchemy async with aiosqlite (default) or asyncpg.
"""

import logging
from typing import Optional

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from payments.config import Settings, get_settings

logger = logging.getLogger(__name__)

# Seconds a SQLite writer waits on a locked database before failing
SQLITE_BUSY_TIMEOUT = 30


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


def get_database_url(settings: Optional[Settings] = None) -> str:
    """Get database URL without sslmode (asyncpg doesn't support it as query param)."""
    url = (settings or get_settings()).database_url
    if "?sslmode=" in url:
        url = url.split("?sslmode=")[0]
    elif "&sslmode=" in url:
        url = url.replace("&sslmode=require", "").replace("&sslmode=disable", "")
    return url


def create_engine(settings: Optional[Settings] = None) -> AsyncEngine:
    """Create the async engine for the configured database."""
    settings = settings or get_settings()
    db_url = get_database_url(settings)
    if not db_url:
        raise RuntimeError("Database not configured. Set DATABASE_URL environment variable.")
    
    backend = make_url(db_url).get_backend_name()
    if backend == "sqlite":
        return create_async_engine(
            db_url,
            echo=settings.database_echo,
            hide_parameters=True,
            connect_args={"timeout": SQLITE_BUSY_TIMEOUT},
        )
    
    return create_async_engine(
        db_url,
        echo=settings.database_echo,
        hide_parameters=True,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
    )


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory shared by all requests."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_db(engine: AsyncEngine) -> None:
    """Create tables if they don't exist."""
    # Register models on Base.metadata
    import payments.models  # noqa: F401
    
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"Database schema ready ({engine.url.get_backend_name()})")


async def close_db(engine: AsyncEngine) -> None:
    """Close database connections."""
    await engine.dispose()
