"""
Database connection and session management.

Uses SQLite with aiosqlite for async support unless DATABASE_URL says otherwise.
"""

import os
import logging

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from wing.db.models import Base
from wing.core.config import settings

logger = logging.getLogger(__name__)

# Database path - create data directory if needed
DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "data")


def _default_database_url() -> str:
    os.makedirs(DATA_DIR, exist_ok=True)
    return f"sqlite+aiosqlite:///{os.path.join(DATA_DIR, 'wing.db')}"


DATABASE_URL = settings.database_url or _default_database_url()


def create_engine(url: str) -> AsyncEngine:
    """Async engine; SQLite gets a shared static pool."""
    if url.startswith("sqlite"):
        # Note: SQLite requires check_same_thread=False for async
        return create_async_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_async_engine(url, echo=False, pool_pre_ping=True)


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = create_engine(DATABASE_URL)

# Session factory
AsyncSessionLocal = create_session_factory(engine)


async def init_db(bind: AsyncEngine = None) -> None:
    """
    Initialize the database - create all tables.
    Called on application startup.
    """
    bind = bind or engine
    try:
        async with bind.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info(f"Database initialized at: {bind.url}")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


async def close_db() -> None:
    """
    Close database connections.
    Called on application shutdown.
    """
    await engine.dispose()
    logger.info("Database connections closed")
