"""
Shared fixtures.

The application database is pointed at in-memory SQLite before any `wing`
module is imported, so no test touches ./data.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("REDIS_URL", "redis://localhost:1")

import pytest

from wing.db.database import create_engine, create_session_factory, init_db
from wing.graphs.store import GraphStore


@pytest.fixture
async def session_factory():
    """Fresh in-memory database with all tables created."""
    engine = create_engine("sqlite+aiosqlite://")
    await init_db(engine)
    yield create_session_factory(engine)
    await engine.dispose()


@pytest.fixture
async def store(session_factory):
    return GraphStore(session_factory)
