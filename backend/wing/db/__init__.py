"""
Database module for WING.

Provides the async database engine and models.
"""

from wing.db.database import AsyncSessionLocal, close_db, init_db
from wing.db.models import Base, Edge, Graph, News, NewsBodyCache, Node

__all__ = [
    "AsyncSessionLocal",
    "close_db",
    "init_db",
    "Base",
    "Edge",
    "Graph",
    "News",
    "NewsBodyCache",
    "Node",
]
