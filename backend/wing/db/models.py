"""
SQLAlchemy models for the WING database.

Persists:
- Keyword graphs (one per saved analysis, owned by a user)
- Nodes and edges of each graph
- News articles attributed to edges
- Fetched article bodies (enrichment cache)
"""

from datetime import datetime

from sqlalchemy import (
    Column,
    String,
    Float,
    Integer,
    DateTime,
    Text,
    ForeignKey,
    Index,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class Graph(Base):
    """
    Root aggregate. Deleting a graph deletes its nodes, edges and news.
    """
    __tablename__ = "graphs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(String(64), nullable=False, index=True)
    name = Column(String(255), nullable=False, default="Untitled graph")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    nodes = relationship("Node", back_populates="graph", cascade="all, delete-orphan")
    edges = relationship("Edge", back_populates="graph", cascade="all, delete-orphan")
    news = relationship("News", back_populates="graph", cascade="all, delete-orphan")


class Node(Base):
    """
    Keyword inside a graph. (graph_id, name) is unique.
    """
    __tablename__ = "nodes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    graph_id = Column(Integer, ForeignKey("graphs.id", ondelete="CASCADE"), nullable=False)
    owner_id = Column(String(64), nullable=False)
    name = Column(String(255), nullable=False)
    weight = Column(Float, nullable=False, default=0.0)
    kind = Column(String(8), nullable=False, default="SUB")  # MAIN, SUB

    graph = relationship("Graph", back_populates="nodes")

    __table_args__ = (
        UniqueConstraint("graph_id", "name", name="uq_nodes_graph_name"),
        Index("ix_nodes_name", "name"),
    )


class Edge(Base):
    """
    Keyword pair inside a graph. Stored in one orientation,
    looked up in both.
    """
    __tablename__ = "edges"

    id = Column(Integer, primary_key=True, autoincrement=True)
    graph_id = Column(Integer, ForeignKey("graphs.id", ondelete="CASCADE"), nullable=False)
    owner_id = Column(String(64), nullable=False)
    start_point = Column(String(255), nullable=False)
    end_point = Column(String(255), nullable=False)
    weight = Column(Float, nullable=False, default=0.0)
    sentiment_label = Column(String(16), nullable=False, default="neutral")
    sentiment_score = Column(Float, nullable=False, default=0.0)
    collected_count = Column(Integer, nullable=True)
    total_estimated = Column(Integer, nullable=True)

    graph = relationship("Graph", back_populates="edges")

    __table_args__ = (
        UniqueConstraint("graph_id", "start_point", "end_point", name="uq_edges_graph_pair"),
    )


class News(Base):
    """
    Article attributed to the edge (start_point, end_point) of a graph.
    """
    __tablename__ = "news"

    id = Column(Integer, primary_key=True, autoincrement=True)
    graph_id = Column(Integer, ForeignKey("graphs.id", ondelete="CASCADE"), nullable=False)
    owner_id = Column(String(64), nullable=False)
    start_point = Column(String(255), nullable=False)
    end_point = Column(String(255), nullable=False)
    link = Column(Text, nullable=False)
    title = Column(Text, nullable=False, default="")
    pub_date = Column(DateTime, nullable=False, default=datetime.utcnow)
    description = Column(Text, nullable=False, default="")

    graph = relationship("Graph", back_populates="news")

    __table_args__ = (
        Index("ix_news_graph_pair", "graph_id", "start_point", "end_point"),
    )


class NewsBodyCache(Base):
    """
    Article body fetched from the publisher page, keyed by normalized link.
    """
    __tablename__ = "news_body_cache"

    link = Column(String(1024), primary_key=True)
    title = Column(Text, nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    pub_date = Column(DateTime, nullable=True)
    fetched_at = Column(DateTime, default=datetime.utcnow, nullable=False)
