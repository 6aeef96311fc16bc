"""
Graph Store

Owner-scoped persistence and read models for keyword graphs.
"""

from wing.graphs.store import GraphStore, get_graph_store

__all__ = ["GraphStore", "get_graph_store"]
