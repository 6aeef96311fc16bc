"""
Graph API Endpoints

Owner-scoped CRUD for keyword graphs, their news, and the WING-Score.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from wing.api.deps import get_owner_id
from wing.graphs import GraphStore, get_graph_store
from wing.schemas.graph import (
    DeleteGraphResult,
    GraphEdge,
    GraphNode,
    GraphSummary,
    KeywordCount,
    NewsPage,
    RenameGraphRequest,
    SaveGraphRequest,
    SaveGraphResult,
    WingScoreResult,
)
from wing.services.scoring import (
    WingScoreRequest,
    WingScoreService,
    get_wing_score_service,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[GraphSummary])
async def list_graphs(
    owner_id: str = Depends(get_owner_id),
    store: GraphStore = Depends(get_graph_store),
):
    """Caller's graphs, newest first."""
    return await store.list_graphs(owner_id)


@router.post("", response_model=SaveGraphResult, status_code=201)
async def save_graph(
    request: SaveGraphRequest,
    owner_id: str = Depends(get_owner_id),
    store: GraphStore = Depends(get_graph_store),
):
    """Persist a built graph (nodes, edges and attributed articles)."""
    return await store.save_graph(
        owner_id,
        request.nodes,
        request.edges,
        request.articles,
        name=request.name,
    )


@router.get("/top-keywords", response_model=list[KeywordCount])
async def top_keywords(
    limit: int = Query(default=5, ge=1, le=50),
    store: GraphStore = Depends(get_graph_store),
):
    """Most frequent keywords across all saved graphs."""
    return await store.top_keywords(limit)


@router.get("/{graph_id}/wing-score", response_model=WingScoreResult)
async def get_wing_score(
    graph_id: int,
    owner_id: str = Depends(get_owner_id),
    scorer: WingScoreService = Depends(get_wing_score_service),
):
    """
    WING-Score of a saved graph.

    Integer in [-100, 100]; 0 for graphs with no edges or no news.
    """
    return await scorer.execute(WingScoreRequest(owner_id=owner_id, graph_id=graph_id))


@router.get("/{graph_id}/nodes", response_model=list[GraphNode])
async def list_nodes(
    graph_id: int,
    owner_id: str = Depends(get_owner_id),
    store: GraphStore = Depends(get_graph_store),
):
    return await store.list_nodes(owner_id, graph_id)


@router.get("/{graph_id}/edges", response_model=list[GraphEdge])
async def list_edges(
    graph_id: int,
    owner_id: str = Depends(get_owner_id),
    store: GraphStore = Depends(get_graph_store),
):
    return await store.list_edges(owner_id, graph_id)


@router.get("/{graph_id}/news", response_model=NewsPage)
async def list_news(
    graph_id: int,
    take: Optional[int] = Query(default=None, ge=1),
    cursor: Optional[int] = Query(default=None, ge=0),
    owner_id: str = Depends(get_owner_id),
    store: GraphStore = Depends(get_graph_store),
):
    """Cursor page of the graph's articles (id ascending)."""
    return await store.list_news_by_graph(owner_id, graph_id, take, cursor)


@router.get("/{graph_id}/news/by-edge", response_model=NewsPage)
async def list_news_by_edge(
    graph_id: int,
    start_point: Optional[str] = Query(default=None, alias="startPoint"),
    end_point: Optional[str] = Query(default=None, alias="endPoint"),
    take: Optional[int] = Query(default=None, ge=1),
    cursor: Optional[int] = Query(default=None, ge=0),
    owner_id: str = Depends(get_owner_id),
    store: GraphStore = Depends(get_graph_store),
):
    """Cursor page of one edge's articles, either keyword order."""
    return await store.list_news_by_edge(
        owner_id, graph_id, start_point, end_point, take, cursor
    )


@router.patch("/{graph_id}", response_model=GraphSummary)
async def rename_graph(
    graph_id: int,
    request: RenameGraphRequest,
    owner_id: str = Depends(get_owner_id),
    store: GraphStore = Depends(get_graph_store),
):
    return await store.rename_graph(owner_id, graph_id, request.name)


@router.delete("/{graph_id}", response_model=DeleteGraphResult)
async def delete_graph(
    graph_id: int,
    owner_id: str = Depends(get_owner_id),
    store: GraphStore = Depends(get_graph_store),
):
    """Delete a graph together with its news, edges and nodes."""
    return await store.delete_graph(owner_id, graph_id)
