"""
Graph Store

Owner-scoped persistence of keyword graphs.

CONTRACT:
    Every read/write is scoped by (owner_id, graph_id).
    Missing owner or non-positive graph id -> InvalidArgumentError (no query issued).
    Unknown graph or graph of another owner -> GraphNotFoundError.

    Nodes are upserted by (graph, name); edges by (graph, unordered pair).
    News rows are bulk inserted in chunks inside the same transaction.
"""

import logging
from datetime import datetime
from typing import Iterable, Optional, Sequence

from sqlalchemy import and_, case, delete, func, insert, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from wing.db.models import Edge, Graph, News, Node
from wing.schemas.graph import (
    DeleteGraphResult,
    GraphEdge,
    GraphNode,
    GraphSummary,
    KeywordCount,
    NewsArticle,
    NewsPage,
    NodeKind,
    SaveGraphResult,
    edge_key,
)
from wing.services.base import GraphNotFoundError, InvalidArgumentError

logger = logging.getLogger(__name__)

SERVICE_NAME = "GraphStore"
NEWS_CHUNK_SIZE = 500
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
UNTITLED = "Untitled graph"


def _check_owner(owner_id: Optional[str]) -> str:
    if owner_id is None or not str(owner_id).strip():
        raise InvalidArgumentError(SERVICE_NAME, "Owner id is required")
    return str(owner_id).strip()


def _check_graph_id(graph_id) -> int:
    if isinstance(graph_id, bool) or not isinstance(graph_id, int) or graph_id <= 0:
        raise InvalidArgumentError(
            SERVICE_NAME, f"graph id must be a positive integer, got {graph_id!r}"
        )
    return graph_id


def _pair_clause(model, a: str, b: str):
    """Match a keyword pair in either orientation."""
    return or_(
        and_(model.start_point == a, model.end_point == b),
        and_(model.start_point == b, model.end_point == a),
    )


def _page_size(take: Optional[int]) -> int:
    if take is None:
        return DEFAULT_PAGE_SIZE
    return max(1, min(MAX_PAGE_SIZE, int(take)))


def graph_title(nodes: Sequence[GraphNode]) -> str:
    """'main - sub1, sub2' from the heaviest sub keywords."""
    if not nodes:
        return UNTITLED
    main = next((n for n in nodes if n.kind == NodeKind.MAIN), nodes[0])
    subs = sorted(
        (n for n in nodes if n is not main and n.name.strip()),
        key=lambda n: n.weight,
        reverse=True,
    )[:2]
    main_name = main.name.strip()
    if not main_name:
        return UNTITLED
    if not subs:
        return main_name
    return f"{main_name} - {', '.join(s.name.strip() for s in subs)}"


def _to_edge(row: Edge) -> GraphEdge:
    return GraphEdge(
        start_point=row.start_point,
        end_point=row.end_point,
        weight=row.weight,
        sentiment_label=row.sentiment_label,
        sentiment_score=row.sentiment_score,
        collected_count=row.collected_count,
        total_estimated=row.total_estimated,
    )


def _to_article(row: News) -> NewsArticle:
    return NewsArticle(
        id=row.id,
        start_point=row.start_point,
        end_point=row.end_point,
        link=row.link,
        title=row.title,
        pub_date=row.pub_date,
        description=row.description,
    )


class GraphStore:
    """SQLAlchemy-backed graph repository."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    # ============ Scoping ============

    async def _load_graph(self, session: AsyncSession, owner_id: str, graph_id: int) -> Graph:
        result = await session.execute(
            select(Graph).where(Graph.id == graph_id, Graph.owner_id == owner_id)
        )
        graph = result.scalar_one_or_none()
        if graph is None:
            raise GraphNotFoundError(
                SERVICE_NAME, f"Graph {graph_id} not found", {"graph_id": graph_id}
            )
        return graph

    async def get_graph(self, owner_id: str, graph_id: int) -> GraphSummary:
        owner_id = _check_owner(owner_id)
        graph_id = _check_graph_id(graph_id)
        async with self._session_factory() as session:
            graph = await self._load_graph(session, owner_id, graph_id)
            return GraphSummary(id=graph.id, name=graph.name, created_at=graph.created_at)

    async def list_graphs(self, owner_id: str) -> list[GraphSummary]:
        owner_id = _check_owner(owner_id)
        async with self._session_factory() as session:
            result = await session.execute(
                select(Graph)
                .where(Graph.owner_id == owner_id)
                .order_by(Graph.created_at.desc(), Graph.id.desc())
            )
            return [
                GraphSummary(id=g.id, name=g.name, created_at=g.created_at)
                for g in result.scalars()
            ]

    # ============ Nodes / Edges ============

    async def list_nodes(self, owner_id: str, graph_id: int) -> list[GraphNode]:
        """MAIN node first, then by weight descending."""
        owner_id = _check_owner(owner_id)
        graph_id = _check_graph_id(graph_id)
        async with self._session_factory() as session:
            await self._load_graph(session, owner_id, graph_id)
            result = await session.execute(
                select(Node)
                .where(Node.graph_id == graph_id)
                .order_by(
                    case((Node.kind == NodeKind.MAIN.value, 0), else_=1),
                    Node.weight.desc(),
                    Node.id,
                )
            )
            return [GraphNode.model_validate(n) for n in result.scalars()]

    async def list_edges(self, owner_id: str, graph_id: int) -> list[GraphEdge]:
        owner_id = _check_owner(owner_id)
        graph_id = _check_graph_id(graph_id)
        async with self._session_factory() as session:
            await self._load_graph(session, owner_id, graph_id)
            result = await session.execute(
                select(Edge).where(Edge.graph_id == graph_id).order_by(Edge.id)
            )
            return [_to_edge(e) for e in result.scalars()]

    # ============ News counts ============

    async def count_news(self, owner_id: str, graph_id: int) -> int:
        owner_id = _check_owner(owner_id)
        graph_id = _check_graph_id(graph_id)
        async with self._session_factory() as session:
            await self._load_graph(session, owner_id, graph_id)
            result = await session.execute(
                select(func.count(News.id)).where(News.graph_id == graph_id)
            )
            return int(result.scalar_one())

    async def count_news_by_edge(
        self, owner_id: str, graph_id: int
    ) -> dict[tuple[str, str], int]:
        """Article counts per unordered keyword pair."""
        owner_id = _check_owner(owner_id)
        graph_id = _check_graph_id(graph_id)
        async with self._session_factory() as session:
            await self._load_graph(session, owner_id, graph_id)
            result = await session.execute(
                select(News.start_point, News.end_point, func.count(News.id))
                .where(News.graph_id == graph_id)
                .group_by(News.start_point, News.end_point)
            )
            counts: dict[tuple[str, str], int] = {}
            for start, end, count in result.all():
                key = edge_key(start, end)
                counts[key] = counts.get(key, 0) + int(count)
            return counts

    # ============ News pages ============

    async def list_news_by_graph(
        self,
        owner_id: str,
        graph_id: int,
        take: Optional[int] = None,
        cursor: Optional[int] = None,
    ) -> NewsPage:
        owner_id = _check_owner(owner_id)
        graph_id = _check_graph_id(graph_id)
        async with self._session_factory() as session:
            await self._load_graph(session, owner_id, graph_id)
            return await self._page(session, [News.graph_id == graph_id], take, cursor)

    async def list_news_by_edge(
        self,
        owner_id: str,
        graph_id: int,
        start_point: str,
        end_point: str,
        take: Optional[int] = None,
        cursor: Optional[int] = None,
    ) -> NewsPage:
        """Articles of one edge, matched in both orientations."""
        owner_id = _check_owner(owner_id)
        graph_id = _check_graph_id(graph_id)
        start_point = (start_point or "").strip()
        end_point = (end_point or "").strip()
        if not start_point or not end_point:
            raise InvalidArgumentError(SERVICE_NAME, "Both edge keywords are required")

        async with self._session_factory() as session:
            await self._load_graph(session, owner_id, graph_id)
            filters = [News.graph_id == graph_id, _pair_clause(News, start_point, end_point)]
            return await self._page(session, filters, take, cursor)

    async def _page(
        self,
        session: AsyncSession,
        filters: list,
        take: Optional[int],
        cursor: Optional[int],
    ) -> NewsPage:
        size = _page_size(take)
        stmt = select(News).where(*filters)
        if cursor is not None:
            stmt = stmt.where(News.id > cursor)
        stmt = stmt.order_by(News.id).limit(size + 1)

        rows = list((await session.execute(stmt)).scalars())
        has_more = len(rows) > size
        rows = rows[:size]
        return NewsPage(
            items=[_to_article(r) for r in rows],
            next_cursor=rows[-1].id if has_more and rows else None,
            has_more=has_more,
        )

    # ============ Writes ============

    async def save_graph(
        self,
        owner_id: str,
        nodes: Sequence[GraphNode],
        edges: Sequence[GraphEdge] = (),
        articles: Sequence[NewsArticle] = (),
        name: Optional[str] = None,
        graph_id: Optional[int] = None,
    ) -> SaveGraphResult:
        """
        Persist a built graph.

        With `graph_id`, nodes and edges are upserted into that (owned) graph;
        otherwise a new graph is created.
        """
        owner_id = _check_owner(owner_id)
        if graph_id is not None:
            graph_id = _check_graph_id(graph_id)

        async with self._session_factory() as session:
            async with session.begin():
                if graph_id is None:
                    graph = Graph(
                        owner_id=owner_id,
                        name=(name or "").strip() or graph_title(list(nodes)),
                    )
                    session.add(graph)
                    await session.flush()
                else:
                    graph = await self._load_graph(session, owner_id, graph_id)
                    graph.updated_at = datetime.utcnow()

                saved_nodes = await self._upsert_nodes(session, graph, nodes)
                saved_edges = await self._upsert_edges(session, graph, edges)
                saved_news = await self._insert_news(session, graph, articles)
                new_id = graph.id

        logger.info(
            f"Saved graph {new_id}: {saved_nodes} nodes, {saved_edges} edges, {saved_news} news"
        )
        return SaveGraphResult(
            graph_id=new_id,
            saved_nodes=saved_nodes,
            saved_edges=saved_edges,
            saved_news=saved_news,
        )

    async def _upsert_nodes(
        self, session: AsyncSession, graph: Graph, nodes: Iterable[GraphNode]
    ) -> int:
        result = await session.execute(select(Node).where(Node.graph_id == graph.id))
        existing = {n.name: n for n in result.scalars()}

        saved = 0
        for node in nodes:
            name = node.name.strip()
            if not name:
                continue
            row = existing.get(name)
            if row is None:
                row = Node(graph_id=graph.id, owner_id=graph.owner_id, name=name)
                session.add(row)
                existing[name] = row
            row.weight = node.weight
            row.kind = node.kind.value
            saved += 1
        await session.flush()
        return saved

    async def _upsert_edges(
        self, session: AsyncSession, graph: Graph, edges: Iterable[GraphEdge]
    ) -> int:
        result = await session.execute(select(Edge).where(Edge.graph_id == graph.id))
        existing = {edge_key(e.start_point, e.end_point): e for e in result.scalars()}

        saved = 0
        for edge in edges:
            start, end = edge.start_point.strip(), edge.end_point.strip()
            if not start or not end:
                continue
            key = edge_key(start, end)
            row = existing.get(key)
            if row is None:
                row = Edge(
                    graph_id=graph.id,
                    owner_id=graph.owner_id,
                    start_point=start,
                    end_point=end,
                )
                session.add(row)
                existing[key] = row
            row.weight = edge.weight
            row.sentiment_label = (edge.sentiment_label or "neutral").strip().lower()
            row.sentiment_score = edge.sentiment_score
            row.collected_count = edge.collected_count
            row.total_estimated = edge.total_estimated
            saved += 1
        await session.flush()
        return saved

    async def _insert_news(
        self, session: AsyncSession, graph: Graph, articles: Sequence[NewsArticle]
    ) -> int:
        now = datetime.utcnow()
        rows = [
            {
                "graph_id": graph.id,
                "owner_id": graph.owner_id,
                "start_point": a.start_point.strip(),
                "end_point": a.end_point.strip(),
                "link": a.link.strip(),
                "title": a.title or "",
                "pub_date": a.pub_date or now,
                "description": a.description or "",
            }
            for a in articles
            if a.link and a.link.strip()
        ]
        for i in range(0, len(rows), NEWS_CHUNK_SIZE):
            await session.execute(insert(News), rows[i : i + NEWS_CHUNK_SIZE])
        return len(rows)

    async def rename_graph(self, owner_id: str, graph_id: int, name: str) -> GraphSummary:
        owner_id = _check_owner(owner_id)
        graph_id = _check_graph_id(graph_id)
        name = (name or "").strip()
        if not name:
            raise InvalidArgumentError(SERVICE_NAME, "Graph name must not be empty")

        async with self._session_factory() as session:
            async with session.begin():
                graph = await self._load_graph(session, owner_id, graph_id)
                graph.name = name
                graph.updated_at = datetime.utcnow()
            return GraphSummary(id=graph.id, name=graph.name, created_at=graph.created_at)

    async def delete_graph(self, owner_id: str, graph_id: int) -> DeleteGraphResult:
        """Delete a graph with its news, edges and nodes."""
        owner_id = _check_owner(owner_id)
        graph_id = _check_graph_id(graph_id)

        async with self._session_factory() as session:
            async with session.begin():
                graph = await self._load_graph(session, owner_id, graph_id)
                news = await session.execute(delete(News).where(News.graph_id == graph_id))
                edges = await session.execute(delete(Edge).where(Edge.graph_id == graph_id))
                nodes = await session.execute(delete(Node).where(Node.graph_id == graph_id))
                await session.execute(delete(Graph).where(Graph.id == graph.id))

        logger.info(f"Deleted graph {graph_id} for owner {owner_id}")
        return DeleteGraphResult(
            graph_id=graph_id,
            deleted_news=news.rowcount,
            deleted_edges=edges.rowcount,
            deleted_nodes=nodes.rowcount,
        )

    # ============ Aggregates ============

    async def top_keywords(self, limit: int = 5) -> list[KeywordCount]:
        """Most frequent node names across all graphs."""
        limit = max(1, int(limit))
        async with self._session_factory() as session:
            count = func.count(Node.id)
            result = await session.execute(
                select(Node.name, count)
                .group_by(Node.name)
                .order_by(count.desc(), Node.name)
                .limit(limit)
            )
            return [KeywordCount(name=name, count=int(c)) for name, c in result.all()]


# Singleton instance
_graph_store: Optional[GraphStore] = None


def get_graph_store() -> GraphStore:
    """Get the graph store bound to the application database."""
    global _graph_store
    if _graph_store is None:
        from wing.db.database import AsyncSessionLocal

        _graph_store = GraphStore(AsyncSessionLocal)
    return _graph_store
