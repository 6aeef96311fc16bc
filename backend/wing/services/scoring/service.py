"""
WING-Score Service

Loads a persisted graph and reduces it to its WING-Score.
"""

import logging
from typing import Optional

from pydantic import BaseModel

from wing.core.config import settings
from wing.graphs.store import GraphStore, get_graph_store
from wing.schemas.graph import WingScoreResult
from wing.services.base import BaseService
from wing.services.scoring.wing_score import (
    WingScoreBreakdown,
    WingScoreParameters,
    compute_wing_score,
)

logger = logging.getLogger(__name__)


class WingScoreRequest(BaseModel):
    owner_id: str
    graph_id: int


class WingScoreService(BaseService[WingScoreRequest, WingScoreResult]):
    """Graph Sentiment Aggregator."""

    def __init__(self, store: GraphStore, params: Optional[WingScoreParameters] = None):
        self.store = store
        self.params = params or WingScoreParameters.from_settings(settings)

    @property
    def name(self) -> str:
        return "WingScoreService"

    async def execute(self, input_data: WingScoreRequest) -> WingScoreResult:
        breakdown = await self.breakdown(input_data.owner_id, input_data.graph_id)
        return WingScoreResult(graph_id=input_data.graph_id, wing_score=breakdown.wing_score)

    async def breakdown(self, owner_id: str, graph_id: int) -> WingScoreBreakdown:
        """Score with all intermediate terms."""
        # get_graph raises for foreign/unknown graphs before anything else is read
        await self.store.get_graph(owner_id, graph_id)
        nodes = await self.store.list_nodes(owner_id, graph_id)
        edges = await self.store.list_edges(owner_id, graph_id)
        counts = await self.store.count_news_by_edge(owner_id, graph_id)
        total = await self.store.count_news(owner_id, graph_id)

        result = compute_wing_score(nodes, edges, counts, total, self.params)
        logger.info(
            f"WING-Score graph={graph_id}: {result.wing_score}",
            extra={
                "raw_sum": round(result.raw_sum, 4),
                "confidence": round(result.confidence, 4),
                "articles": result.total_articles,
                "edges": result.counted_edges,
            },
        )
        return result

    async def health_check(self) -> bool:
        return True


# Singleton instance
_wing_score_service: Optional[WingScoreService] = None


def get_wing_score_service() -> WingScoreService:
    """Get or create WING-Score service singleton."""
    global _wing_score_service
    if _wing_score_service is None:
        _wing_score_service = WingScoreService(get_graph_store())
    return _wing_score_service
