"""
Keyword graph contracts.

A graph is a set of keyword nodes joined by sentiment-labelled edges,
with news articles attributed to edges.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS
# =============================================================================


class NodeKind(str, Enum):
    MAIN = "MAIN"
    SUB = "SUB"


class SentimentLabel(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


# =============================================================================
# GRAPH ELEMENTS
# =============================================================================


class GraphNode(BaseModel):
    """A keyword in a graph. `name` is unique within the graph."""

    model_config = ConfigDict(from_attributes=True)

    name: str = Field(..., min_length=1)
    weight: float = 0.0
    kind: NodeKind = NodeKind.SUB


class GraphEdge(BaseModel):
    """Unordered keyword pair. Point order carries no meaning."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    start_point: str = Field(..., alias="startPoint")
    end_point: str = Field(..., alias="endPoint")
    weight: float = 0.0
    sentiment_label: str = "neutral"
    sentiment_score: float = 0.0
    collected_count: Optional[int] = Field(default=None, alias="collectedCount")
    total_estimated: Optional[int] = Field(default=None, alias="totalEstimated")


class NewsArticle(BaseModel):
    """Search result attributed to one edge."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: Optional[int] = None
    start_point: str = Field(..., alias="startPoint")
    end_point: str = Field(..., alias="endPoint")
    link: str
    title: str = ""
    pub_date: Optional[datetime] = Field(default=None, alias="pubDate")
    description: str = ""


class GraphSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    name: str
    created_at: datetime = Field(..., alias="createdAt")


# =============================================================================
# REQUESTS
# =============================================================================


class SaveGraphRequest(BaseModel):
    """Already-built graph payload to persist."""

    name: Optional[str] = None
    nodes: list[GraphNode] = Field(..., min_length=1)
    edges: list[GraphEdge] = Field(default_factory=list)
    articles: list[NewsArticle] = Field(default_factory=list)


class RenameGraphRequest(BaseModel):
    name: str


# =============================================================================
# RESPONSES
# =============================================================================


class SaveGraphResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    graph_id: int = Field(..., alias="graphId")
    saved_nodes: int = Field(..., alias="savedNodes")
    saved_edges: int = Field(..., alias="savedEdges")
    saved_news: int = Field(..., alias="savedNews")


class DeleteGraphResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    graph_id: int = Field(..., alias="graphId")
    deleted_news: int = Field(..., alias="deletedNews")
    deleted_edges: int = Field(..., alias="deletedEdges")
    deleted_nodes: int = Field(..., alias="deletedNodes")


class NewsPage(BaseModel):
    """Cursor page of articles ordered by id ascending."""

    model_config = ConfigDict(populate_by_name=True)

    items: list[NewsArticle]
    next_cursor: Optional[int] = Field(default=None, alias="nextCursor")
    has_more: bool = Field(default=False, alias="hasMore")


class KeywordCount(BaseModel):
    name: str
    count: int


class WingScoreResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    graph_id: int = Field(..., alias="graphId")
    wing_score: int = Field(..., alias="wingScore")


class SymbolResolution(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    graph_id: int = Field(..., alias="graphId")
    main_keyword: str = Field(..., alias="mainKeyword")
    all_keywords: list[str] = Field(..., alias="allKeywords")
    symbol: str
    is_domestic: bool = Field(..., alias="isDomestic")


def edge_key(a: str, b: str) -> tuple[str, str]:
    """Orientation-free key for a keyword pair."""
    return (a, b) if a <= b else (b, a)


class SubkeywordSuggestion(BaseModel):
    """Related search keywords proposed for a main keyword."""

    model_config = ConfigDict(populate_by_name=True)

    main_keyword: str = Field(..., alias="mainKeyword")
    sub_keywords: list[str] = Field(default_factory=list, alias="subKeywords")
