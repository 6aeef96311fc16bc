"""
WING Schema Contracts

JSON contracts between the API, the services and the vendor adapters.
"""

from wing.schemas.graph import (
    GraphEdge,
    GraphNode,
    NewsArticle,
    NodeKind,
    SentimentLabel,
    SubkeywordSuggestion,
    SymbolResolution,
    WingScoreResult,
)
from wing.schemas.market import (
    Candle,
    CompanyNewsItem,
    IndicatorKind,
    MomentumPoint,
    PricePoint,
    RecommendationSummary,
    RsiPoint,
)

__all__ = [
    "GraphEdge",
    "GraphNode",
    "NewsArticle",
    "NodeKind",
    "SentimentLabel",
    "SubkeywordSuggestion",
    "SymbolResolution",
    "WingScoreResult",
    "Candle",
    "CompanyNewsItem",
    "IndicatorKind",
    "MomentumPoint",
    "PricePoint",
    "RecommendationSummary",
    "RsiPoint",
]
