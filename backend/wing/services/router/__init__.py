"""
Indicator Source Router

CONTRACT:
    Input:  RouteRequest {symbol, is_domestic, kind, period?}
    Output: list of PricePoint / RsiPoint / MomentumPoint,
            RecommendationSummary | None, or list of CompanyNewsItem

RESPONSIBILITIES:
    - Domestic: KIS candles over the lookback, local engine, display window
    - Foreign: vendor-computed series truncated to the most recent points
    - Domestic opinion codes folded into the recommendation summary shape
    - Short-TTL response cache
"""

from wing.services.router.service import (
    IndicatorRouter,
    RouteRequest,
    close_indicator_router,
    get_indicator_router,
)

__all__ = [
    "IndicatorRouter",
    "RouteRequest",
    "close_indicator_router",
    "get_indicator_router",
]
