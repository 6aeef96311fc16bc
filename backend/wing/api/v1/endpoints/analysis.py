"""
Analysis API Endpoints

Symbol resolution for a saved graph, and routed price / indicator /
recommendation / company-news lookups for a symbol.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from wing.api.deps import get_domestic_flag, get_owner_id
from wing.schemas.graph import SymbolResolution
from wing.schemas.market import (
    CompanyNewsItem,
    MomentumPoint,
    PricePoint,
    RecommendationSummary,
    RsiPoint,
)
from wing.services.router import IndicatorRouter, get_indicator_router
from wing.services.symbols import SymbolResolver, get_symbol_resolver

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/graphs/{graph_id}/symbol", response_model=SymbolResolution)
async def resolve_symbol(
    graph_id: int,
    owner_id: str = Depends(get_owner_id),
    resolver: SymbolResolver = Depends(get_symbol_resolver),
):
    """
    Map a saved graph's keywords to a market symbol.

    The main keyword and all node names go to the language model; the
    returned ticker has its exchange suffix stripped and carries the
    domestic/foreign flag used by the other analysis endpoints.
    """
    return await resolver.resolve(owner_id, graph_id)


@router.get("/price-ma", response_model=list[PricePoint])
async def get_price_with_ma(
    symbol: Optional[str] = None,
    is_domestic: bool = Depends(get_domestic_flag),
    indicator_router: IndicatorRouter = Depends(get_indicator_router),
):
    """Closing prices with MA20 / MA60 (null until enough history)."""
    return await indicator_router.price_with_ma(symbol, is_domestic)


@router.get("/rsi", response_model=list[RsiPoint])
async def get_rsi(
    symbol: Optional[str] = None,
    period: Optional[int] = Query(default=None),
    is_domestic: bool = Depends(get_domestic_flag),
    indicator_router: IndicatorRouter = Depends(get_indicator_router),
):
    """Wilder RSI series (default period 14)."""
    return await indicator_router.rsi(symbol, is_domestic, period)


@router.get("/momentum", response_model=list[MomentumPoint])
async def get_momentum(
    symbol: Optional[str] = None,
    period: Optional[int] = Query(default=None),
    is_domestic: bool = Depends(get_domestic_flag),
    indicator_router: IndicatorRouter = Depends(get_indicator_router),
):
    """Momentum series, close[i] - close[i - period] (default period 10)."""
    return await indicator_router.momentum(symbol, is_domestic, period)


@router.get("/recommendation", response_model=Optional[RecommendationSummary])
async def get_recommendation(
    symbol: Optional[str] = None,
    is_domestic: bool = Depends(get_domestic_flag),
    indicator_router: IndicatorRouter = Depends(get_indicator_router),
):
    """
    Latest analyst recommendation summary.

    Foreign: newest Finnhub period. Domestic: KIS investment opinions of the
    last month bucketed into buy/hold/sell. Null when the vendor has none.
    """
    return await indicator_router.recommendation(symbol, is_domestic)


@router.get("/company-news", response_model=list[CompanyNewsItem])
async def get_company_news(
    symbol: Optional[str] = None,
    is_domestic: bool = Depends(get_domestic_flag),
    indicator_router: IndicatorRouter = Depends(get_indicator_router),
):
    """Newest-first company news (foreign symbols only)."""
    return await indicator_router.company_news(symbol, is_domestic)
