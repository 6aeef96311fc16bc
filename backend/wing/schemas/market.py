"""
Market data contracts.

Candles come in from the vendor adapters, indicator points and
recommendation summaries go out through the analysis API.
Every outgoing date is an ISO 'YYYY-MM-DD' string.
"""

from datetime import date
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS
# =============================================================================


class IndicatorKind(str, Enum):
    PRICE_MA = "PRICE_MA"
    RSI = "RSI"
    MOMENTUM = "MOMENTUM"
    RECOMMENDATION = "RECOMMENDATION"
    COMPANY_NEWS = "COMPANY_NEWS"


# =============================================================================
# INPUT: Candle
# =============================================================================


class Candle(BaseModel):
    """One trading day's bar. Sorted ascending by date in any series."""

    date: date
    open: float = Field(..., gt=0)
    high: float = Field(..., gt=0)
    low: float = Field(..., gt=0)
    close: float = Field(..., gt=0)
    volume: int = Field(default=0, ge=0)


# =============================================================================
# OUTPUT: Indicator series points
# =============================================================================


class PricePoint(BaseModel):
    """Close with its 20/60-day moving averages (null before the window fills)."""

    date: str
    close: float
    ma20: Optional[float] = None
    ma60: Optional[float] = None


class RsiPoint(BaseModel):
    date: str
    rsi: float


class MomentumPoint(BaseModel):
    date: str
    mom: float


# =============================================================================
# OUTPUT: Recommendation / company news
# =============================================================================


class RecommendationSummary(BaseModel):
    """Analyst opinion counts for one period."""

    model_config = ConfigDict(populate_by_name=True)

    symbol: str
    period: str
    buy: int = 0
    hold: int = 0
    sell: int = 0
    strong_buy: int = Field(default=0, alias="strongBuy")
    strong_sell: int = Field(default=0, alias="strongSell")


class CompanyNewsItem(BaseModel):
    """Finnhub company-news record, passed through with the fields we use."""

    id: Optional[int] = None
    category: Optional[str] = None
    datetime: int
    headline: str = ""
    image: Optional[str] = None
    related: Optional[str] = None
    source: Optional[str] = None
    summary: Optional[str] = None
    url: Optional[str] = None
