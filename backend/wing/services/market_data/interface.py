"""
Market Data Collaborator Interfaces

Abstract sources the indicator router depends on.
Adapters translate vendor payloads into these shapes right after fetch.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Optional

from wing.schemas.market import (
    Candle,
    CompanyNewsItem,
    MomentumPoint,
    RecommendationSummary,
    RsiPoint,
)


@dataclass
class InvestmentOpinion:
    """One analyst's opinion record (domestic)."""

    date: date
    code: str  # opinion class code, "1" sell / "2" buy / "3" hold
    firm: Optional[str] = None


def sort_candles(candles: list[Candle]) -> list[Candle]:
    """Ascending by date, first row wins on duplicate dates."""
    unique: dict[date, Candle] = {}
    for candle in candles:
        unique.setdefault(candle.date, candle)
    return [unique[d] for d in sorted(unique)]


class CandleSource(ABC):
    """Daily OHLCV bars for a symbol."""

    @abstractmethod
    async def fetch_daily_candles(self, symbol: str, start: date, end: date) -> list[Candle]:
        """Candles dated within [start, end], ascending."""
        pass


class IndicatorVendor(ABC):
    """Vendor that computes indicators itself."""

    @abstractmethod
    async def fetch_rsi(self, symbol: str, period: int) -> list[RsiPoint]:
        pass

    @abstractmethod
    async def fetch_momentum(self, symbol: str, period: int) -> list[MomentumPoint]:
        pass


class OpinionSource(ABC):
    """Per-analyst investment opinions (domestic recommendation path)."""

    @abstractmethod
    async def fetch_investment_opinions(
        self, symbol: str, date_from: date, date_to: date
    ) -> list[InvestmentOpinion]:
        pass

    @abstractmethod
    async def lookup_stock_name(self, symbol: str) -> Optional[str]:
        """Human-readable instrument name, None when unknown."""
        pass


class RecommendationVendor(ABC):
    @abstractmethod
    async def fetch_recommendation_trends(self, symbol: str) -> list[RecommendationSummary]:
        pass


class CompanyNewsVendor(ABC):
    @abstractmethod
    async def fetch_company_news(
        self, symbol: str, date_from: date, date_to: date
    ) -> list[CompanyNewsItem]:
        pass
