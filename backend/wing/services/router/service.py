"""
Indicator Source Router

Routes a {symbol, isDomestic, kind, period} query to the domestic path
(KIS candles + local indicator engine) or the foreign path
(AlphaVantage / Finnhub, vendor-computed), and returns the same point
shapes either way.
"""

import calendar
import logging
from collections import Counter
from datetime import date, datetime, timedelta
from typing import Any, Awaitable, Callable, Optional
from zoneinfo import ZoneInfo

from pydantic import BaseModel

from wing.core.config import Settings, settings as default_settings
from wing.schemas.market import (
    CompanyNewsItem,
    IndicatorKind,
    MomentumPoint,
    PricePoint,
    RecommendationSummary,
    RsiPoint,
)
from wing.services.base import (
    BaseService,
    ExternalAPIError,
    InvalidArgumentError,
    NoDataError,
)
from wing.services.cache.redis_client import JsonCache
from wing.services.indicators.service import IndicatorService, display_window_start
from wing.services.market_data.interface import (
    CandleSource,
    CompanyNewsVendor,
    IndicatorVendor,
    OpinionSource,
    RecommendationVendor,
)

logger = logging.getLogger(__name__)
KST = ZoneInfo("Asia/Seoul")

SERVICE_NAME = "IndicatorRouter"

# KIS invt_opnn_cls_code -> summary bucket
OPINION_BUCKETS = {
    "2": "buy",
    "3": "hold",
    "1": "sell",
}


def today_kst() -> date:
    return datetime.now(KST).date()


def one_month_before(day: date) -> date:
    """Same day of the previous month, clamped to its last day."""
    year, month = (day.year, day.month - 1) if day.month > 1 else (day.year - 1, 12)
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def normalize_symbol(symbol: Optional[str]) -> str:
    cleaned = (symbol or "").strip().upper()
    if not cleaned:
        raise InvalidArgumentError(SERVICE_NAME, "symbol is required")
    return cleaned


def check_period(period: Optional[int], default: int) -> int:
    if period is None:
        return default
    if isinstance(period, bool) or not isinstance(period, int) or period <= 0:
        raise InvalidArgumentError(SERVICE_NAME, f"period must be a positive integer, got {period!r}")
    return period


def summarize_opinions(
    opinions: list, symbol_name: str, window_start: date
) -> RecommendationSummary:
    """Count buy/hold/sell opinion codes; other codes are ignored."""
    counts = Counter(
        OPINION_BUCKETS[o.code] for o in opinions if o.code in OPINION_BUCKETS
    )
    period = min((o.date for o in opinions), default=window_start)
    return RecommendationSummary(
        symbol=symbol_name,
        period=period.isoformat(),
        buy=counts["buy"],
        hold=counts["hold"],
        sell=counts["sell"],
        strong_buy=0,
        strong_sell=0,
    )


class RouteRequest(BaseModel):
    symbol: str
    is_domestic: bool = False
    kind: IndicatorKind
    period: Optional[int] = None


class IndicatorRouter(BaseService[RouteRequest, Any]):
    """Domestic/foreign indicator dispatcher."""

    def __init__(
        self,
        domestic_candles: CandleSource,
        opinions: OpinionSource,
        foreign_candles: CandleSource,
        foreign_indicators: IndicatorVendor,
        recommendations: RecommendationVendor,
        company_news: CompanyNewsVendor,
        engine: Optional[IndicatorService] = None,
        cache: Optional[JsonCache] = None,
        config: Optional[Settings] = None,
        today: Callable[[], date] = today_kst,
    ):
        self.domestic_candles = domestic_candles
        self.opinions = opinions
        self.foreign_candles = foreign_candles
        self.foreign_indicators = foreign_indicators
        self.recommendations = recommendations
        self.news_vendor = company_news
        self.engine = engine or IndicatorService()
        self.cache = cache
        self.config = config or default_settings
        self.today = today

    @property
    def name(self) -> str:
        return SERVICE_NAME

    async def execute(self, input_data: RouteRequest) -> Any:
        kind = input_data.kind
        if kind == IndicatorKind.PRICE_MA:
            return await self.price_with_ma(input_data.symbol, input_data.is_domestic)
        if kind == IndicatorKind.RSI:
            return await self.rsi(input_data.symbol, input_data.is_domestic, input_data.period)
        if kind == IndicatorKind.MOMENTUM:
            return await self.momentum(input_data.symbol, input_data.is_domestic, input_data.period)
        if kind == IndicatorKind.RECOMMENDATION:
            return await self.recommendation(input_data.symbol, input_data.is_domestic)
        return await self.company_news(input_data.symbol, input_data.is_domestic)

    async def health_check(self) -> bool:
        return True

    # ============ Cache ============

    async def _cached(
        self,
        key: str,
        loader: Callable[[], Awaitable[list[BaseModel]]],
        model: type[BaseModel],
    ) -> list:
        if self.cache is not None:
            hit = await self.cache.get_json(key)
            if hit is not None:
                logger.debug(f"Cache hit {key}")
                return [model.model_validate(item) for item in hit]

        result = await loader()
        if self.cache is not None and result:
            await self.cache.set_json(
                key,
                [item.model_dump(by_alias=True) for item in result],
                ttl=self.config.indicator_cache_ttl,
            )
        return result

    @staticmethod
    def _key(kind: IndicatorKind, symbol: str, is_domestic: bool, period: Any = "") -> str:
        return f"indicator:{kind.value}:{'d' if is_domestic else 'f'}:{symbol}:{period}"

    # ============ Domestic candles ============

    async def _domestic_candles(self, symbol: str) -> tuple[list, date]:
        """Full lookback candles plus the display window start."""
        today = self.today()
        start = today - timedelta(days=self.config.indicator_lookback_days)
        candles = await self.domestic_candles.fetch_daily_candles(symbol, start, today)
        if not candles:
            raise NoDataError(SERVICE_NAME, f"No daily candles for {symbol}", {"symbol": symbol})
        return candles, display_window_start(today, self.config.indicator_display_days)

    # ============ Price + MA ============

    async def price_with_ma(self, symbol: str, is_domestic: bool) -> list[PricePoint]:
        symbol = normalize_symbol(symbol)

        async def load() -> list[PricePoint]:
            if is_domestic:
                candles, display_from = await self._domestic_candles(symbol)
                return self.engine.price_with_ma(candles, display_from)

            # The compact vendor series is already bounded; every row seeds the averages.
            candles = await self.foreign_candles.fetch_daily_candles(symbol, date.min, self.today())
            if not candles:
                raise NoDataError(SERVICE_NAME, f"No daily candles for {symbol}", {"symbol": symbol})
            points = self.engine.price_with_ma(candles)
            return points[-self.config.foreign_price_points:]

        return await self._cached(
            self._key(IndicatorKind.PRICE_MA, symbol, is_domestic), load, PricePoint
        )

    # ============ RSI ============

    async def rsi(
        self, symbol: str, is_domestic: bool, period: Optional[int] = None
    ) -> list[RsiPoint]:
        symbol = normalize_symbol(symbol)
        period = check_period(period, self.config.default_rsi_period)

        async def load() -> list[RsiPoint]:
            if is_domestic:
                candles, display_from = await self._domestic_candles(symbol)
                return self.engine.rsi_series(candles, period, display_from)

            points = await self.foreign_indicators.fetch_rsi(symbol, period)
            if not points:
                raise NoDataError(SERVICE_NAME, f"No RSI data for {symbol}", {"symbol": symbol})
            return points[-self.config.foreign_indicator_points:]

        return await self._cached(
            self._key(IndicatorKind.RSI, symbol, is_domestic, period), load, RsiPoint
        )

    # ============ Momentum ============

    async def momentum(
        self, symbol: str, is_domestic: bool, period: Optional[int] = None
    ) -> list[MomentumPoint]:
        symbol = normalize_symbol(symbol)
        period = check_period(period, self.config.default_momentum_period)

        async def load() -> list[MomentumPoint]:
            if is_domestic:
                candles, display_from = await self._domestic_candles(symbol)
                return self.engine.momentum_series(candles, period, display_from)

            points = await self.foreign_indicators.fetch_momentum(symbol, period)
            if not points:
                raise NoDataError(SERVICE_NAME, f"No momentum data for {symbol}", {"symbol": symbol})
            return points[-self.config.foreign_indicator_points:]

        return await self._cached(
            self._key(IndicatorKind.MOMENTUM, symbol, is_domestic, period), load, MomentumPoint
        )

    # ============ Recommendation ============

    async def recommendation(
        self, symbol: str, is_domestic: bool
    ) -> Optional[RecommendationSummary]:
        """Latest recommendation summary; None when the vendor has none."""
        symbol = normalize_symbol(symbol)

        if not is_domestic:
            trends = await self.recommendations.fetch_recommendation_trends(symbol)
            if not trends:
                return None
            return max(trends, key=lambda t: t.period)

        today = self.today()
        window_start = one_month_before(today)
        opinions = await self.opinions.fetch_investment_opinions(symbol, window_start, today)

        try:
            name = await self.opinions.lookup_stock_name(symbol)
        except ExternalAPIError as e:
            logger.warning(f"Name lookup failed for {symbol}, using code: {e}")
            name = None

        return summarize_opinions(opinions, name or symbol, window_start)

    # ============ Company news ============

    async def company_news(self, symbol: str, is_domestic: bool) -> list[CompanyNewsItem]:
        """Newest-first company news. Domestic symbols have no source yet."""
        symbol = normalize_symbol(symbol)
        if is_domestic:
            return []

        today = self.today()
        date_from = today - timedelta(days=self.config.company_news_days)
        items = await self.news_vendor.fetch_company_news(symbol, date_from, today)
        items.sort(key=lambda item: item.datetime, reverse=True)
        return items[: self.config.company_news_limit]


# Singleton instance
_indicator_router: Optional[IndicatorRouter] = None


def get_indicator_router() -> IndicatorRouter:
    """Get or create the router wired to the real vendors."""
    global _indicator_router
    if _indicator_router is None:
        from wing.services.cache.redis_client import get_json_cache
        from wing.services.indicators.service import get_indicator_service
        from wing.services.market_data import AlphaVantageClient, FinnhubClient, KisClient

        kis = KisClient()
        alpha = AlphaVantageClient()
        finnhub = FinnhubClient()
        _indicator_router = IndicatorRouter(
            domestic_candles=kis,
            opinions=kis,
            foreign_candles=alpha,
            foreign_indicators=alpha,
            recommendations=finnhub,
            company_news=finnhub,
            engine=get_indicator_service(),
            cache=get_json_cache(),
        )
    return _indicator_router


async def close_indicator_router() -> None:
    """Close vendor HTTP sessions. Called on application shutdown."""
    global _indicator_router
    if _indicator_router is None:
        return
    for client in {
        id(c): c
        for c in (
            _indicator_router.domestic_candles,
            _indicator_router.foreign_candles,
            _indicator_router.news_vendor,
        )
    }.values():
        close = getattr(client, "close", None)
        if close is not None:
            await close()
    _indicator_router = None
