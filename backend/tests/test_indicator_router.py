"""
Tests for wing.services.router

Every vendor is an AsyncMock; "today" is pinned so display windows are
deterministic.
"""
from datetime import date, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from factories import make_candles
from wing.schemas.market import CompanyNewsItem, MomentumPoint, RecommendationSummary, RsiPoint
from wing.services.base import (
    ExternalAPIError,
    InsufficientHistoryError,
    InvalidArgumentError,
    NoDataError,
)
from wing.services.cache import JsonCache
from wing.services.market_data import AlphaVantageClient, InvestmentOpinion
from wing.services.router.service import IndicatorRouter, one_month_before

TODAY = date(2024, 3, 20)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _vendor(**methods) -> MagicMock:
    vendor = MagicMock()
    for name, value in methods.items():
        setattr(vendor, name, AsyncMock(return_value=value))
    return vendor


def _rsi_points(n: int) -> list[RsiPoint]:
    return [RsiPoint(date=f"2024-01-{i + 1:02d}", rsi=40.0 + i) for i in range(n)]


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def vendors():
    return {
        "domestic_candles": _vendor(fetch_daily_candles=make_candles(range(1, 81))),
        "opinions": _vendor(fetch_investment_opinions=[], lookup_stock_name="Samsung Electronics"),
        "foreign_candles": _vendor(fetch_daily_candles=make_candles(range(100, 180))),
        "foreign_indicators": _vendor(
            fetch_rsi=_rsi_points(15),
            fetch_momentum=[MomentumPoint(date="2024-03-19", mom=1.5)],
        ),
        "recommendations": _vendor(fetch_recommendation_trends=[]),
        "company_news": _vendor(fetch_company_news=[]),
    }


@pytest.fixture
def make_router(vendors):
    def factory(cache=None) -> IndicatorRouter:
        return IndicatorRouter(**vendors, cache=cache, today=lambda: TODAY)

    return factory


# ── Domestic path ─────────────────────────────────────────────────────────────

async def test_domestic_price_with_ma_uses_display_window(make_router, vendors):
    points = await make_router().price_with_ma("005930", True)

    assert points[0].date == "2024-02-19"
    assert points[-1].date == "2024-03-20"
    assert len(points) == 31
    # MA20 is warm from the first displayed day, MA60 only once 60 candles exist
    assert all(p.ma20 is not None for p in points)
    assert points[-1].ma60 == pytest.approx(sum(range(21, 81)) / 60)
    vendors["foreign_candles"].fetch_daily_candles.assert_not_awaited()


async def test_domestic_rsi_computed_locally(make_router, vendors):
    points = await make_router().rsi("005930", True)

    assert all(p.rsi == 100.0 for p in points)
    assert points[-1].date == "2024-03-20"
    vendors["foreign_indicators"].fetch_rsi.assert_not_awaited()


async def test_domestic_momentum_with_custom_period(make_router):
    points = await make_router().momentum("005930", True, period=5)
    assert all(p.mom == 5.0 for p in points)


async def test_domestic_short_history_is_reported(make_router, vendors):
    vendors["domestic_candles"].fetch_daily_candles = AsyncMock(return_value=make_candles(range(1, 10)))

    with pytest.raises(InsufficientHistoryError):
        await make_router().rsi("005930", True, period=14)


async def test_domestic_no_candles(make_router, vendors):
    vendors["domestic_candles"].fetch_daily_candles = AsyncMock(return_value=[])

    with pytest.raises(NoDataError):
        await make_router().price_with_ma("005930", True)


# ── Foreign path ──────────────────────────────────────────────────────────────

async def test_foreign_rsi_keeps_last_ten_points(make_router, vendors):
    points = await make_router().rsi("nvda", False)

    assert len(points) == 10
    assert points[-1].rsi == 54.0
    vendors["foreign_indicators"].fetch_rsi.assert_awaited_once_with("NVDA", 14)
    vendors["domestic_candles"].fetch_daily_candles.assert_not_awaited()


async def test_foreign_empty_indicator_is_no_data(make_router, vendors):
    vendors["foreign_indicators"].fetch_momentum = AsyncMock(return_value=[])

    with pytest.raises(NoDataError):
        await make_router().momentum("NVDA", False)


async def test_foreign_price_with_ma_keeps_last_thirty(make_router):
    points = await make_router().price_with_ma("NVDA", False)

    assert len(points) == 30
    assert points[-1].close == 179.0
    assert points[-1].ma60 is not None


async def test_foreign_vendor_error_propagates(make_router, vendors):
    vendors["foreign_indicators"].fetch_rsi = AsyncMock(
        side_effect=ExternalAPIError("AlphaVantage", "rate limited")
    )

    with pytest.raises(ExternalAPIError):
        await make_router().rsi("NVDA", False)


# ── Validation ────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("period", [0, -5])
async def test_bad_period_rejected_before_io(make_router, vendors, period):
    with pytest.raises(InvalidArgumentError):
        await make_router().rsi("NVDA", False, period=period)
    vendors["foreign_indicators"].fetch_rsi.assert_not_awaited()


async def test_blank_symbol_rejected(make_router):
    with pytest.raises(InvalidArgumentError):
        await make_router().price_with_ma("  ", True)


# ── Cache ─────────────────────────────────────────────────────────────────────

async def test_second_request_served_from_cache(make_router, vendors):
    router = make_router(cache=JsonCache())

    first = await router.rsi("NVDA", False)
    second = await router.rsi("NVDA", False)

    assert first == second
    vendors["foreign_indicators"].fetch_rsi.assert_awaited_once()


async def test_cache_key_includes_period(make_router, vendors):
    router = make_router(cache=JsonCache())

    await router.rsi("NVDA", False, period=14)
    await router.rsi("NVDA", False, period=7)

    assert vendors["foreign_indicators"].fetch_rsi.await_count == 2


# ── Recommendation ────────────────────────────────────────────────────────────

async def test_foreign_recommendation_picks_latest_period(make_router, vendors):
    vendors["recommendations"].fetch_recommendation_trends = AsyncMock(
        return_value=[
            RecommendationSummary(symbol="NVDA", period="2024-02-01", buy=20),
            RecommendationSummary(symbol="NVDA", period="2024-03-01", buy=25, strong_buy=10),
        ]
    )

    summary = await make_router().recommendation("NVDA", False)

    assert summary.period == "2024-03-01"
    assert summary.model_dump(by_alias=True)["strongBuy"] == 10


async def test_foreign_recommendation_none_when_empty(make_router):
    assert await make_router().recommendation("NVDA", False) is None


async def test_domestic_recommendation_buckets_opinions(make_router, vendors):
    vendors["opinions"].fetch_investment_opinions = AsyncMock(
        return_value=[
            InvestmentOpinion(date=date(2024, 3, 4), code="2"),
            InvestmentOpinion(date=date(2024, 3, 1), code="2"),
            InvestmentOpinion(date=date(2024, 3, 8), code="3"),
            InvestmentOpinion(date=date(2024, 3, 12), code="1"),
            InvestmentOpinion(date=date(2024, 3, 15), code="9"),
        ]
    )

    summary = await make_router().recommendation("005930", True)

    assert (summary.buy, summary.hold, summary.sell) == (2, 1, 1)
    assert (summary.strong_buy, summary.strong_sell) == (0, 0)
    assert summary.symbol == "Samsung Electronics"
    assert summary.period == "2024-03-01"
    vendors["opinions"].fetch_investment_opinions.assert_awaited_once_with(
        "005930", date(2024, 2, 20), TODAY
    )


async def test_domestic_recommendation_falls_back_to_code(make_router, vendors):
    vendors["opinions"].lookup_stock_name = AsyncMock(side_effect=ExternalAPIError("KIS", "down"))

    summary = await make_router().recommendation("005930", True)

    assert summary.symbol == "005930"
    assert summary.period == "2024-02-20"
    assert summary.buy == summary.hold == summary.sell == 0


def test_one_month_before_clamps_day():
    assert one_month_before(date(2024, 3, 31)) == date(2024, 2, 29)
    assert one_month_before(date(2024, 1, 15)) == date(2023, 12, 15)


# ── Company news ──────────────────────────────────────────────────────────────

async def test_domestic_company_news_is_empty(make_router, vendors):
    assert await make_router().company_news("005930", True) == []
    vendors["company_news"].fetch_company_news.assert_not_awaited()


async def test_foreign_company_news_newest_first_capped(make_router, vendors):
    vendors["company_news"].fetch_company_news = AsyncMock(
        return_value=[CompanyNewsItem(id=i, datetime=1_700_000_000 + i) for i in range(25)]
    )

    items = await make_router().company_news("NVDA", False)

    assert len(items) == 20
    assert [i.id for i in items[:3]] == [24, 23, 22]


async def test_foreign_price_with_ma_seeds_averages_from_full_vendor_series():
    days = []
    day = date(2024, 6, 28)
    while len(days) < 100:
        if day.weekday() < 5:
            days.append(day)
        day -= timedelta(days=1)
    rows = {
        d.isoformat(): {
            "1. open": "10", "2. high": "10", "3. low": "10", "4. close": str(100 + i), "5. volume": "1",
        }
        for i, d in enumerate(reversed(days))
    }
    http = MagicMock()
    http.get_json = AsyncMock(return_value={"Time Series (Daily)": rows})
    alpha = AlphaVantageClient(api_key="k", base_url="https://av.test", http=http)
    router = IndicatorRouter(
        domestic_candles=_vendor(),
        opinions=_vendor(),
        foreign_candles=alpha,
        foreign_indicators=alpha,
        recommendations=_vendor(),
        company_news=_vendor(),
        today=lambda: date(2024, 6, 28),
    )

    points = await router.price_with_ma("NVDA", False)

    assert len(points) == 30
    assert all(p.ma60 is not None for p in points)
    assert points[-1].close == 199.0
