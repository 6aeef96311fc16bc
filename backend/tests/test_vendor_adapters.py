"""
Tests for the KIS / AlphaVantage / Finnhub adapters

HTTP is a MagicMock with AsyncMock verbs; payloads mirror the vendors'
documented shapes.
"""
from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from wing.services.base import ExternalAPIError, NoDataError
from wing.services.market_data import (
    AccessTokenCache,
    AlphaVantageClient,
    FinnhubClient,
    KisClient,
)
from wing.services.market_data.alpha_vantage_adapter import check_payload, parse_technical_series
from wing.services.market_data.kis_adapter import parse_daily_rows


# ── Helpers ───────────────────────────────────────────────────────────────────

def _http(get=None, post=None) -> MagicMock:
    http = MagicMock()
    http.get_json = AsyncMock(side_effect=get) if isinstance(get, list) else AsyncMock(return_value=get)
    http.post_json = AsyncMock(return_value=post)
    http.close = AsyncMock()
    return http


def _kis_row(day: str, close: str) -> dict:
    return {
        "stck_bsop_date": day,
        "stck_oprc": close,
        "stck_hgpr": close,
        "stck_lwpr": close,
        "stck_clpr": close,
        "acml_vol": "1200",
    }


def _kis(http) -> KisClient:
    return KisClient(
        app_key="key",
        app_secret="secret",
        base_url="https://kis.test",
        http=http,
        token_cache=AccessTokenCache(),
    )


# ── KIS ───────────────────────────────────────────────────────────────────────

def test_parse_daily_rows_sorts_and_skips_blank_rows():
    rows = [_kis_row("20240305", "71000"), {}, _kis_row("20240304", "70500"), _kis_row("", "1")]

    candles = parse_daily_rows(rows)

    assert [c.date for c in candles] == [date(2024, 3, 4), date(2024, 3, 5)]
    assert candles[-1].close == 71000.0
    assert candles[-1].volume == 1200


async def test_kis_daily_candles_issue_token_once():
    http = _http(
        get=[
            {"rt_cd": "0", "output2": [_kis_row("20240305", "71000")]},
            {"rt_cd": "0", "output2": [_kis_row("20240306", "72000")]},
        ],
        post={"access_token": "tok", "expires_in": 86400},
    )
    client = _kis(http)

    await client.fetch_daily_candles("005930", date(2024, 3, 1), date(2024, 3, 31))
    candles = await client.fetch_daily_candles("005930", date(2024, 3, 1), date(2024, 3, 31))

    assert candles[0].close == 72000.0
    http.post_json.assert_awaited_once()
    headers = http.get_json.await_args.kwargs["headers"]
    assert headers["authorization"] == "Bearer tok"
    assert headers["tr_id"] == "FHKST03010100"


async def test_kis_business_error_raises():
    http = _http(
        get={"rt_cd": "1", "msg_cd": "EGW00123", "msg1": "invalid symbol"},
        post={"access_token": "tok", "expires_in": 86400},
    )

    with pytest.raises(ExternalAPIError, match="invalid symbol"):
        await _kis(http).fetch_investment_opinions("999999", date(2024, 2, 1), date(2024, 3, 1))


async def test_kis_unauthorized_invalidates_token():
    http = _http(post={"access_token": "tok", "expires_in": 86400})
    http.get_json = AsyncMock(side_effect=ExternalAPIError("KIS", "HTTP 401", {"status": 401}))
    client = _kis(http)

    with pytest.raises(ExternalAPIError):
        await client.lookup_stock_name("005930")

    assert client.tokens.token is None


async def test_kis_without_credentials_fails_fast():
    http = _http()
    client = _kis(http)
    client.app_secret = None

    with pytest.raises(ExternalAPIError):
        await client.fetch_daily_candles("005930", date(2024, 3, 1), date(2024, 3, 5))
    http.post_json.assert_not_awaited()


async def test_kis_opinions_and_name():
    http = _http(
        get=[
            {
                "rt_cd": "0",
                "output": [
                    {"stck_bsop_date": "20240304", "invt_opnn_cls_code": "2", "mbcr_name": "A"},
                    {"stck_bsop_date": "20240305", "invt_opnn_cls_code": ""},
                ],
            },
            {"rt_cd": "0", "output": {"prdt_abrv_name": " Samsung Elec "}},
        ],
        post={"access_token": "tok", "expires_in": 86400},
    )
    client = _kis(http)

    opinions = await client.fetch_investment_opinions("005930", date(2024, 2, 20), date(2024, 3, 20))
    name = await client.lookup_stock_name("005930")

    assert [(o.date, o.code, o.firm) for o in opinions] == [(date(2024, 3, 4), "2", "A")]
    assert name == "Samsung Elec"


# ── AlphaVantage ──────────────────────────────────────────────────────────────

def test_check_payload_maps_in_band_errors():
    with pytest.raises(NoDataError):
        check_payload({"Error Message": "Invalid API call"}, "XXXX")
    with pytest.raises(ExternalAPIError):
        check_payload({"Note": "Thank you for using Alpha Vantage!"}, "NVDA")
    with pytest.raises(ExternalAPIError):
        check_payload({"Information": "premium endpoint"}, "NVDA")


def test_parse_technical_series_sorts_ascending():
    data = {
        "Technical Analysis: RSI": {
            "2024-03-08": {"RSI": "61.2345"},
            "2024-03-01": {"RSI": "55.1"},
            "2024-02-23": {"RSI": "bad"},
        }
    }

    assert parse_technical_series(data, "RSI") == [("2024-03-01", 55.1), ("2024-03-08", 61.2345)]


async def test_alpha_vantage_rsi_request():
    http = _http(get={"Technical Analysis: RSI": {"2024-03-08": {"RSI": "61.2345"}}})
    client = AlphaVantageClient(api_key="demo", base_url="https://av.test/query", http=http)

    points = await client.fetch_rsi("NVDA", 14)

    assert points[0].rsi == 61.23
    params = http.get_json.await_args.kwargs["params"]
    assert params["function"] == "RSI"
    assert params["time_period"] == "14"
    assert params["symbol"] == "NVDA"


async def test_alpha_vantage_daily_candles_filtered_to_window():
    http = _http(
        get={
            "Time Series (Daily)": {
                "2024-03-08": {"1. open": "1", "2. high": "2", "3. low": "1", "4. close": "2", "5. volume": "10"},
                "2024-01-02": {"1. open": "1", "2. high": "2", "3. low": "1", "4. close": "1", "5. volume": "10"},
            }
        }
    )
    client = AlphaVantageClient(api_key="demo", http=http)

    candles = await client.fetch_daily_candles("NVDA", date(2024, 3, 1), date(2024, 3, 31))

    assert [c.date for c in candles] == [date(2024, 3, 8)]


# ── Finnhub ───────────────────────────────────────────────────────────────────

async def test_finnhub_recommendations_parsed():
    http = _http(
        get=[[{"symbol": "NVDA", "period": "2024-03-01", "buy": 24, "hold": 7, "sell": 1, "strongBuy": 12, "strongSell": 0}]]
    )
    client = FinnhubClient(api_key="fh", http=http)

    trends = await client.fetch_recommendation_trends("NVDA")

    assert trends[0].strong_buy == 12
    assert trends[0].period == "2024-03-01"


async def test_finnhub_company_news_passes_date_range():
    http = _http(get=[[{"id": 1, "datetime": 1709251200, "headline": "h"}, {"headline": "no datetime"}]])
    client = FinnhubClient(api_key="fh", http=http)

    items = await client.fetch_company_news("NVDA", date(2024, 2, 20), date(2024, 3, 20))

    assert [i.id for i in items] == [1]
    params = http.get_json.await_args.kwargs["params"]
    assert (params["from"], params["to"]) == ("2024-02-20", "2024-03-20")


async def test_finnhub_error_payload_raises():
    http = _http(get={"error": "Invalid API key"})

    with pytest.raises(ExternalAPIError):
        await FinnhubClient(api_key="fh", http=http).fetch_recommendation_trends("NVDA")
