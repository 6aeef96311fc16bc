"""
AlphaVantage Adapter

Foreign market data:
- TIME_SERIES_DAILY candles
- Vendor-computed RSI and MOM series

AlphaVantage answers HTTP 200 even on failure and reports the problem in
the body: "Error Message" for bad symbols, "Note"/"Information" for
rate limits and key problems.
"""

import logging
from datetime import date
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from wing.core.config import settings
from wing.schemas.market import Candle, MomentumPoint, RsiPoint
from wing.services.base import ExternalAPIError, NoDataError
from wing.services.market_data.http import VendorHttpClient
from wing.services.market_data.interface import CandleSource, IndicatorVendor, sort_candles

logger = logging.getLogger(__name__)

SERVICE_NAME = "AlphaVantage"

DAILY_SERIES_KEY = "Time Series (Daily)"


def check_payload(data: Any, symbol: str) -> dict:
    """Raise on in-band errors, return the payload otherwise."""
    if not isinstance(data, dict):
        raise ExternalAPIError(SERVICE_NAME, "Unexpected response shape", {"symbol": symbol})
    if data.get("Error Message"):
        raise NoDataError(SERVICE_NAME, data["Error Message"], {"symbol": symbol})
    notice = data.get("Note") or data.get("Information")
    if notice:
        raise ExternalAPIError(SERVICE_NAME, notice, {"symbol": symbol})
    return data


def parse_daily_series(data: dict) -> list[Candle]:
    candles = []
    for day, values in (data.get(DAILY_SERIES_KEY) or {}).items():
        try:
            candles.append(
                Candle(
                    date=date.fromisoformat(day[:10]),
                    open=float(values["1. open"]),
                    high=float(values["2. high"]),
                    low=float(values["3. low"]),
                    close=float(values["4. close"]),
                    volume=int(float(values.get("5. volume") or values.get("6. volume") or 0)),
                )
            )
        except (KeyError, TypeError, ValueError, PydanticValidationError) as e:
            logger.debug(f"Skipping AlphaVantage row {day}: {e}")
    return sort_candles(candles)


def parse_technical_series(data: dict, function: str) -> list[tuple[str, float]]:
    """[(YYYY-MM-DD, value)] ascending for a 'Technical Analysis: <fn>' block."""
    series = data.get(f"Technical Analysis: {function}") or {}
    points = []
    for day, values in series.items():
        try:
            points.append((day[:10], float(values[function])))
        except (KeyError, TypeError, ValueError):
            continue
    points.sort(key=lambda p: p[0])
    return points


class AlphaVantageClient(CandleSource, IndicatorVendor):
    """AlphaVantage REST client."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        http: Optional[VendorHttpClient] = None,
    ):
        self.api_key = api_key or settings.alpha_vantage_api_key
        self.base_url = base_url or settings.alpha_vantage_base_url
        self.http = http or VendorHttpClient(SERVICE_NAME)

    async def _query(self, symbol: str, **params) -> dict:
        if not self.api_key:
            raise ExternalAPIError(SERVICE_NAME, "AlphaVantage API key not configured")
        data = await self.http.get_json(
            self.base_url, params={"symbol": symbol, "apikey": self.api_key, **params}
        )
        return check_payload(data, symbol)

    async def fetch_daily_candles(self, symbol: str, start: date, end: date) -> list[Candle]:
        data = await self._query(symbol, function="TIME_SERIES_DAILY", outputsize="compact")
        return [c for c in parse_daily_series(data) if start <= c.date <= end]

    async def fetch_rsi(self, symbol: str, period: int) -> list[RsiPoint]:
        data = await self._query(
            symbol,
            function="RSI",
            interval=settings.alpha_vantage_rsi_interval,
            time_period=str(period),
            series_type="close",
        )
        return [RsiPoint(date=d, rsi=round(v, 2)) for d, v in parse_technical_series(data, "RSI")]

    async def fetch_momentum(self, symbol: str, period: int) -> list[MomentumPoint]:
        data = await self._query(
            symbol,
            function="MOM",
            interval=settings.alpha_vantage_momentum_interval,
            time_period=str(period),
            series_type="close",
        )
        return [
            MomentumPoint(date=d, mom=round(v, 2)) for d, v in parse_technical_series(data, "MOM")
        ]

    async def close(self) -> None:
        await self.http.close()
