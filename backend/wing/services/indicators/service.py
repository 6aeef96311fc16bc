"""
Indicator Engine Service Implementation

Builds dated indicator series from daily candles.
NO LLM INVOLVEMENT - Pure Python/NumPy calculations.

Indicators are computed over the whole candle series (the lookback buffer)
and only then cut down to the display window, so the first displayed
values already carry a fully warmed-up average.
"""

import logging
from datetime import date, timedelta
from typing import Optional

import numpy as np

from wing.schemas.market import Candle, IndicatorKind, MomentumPoint, PricePoint, RsiPoint
from wing.services.base import EmptySeriesError, InvalidArgumentError
from wing.services.indicators.calculations import momentum, rsi, round2, sma, to_optional
from wing.services.indicators.interface import (
    IndicatorRequest,
    IndicatorSeries,
    IndicatorServiceInterface,
)

logger = logging.getLogger(__name__)

MA_SHORT = 20
MA_LONG = 60


def display_window_start(today: date, days: int) -> date:
    """First calendar day inside a trailing window of `days` days."""
    return today - timedelta(days=days)


def _closes(candles: list[Candle]) -> np.ndarray:
    return np.array([c.close for c in candles], dtype=float)


class IndicatorService(IndicatorServiceInterface):
    """
    Indicator Engine Service.

    Stateless; safe to share between requests.
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    async def execute(self, input_data: IndicatorRequest) -> IndicatorSeries:
        if input_data.kind == IndicatorKind.PRICE_MA:
            return self.price_with_ma(input_data.candles, input_data.display_from)
        if input_data.kind == IndicatorKind.RSI:
            return self.rsi_series(
                input_data.candles, input_data.period or 14, input_data.display_from
            )
        if input_data.kind == IndicatorKind.MOMENTUM:
            return self.momentum_series(
                input_data.candles, input_data.period or 10, input_data.display_from
            )
        raise InvalidArgumentError(
            self.name, f"{input_data.kind.value} is not a candle indicator"
        )

    def validate_series(self, candles: list[Candle]) -> None:
        """Reject empty or non strictly ascending series."""
        if not candles:
            raise EmptySeriesError(self.name, "Candle series is empty")
        for prev, cur in zip(candles, candles[1:]):
            if cur.date <= prev.date:
                raise InvalidArgumentError(
                    self.name,
                    "Candles must be strictly ascending by date",
                    {"previous": prev.date.isoformat(), "current": cur.date.isoformat()},
                )

    def price_with_ma(
        self, candles: list[Candle], display_from: Optional[date] = None
    ) -> list[PricePoint]:
        self.validate_series(candles)
        closes = _closes(candles)
        ma20 = sma(closes, MA_SHORT)
        ma60 = sma(closes, MA_LONG)

        points = [
            PricePoint(
                date=c.date.isoformat(),
                close=round2(c.close),
                ma20=to_optional(ma20[i]),
                ma60=to_optional(ma60[i]),
            )
            for i, c in enumerate(candles)
            if display_from is None or c.date >= display_from
        ]
        logger.debug(f"price_with_ma: {len(candles)} candles -> {len(points)} points")
        return points

    def rsi_series(
        self, candles: list[Candle], period: int = 14, display_from: Optional[date] = None
    ) -> list[RsiPoint]:
        self.validate_series(candles)
        values = rsi(_closes(candles), period)

        return [
            RsiPoint(date=c.date.isoformat(), rsi=round2(values[i]))
            for i, c in enumerate(candles)
            if i >= period and (display_from is None or c.date >= display_from)
        ]

    def momentum_series(
        self, candles: list[Candle], period: int = 10, display_from: Optional[date] = None
    ) -> list[MomentumPoint]:
        self.validate_series(candles)
        values = momentum(_closes(candles), period)

        return [
            MomentumPoint(date=c.date.isoformat(), mom=round2(values[i]))
            for i, c in enumerate(candles)
            if i >= period and (display_from is None or c.date >= display_from)
        ]


# Singleton instance
_indicator_service: Optional[IndicatorService] = None


def get_indicator_service() -> IndicatorService:
    """Get or create indicator service singleton."""
    global _indicator_service
    if _indicator_service is None:
        _indicator_service = IndicatorService()
    return _indicator_service
