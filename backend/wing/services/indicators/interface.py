"""
Indicator Engine Service Interface

Defines the contract for the indicator calculation layer.
"""

from abc import abstractmethod
from datetime import date
from typing import Optional, Union

from pydantic import BaseModel, Field

from wing.services.base import BaseService
from wing.schemas.market import Candle, IndicatorKind, MomentumPoint, PricePoint, RsiPoint


class IndicatorRequest(BaseModel):
    """Candles plus which series to build from them."""

    candles: list[Candle]
    kind: IndicatorKind
    period: Optional[int] = None
    display_from: Optional[date] = Field(
        default=None,
        description="Keep only points dated on or after this day",
    )


IndicatorSeries = Union[list[PricePoint], list[RsiPoint], list[MomentumPoint]]


class IndicatorServiceInterface(BaseService[IndicatorRequest, IndicatorSeries]):
    """
    Indicator Engine Service Contract.

    INPUT: IndicatorRequest
        - candles: ascending daily bars covering the full lookback
        - kind: PRICE_MA, RSI or MOMENTUM

    OUTPUT: IndicatorSeries
        - date-ascending points restricted to the display window
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    @abstractmethod
    def price_with_ma(
        self, candles: list[Candle], display_from: Optional[date] = None
    ) -> list[PricePoint]:
        """Close with MA20/MA60 per day."""
        pass

    @abstractmethod
    def rsi_series(
        self, candles: list[Candle], period: int = 14, display_from: Optional[date] = None
    ) -> list[RsiPoint]:
        """Wilder RSI per day from the seed index onward."""
        pass

    @abstractmethod
    def momentum_series(
        self, candles: list[Candle], period: int = 10, display_from: Optional[date] = None
    ) -> list[MomentumPoint]:
        """close(t) - close(t - period) per day from index `period` onward."""
        pass

    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        return True
