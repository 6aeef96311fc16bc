"""
Indicator Engine Service

CONTRACT:
    Input:  IndicatorRequest (ascending daily candles + indicator kind)
    Output: IndicatorSeries (dated points inside the display window)

RESPONSIBILITIES:
    - Simple moving averages (MA20 / MA60 overlay)
    - Wilder RSI
    - Momentum (absolute and percent)
    - Insufficient-history guard before any math

PURE PYTHON - No LLM involvement.
Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from wing.services.indicators.interface import IndicatorRequest, IndicatorServiceInterface
from wing.services.indicators.service import (
    IndicatorService,
    display_window_start,
    get_indicator_service,
)

__all__ = [
    "IndicatorRequest",
    "IndicatorServiceInterface",
    "IndicatorService",
    "display_window_start",
    "get_indicator_service",
]
