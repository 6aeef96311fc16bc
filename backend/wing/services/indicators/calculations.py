"""
Technical Indicator Calculations

Pure Python/NumPy implementations of technical indicators.
NO LLM INVOLVEMENT - All math is deterministic.

Array functions return one value per input index with NaN where the
indicator is not yet defined. The `latest_*` helpers return the last
value rounded to 2 decimals.
"""

import math

import numpy as np

from wing.services.base import (
    EmptySeriesError,
    InsufficientHistoryError,
    InvalidArgumentError,
)

SERVICE_NAME = "IndicatorEngine"


def round2(value: float) -> float:
    return round(float(value), 2)


# =============================================================================
# GUARDS
# =============================================================================


def check_period(period: int) -> None:
    if not isinstance(period, (int, np.integer)) or isinstance(period, bool) or period <= 0:
        raise InvalidArgumentError(
            SERVICE_NAME, f"period must be a positive integer, got {period!r}"
        )


def require_history(closes: np.ndarray, period: int) -> None:
    """Latest-value and RSI/MOM series forms need strictly more than `period` closes."""
    check_period(period)
    if len(closes) == 0:
        raise EmptySeriesError(SERVICE_NAME, "Candle series is empty")
    if len(closes) <= period:
        raise InsufficientHistoryError(SERVICE_NAME, required=period, available=len(closes))


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def sma(data: np.ndarray, period: int) -> np.ndarray:
    """Simple Moving Average over a sliding window. NaN until the window fills."""
    check_period(period)
    if len(data) == 0:
        raise EmptySeriesError(SERVICE_NAME, "Candle series is empty")

    result = np.full(len(data), np.nan)
    for i in range(period - 1, len(data)):
        result[i] = np.mean(data[i - period + 1 : i + 1])
    return result


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def rsi(closes: np.ndarray, period: int = 14) -> np.ndarray:
    """Relative Strength Index with Wilder smoothing. First value at index `period`."""
    require_history(closes, period)

    # Calculate price changes
    deltas = np.diff(closes)

    # Separate gains and losses
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    # Seed averages over the first `period` transitions
    avg_gain = np.mean(gains[:period])
    avg_loss = np.mean(losses[:period])

    result = np.full(len(closes), np.nan)
    result[period] = _rsi_value(avg_gain, avg_loss)

    # Subsequent RSI values using smoothed averages
    for i in range(period, len(deltas)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period
        result[i + 1] = _rsi_value(avg_gain, avg_loss)

    return result


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100 - (100 / (1 + rs))


def momentum(closes: np.ndarray, period: int) -> np.ndarray:
    """MOM(t) = close(t) - close(t - period)."""
    require_history(closes, period)

    result = np.full(len(closes), np.nan)
    result[period:] = closes[period:] - closes[:-period]
    return result


def momentum_percent(closes: np.ndarray, period: int) -> np.ndarray:
    """Rate of change: (close(t) / close(t - period) - 1) * 100."""
    require_history(closes, period)

    result = np.full(len(closes), np.nan)
    result[period:] = (closes[period:] / closes[:-period] - 1) * 100
    return result


# =============================================================================
# LATEST VALUES
# =============================================================================


def latest_sma(closes: np.ndarray, period: int) -> float:
    require_history(closes, period)
    return round2(np.mean(closes[-period:]))


def latest_rsi(closes: np.ndarray, period: int = 14) -> float:
    return round2(rsi(closes, period)[-1])


def latest_momentum(closes: np.ndarray, period: int) -> float:
    require_history(closes, period)
    return round2(closes[-1] - closes[-1 - period])


def latest_momentum_percent(closes: np.ndarray, period: int) -> float:
    require_history(closes, period)
    return round2((closes[-1] / closes[-1 - period] - 1) * 100)


def to_optional(value: float):
    """NaN -> None, anything else rounded to 2 decimals."""
    if value is None or math.isnan(value):
        return None
    return round2(value)
