"""
Technical Indicator Calculations

Pure Python/NumPy implementations of the chart indicators.
Every function takes an ordered price series and returns a new list
index-aligned with it; positions without enough history are None.

No I/O, no logging, no shared state.
"""

from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Optional, Sequence

import numpy as np


class InvalidParameter(ValueError):
    """Raised for a non-positive window/period or a non-finite input series."""


# Enough digits to quantize any finite float
_ROUNDING_CONTEXT = Context(prec=400, rounding=ROUND_HALF_UP)


def round_half_up(value: float, places: int = 0) -> float:
    """
    Round the exact binary value half away from zero.

    Matches JavaScript's Number.toFixed: 0.03125 -> 0.0313, where the
    built-in round() gives 0.0312.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(float(value)).quantize(quantum, context=_ROUNDING_CONTEXT))


# =============================================================================
# INPUT CHECKS
# =============================================================================


def _check_length(name: str, value: int) -> None:
    """Window and period must be positive integers."""
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidParameter(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidParameter(f"{name} must be positive, got {value}")


def _as_series(values: Sequence[float]) -> np.ndarray:
    """Copy the input into a float array, rejecting non-numeric or non-finite data."""
    # Strings and bools are not prices even when numpy could cast them
    for value in values:
        if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, float, np.number)):
            raise InvalidParameter(f"Series contains non-numeric value {value!r}")

    data = np.array(values, dtype=float)
    if not np.all(np.isfinite(data)):
        raise InvalidParameter("Series contains non-finite values")

    return data


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def sma(values: Sequence[float], window: int) -> list[Optional[float]]:
    """
    Simple Moving Average.

    result[i] is the mean of values[i-window+1 .. i], rounded to 4 places,
    or None while i < window - 1.
    """
    _check_length("window", window)
    data = _as_series(values)

    result: list[Optional[float]] = [None] * len(data)
    if len(data) < window:
        return result

    for i in range(window - 1, len(data)):
        result[i] = round_half_up(np.mean(data[i - window + 1 : i + 1]), 4)
    return result


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return round_half_up(100 - (100 / (1 + rs)), 2)


def rsi(values: Sequence[float], period: int = 14) -> list[Optional[float]]:
    """
    Relative Strength Index (Wilder smoothing).

    Indices 0..period-1 are None. Index `period` holds the RSI of the seed
    averages (first `period` deltas); every later index i holds the RSI after
    smoothing in delta[i-1].
    """
    _check_length("period", period)
    closes = _as_series(values)

    result: list[Optional[float]] = [None] * len(closes)
    if len(closes) < period + 1:
        return result

    # Calculate price changes
    deltas = np.diff(closes)

    # Separate gains and losses; zero deltas count as neither
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    # Seed averages
    avg_gain = float(np.mean(gains[:period]))
    avg_loss = float(np.mean(losses[:period]))
    result[period] = _rsi_value(avg_gain, avg_loss)

    # Subsequent RSI values using smoothed averages
    for k in range(period, len(deltas)):
        avg_gain = (avg_gain * (period - 1) + float(gains[k])) / period
        avg_loss = (avg_loss * (period - 1) + float(losses[k])) / period
        result[k + 1] = _rsi_value(avg_gain, avg_loss)

    return result


# =============================================================================
# RANGE STATISTICS
# =============================================================================


TRADING_DAYS_PER_YEAR = 252


def fifty_two_week_range(
    highs: Sequence[float],
    lows: Sequence[float],
    volumes: Sequence[float],
    lookback: int = TRADING_DAYS_PER_YEAR,
) -> dict:
    """
    High, low and average volume over the last `lookback` bars.

    Returns None for every field when the series is empty.
    """
    _check_length("lookback", lookback)
    recent_highs = _as_series(highs)[-lookback:]
    recent_lows = _as_series(lows)[-lookback:]
    recent_volumes = _as_series(volumes)[-lookback:]

    if len(recent_highs) == 0:
        return {"high_52week": None, "low_52week": None, "avg_volume": None}

    return {
        "high_52week": float(np.max(recent_highs)),
        "low_52week": float(np.min(recent_lows)),
        "avg_volume": int(round_half_up(np.mean(recent_volumes))),
    }


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def get_last_valid(series: Sequence[Optional[float]]) -> Optional[float]:
    """Get last non-None value from an indicator series."""
    for value in reversed(series):
        if value is not None:
            return value
    return None
