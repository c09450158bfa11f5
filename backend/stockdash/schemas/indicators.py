"""
CONTRACT 2: Indicator Engine

Input: ordered PriceBars (or a raw close series)
Output: ChartSeries / ComputeResponse

All values are index-aligned with the input; None marks positions
without enough history.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


DEFAULT_SMA_WINDOWS = (20, 50)
DEFAULT_RSI_PERIOD = 14


# =============================================================================
# INPUT
# =============================================================================


class ComputeRequest(BaseModel):
    """Raw series for ad-hoc indicator calculation."""

    values: list[float] = Field(..., description="Closing prices, oldest first")
    sma_windows: list[int] = Field(default_factory=lambda: list(DEFAULT_SMA_WINDOWS))
    rsi_period: int = DEFAULT_RSI_PERIOD


# =============================================================================
# OUTPUT
# =============================================================================


class RangeSummary(BaseModel):
    high_52week: Optional[float] = None
    low_52week: Optional[float] = None
    avg_volume: Optional[int] = None


class LatestValues(BaseModel):
    close: Optional[float] = None
    rsi: Optional[float] = None
    moving_averages: dict[str, Optional[float]] = Field(default_factory=dict)


class ComputeResponse(BaseModel):
    count: int
    moving_averages: dict[str, list[Optional[float]]]
    rsi_period: int
    rsi: list[Optional[float]]


class ChartSeries(BaseModel):
    """Everything the price chart needs for one ticker."""

    ticker: str
    labels: list[date]
    closes: list[float]
    volumes: list[int]
    moving_averages: dict[str, list[Optional[float]]]
    rsi_period: int
    rsi: list[Optional[float]]
    summary: RangeSummary
    latest: LatestValues
