"""
Indicator Engine Service

CONTRACT:
    Input:  ordered PriceBars / close series
    Output: index-aligned indicator series (SMA, Wilder RSI)

PURE PYTHON - No LLM involvement.
Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from stockdash.services.indicators.calculations import InvalidParameter, sma, rsi
from stockdash.services.indicators.interface import IndicatorServiceInterface
from stockdash.services.indicators.service import IndicatorService, get_indicator_service

__all__ = [
    "InvalidParameter",
    "sma",
    "rsi",
    "IndicatorServiceInterface",
    "IndicatorService",
    "get_indicator_service",
]
