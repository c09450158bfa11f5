"""
Market Data Service

CONTRACT:
    Input:  HistoricalQuery (ticker, start, end)
    Output: HistoricalResponse

RESPONSIBILITIES:
    - Serve daily OHLCV bars from the relational store
    - Fetch missing ranges from Yahoo Finance and store them
    - Register companies and backfill a year of history
    - 52-week stats from stored bars

NO LLM INVOLVEMENT - Pure data fetching and transformation.
"""

from stockdash.services.market_data.interface import (
    HistoricalQuery,
    MarketDataServiceInterface,
    PriceProvider,
)
from stockdash.services.market_data.service import MarketDataService
from stockdash.services.market_data.yahoo_adapter import YahooPriceProvider

__all__ = [
    "HistoricalQuery",
    "MarketDataServiceInterface",
    "PriceProvider",
    "MarketDataService",
    "YahooPriceProvider",
]
