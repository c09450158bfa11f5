"""
Market Data Service Interface

Defines the contract for price providers and the caching data layer.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Optional

from stockdash.services.base import BaseService
from stockdash.schemas.market import CompanyInfo, HistoricalResponse, PriceBar


@dataclass
class HistoricalQuery:
    """Ticker plus an inclusive date range; missing bounds are filled by the service."""

    ticker: str
    start: Optional[date] = None
    end: Optional[date] = None


class PriceProvider(ABC):
    """Upstream source of daily price bars."""

    name: str = "provider"

    @abstractmethod
    async def fetch_history(self, ticker: str, start: date, end: date) -> list[PriceBar]:
        """Daily bars for ticker within [start, end], oldest first."""
        pass

    @abstractmethod
    async def fetch_company_name(self, ticker: str) -> str:
        """Long company name, or the ticker when the provider has none."""
        pass


class MarketDataServiceInterface(BaseService[HistoricalQuery, HistoricalResponse]):
    """
    Market Data Service Contract.

    INPUT: HistoricalQuery
        - ticker, start, end

    OUTPUT: HistoricalResponse
        - source: "db" when served from the store, "yahoo" when fetched
        - data: date-ordered PriceBars
    """

    @property
    def name(self) -> str:
        return "MarketDataService"

    @abstractmethod
    async def execute(self, input_data: HistoricalQuery) -> HistoricalResponse:
        """Serve cached bars or fetch, store and return fresh ones."""
        pass

    @abstractmethod
    async def add_company(self, ticker: Optional[str]) -> dict:
        """Register a company and backfill a year of prices."""
        pass

    @abstractmethod
    async def company_info(self, ticker: str) -> CompanyInfo:
        """High/low/average volume over the last year of stored bars."""
        pass
