"""
Market Data Service Implementation

Serves daily price history from the local store, falling back to the
upstream provider (Yahoo Finance) and caching whatever it returns.
"""

import logging
from datetime import date, timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from stockdash.db import database as db
from stockdash.schemas.market import (
    CompanyInfo,
    DataSource,
    HistoricalResponse,
    PriceBar,
)
from stockdash.services.base import ValidationError
from stockdash.services.market_data.interface import (
    HistoricalQuery,
    MarketDataServiceInterface,
    PriceProvider,
)

logger = logging.getLogger(__name__)

# Companies inserted by the seed endpoint
SEED_COMPANIES = [
    {"ticker": "AAPL", "name": "Apple Inc."},
    {"ticker": "MSFT", "name": "Microsoft Corporation"},
    {"ticker": "GOOGL", "name": "Alphabet Inc."},
]

BACKFILL_DAYS = 365


def one_year_before(day: date) -> date:
    """Same calendar day one year earlier (Feb 29 maps to Feb 28)."""
    try:
        return day.replace(year=day.year - 1)
    except ValueError:
        return day.replace(year=day.year - 1, day=28)


class MarketDataService(MarketDataServiceInterface):
    """
    Market Data Service.

    One instance per request: it holds the request's DB session and the
    configured provider.
    """

    def __init__(self, session: AsyncSession, provider: PriceProvider):
        self.session = session
        self.provider = provider

    @property
    def name(self) -> str:
        return "MarketDataService"

    def _normalize_ticker(self, ticker: Optional[str]) -> str:
        ticker = (ticker or "").strip().upper()
        if not ticker:
            raise ValidationError(self.name, "Ticker is required")
        return ticker

    async def execute(self, input_data: HistoricalQuery) -> HistoricalResponse:
        """Historical bars for a ticker, from cache or upstream."""
        ticker = self._normalize_ticker(input_data.ticker)
        end = input_data.end or date.today()
        start = input_data.start or one_year_before(end)

        if start > end:
            raise ValidationError(
                self.name,
                "start must not be after end",
                {"start": start.isoformat(), "end": end.isoformat()},
            )

        rows = await db.get_prices(self.session, ticker, start, end)
        if rows:
            logger.debug(f"Cache hit for {ticker} {start}..{end}: {len(rows)} bars")
            return HistoricalResponse(
                source=DataSource.DB,
                data=[PriceBar.from_row(r) for r in rows],
            )

        logger.info(f"Cache miss for {ticker} {start}..{end}, fetching from {self.provider.name}")
        bars = await self.provider.fetch_history(ticker, start, end)
        written = await db.upsert_prices(self.session, ticker, bars)
        await self.session.commit()
        logger.info(f"Stored {written} bars for {ticker}")

        return HistoricalResponse(source=DataSource.YAHOO, data=bars)

    async def list_companies(self) -> list[dict]:
        companies = await db.list_companies(self.session)
        return [{"ticker": c.ticker, "name": c.name} for c in companies]

    async def seed_companies(self) -> dict:
        """Upsert the default watchlist."""
        for company in SEED_COMPANIES:
            await db.upsert_company(self.session, company["ticker"], company["name"])
        await self.session.commit()
        return {"seeded": len(SEED_COMPANIES)}

    async def add_company(self, ticker: Optional[str]) -> dict:
        """Register a company and backfill its last year of prices."""
        ticker = self._normalize_ticker(ticker)

        name = await self.provider.fetch_company_name(ticker) or ticker
        await db.upsert_company(self.session, ticker, name)

        end = date.today()
        start = one_year_before(end)
        bars = await self.provider.fetch_history(ticker, start, end)
        written = await db.upsert_prices(self.session, ticker, bars)
        await self.session.commit()
        logger.info(f"Added {ticker} ({name}) with {written} bars")

        return {"message": f"{ticker} added successfully", "name": name}

    async def company_info(self, ticker: str) -> CompanyInfo:
        """Stats over the last year of stored bars."""
        ticker = self._normalize_ticker(ticker)
        since = date.today() - timedelta(days=BACKFILL_DAYS)
        stats = await db.get_price_stats(self.session, ticker, since)
        return CompanyInfo(**stats)

    async def health_check(self) -> bool:
        return True
