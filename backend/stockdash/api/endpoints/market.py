"""
Market Data API Endpoints

Companies, cached price history and 52-week stats.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from stockdash.api.deps import get_market_data_service
from stockdash.schemas.market import (
    AddCompanyRequest,
    AddCompanyResponse,
    CompanyInfo,
    CompanyOut,
    HistoricalResponse,
    SeedResponse,
)
from stockdash.services.market_data import HistoricalQuery, MarketDataService

router = APIRouter()


@router.get("/companies", response_model=list[CompanyOut])
async def get_companies(service: MarketDataService = Depends(get_market_data_service)):
    """All tracked companies, ordered by ticker."""
    return await service.list_companies()


@router.get("/seed", response_model=SeedResponse)
async def seed_companies(service: MarketDataService = Depends(get_market_data_service)):
    """Insert the default companies (GET for dev convenience)."""
    return await service.seed_companies()


@router.post("/add-company", response_model=AddCompanyResponse)
async def add_company(
    request: AddCompanyRequest,
    service: MarketDataService = Depends(get_market_data_service),
):
    """
    Register a company by ticker.

    Looks up its name and backfills the last year of daily prices.
    """
    return await service.add_company(request.ticker)


@router.get("/historical/{ticker}", response_model=HistoricalResponse)
async def get_historical(
    ticker: str,
    start: Optional[date] = Query(default=None, description="First date, YYYY-MM-DD"),
    end: Optional[date] = Query(default=None, description="Last date, YYYY-MM-DD"),
    service: MarketDataService = Depends(get_market_data_service),
):
    """
    Daily OHLCV bars for a ticker.

    Served from the database when cached (source="db"), otherwise fetched
    from Yahoo Finance and stored (source="yahoo").
    """
    return await service.execute(HistoricalQuery(ticker=ticker, start=start, end=end))


@router.get("/company-info/{ticker}", response_model=CompanyInfo)
async def get_company_info(
    ticker: str,
    service: MarketDataService = Depends(get_market_data_service),
):
    """52-week high, low and average volume from stored prices."""
    return await service.company_info(ticker)
