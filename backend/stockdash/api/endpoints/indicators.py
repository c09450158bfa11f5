"""
Indicator API Endpoints

Endpoints for technical indicator calculations.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from stockdash.api.deps import get_indicators, get_market_data_service
from stockdash.schemas.indicators import (
    DEFAULT_RSI_PERIOD,
    DEFAULT_SMA_WINDOWS,
    ChartSeries,
    ComputeRequest,
    ComputeResponse,
)
from stockdash.services.indicators import IndicatorService
from stockdash.services.market_data import HistoricalQuery, MarketDataService

router = APIRouter()


@router.post("/compute", response_model=ComputeResponse)
async def compute_indicators(
    request: ComputeRequest,
    indicators: IndicatorService = Depends(get_indicators),
):
    """
    SMA and RSI over a posted close series.

    Non-positive windows/periods are rejected with 422.
    """
    return await indicators.execute(request)


@router.get("/{ticker}", response_model=ChartSeries)
async def get_chart_series(
    ticker: str,
    start: Optional[date] = Query(default=None),
    end: Optional[date] = Query(default=None),
    sma: list[int] = Query(default=list(DEFAULT_SMA_WINDOWS), description="Moving-average windows"),
    rsi_period: int = Query(default=DEFAULT_RSI_PERIOD),
    service: MarketDataService = Depends(get_market_data_service),
    indicators: IndicatorService = Depends(get_indicators),
):
    """
    Chart dataset for a ticker.

    Returns:
        - Close and volume series
        - SMA overlays (20/50 by default)
        - RSI (14 by default)
        - 52-week high/low/average volume
    """
    history = await service.execute(HistoricalQuery(ticker=ticker, start=start, end=end))
    return indicators.build_chart(
        ticker.strip().upper(),
        history.data,
        sma_windows=sma,
        rsi_period=rsi_period,
    )
