"""
Yahoo Finance Data Adapter

Fetches REAL daily market data from Yahoo Finance.
yfinance is blocking, so calls run in the default executor.
"""

import asyncio
import logging
import math
from datetime import date, timedelta

import pandas as pd
import yfinance as yf

from stockdash.schemas.market import PriceBar
from stockdash.services.base import ExternalAPIError
from stockdash.services.market_data.interface import PriceProvider

logger = logging.getLogger(__name__)


def _to_float(value, default: float = 0.0) -> float:
    if value is None or pd.isna(value):
        return default
    return float(value)


def history_to_bars(hist: pd.DataFrame) -> list[PriceBar]:
    """
    Convert a yfinance history frame into PriceBars.

    Rows without a close are dropped; a missing adjusted close falls back
    to the close. Duplicate dates keep the last row.
    """
    if hist is None or hist.empty:
        return []

    bars: dict[date, PriceBar] = {}
    has_adj = "Adj Close" in hist.columns

    for idx, row in hist.iterrows():
        close = row.get("Close")
        if close is None or pd.isna(close):
            continue
        close = float(close)

        bar_date = idx.date() if hasattr(idx, "date") else pd.Timestamp(idx).date()
        adj = _to_float(row["Adj Close"], close) if has_adj else close
        volume = _to_float(row.get("Volume"), 0.0)

        bars[bar_date] = PriceBar(
            date=bar_date,
            open=_to_float(row.get("Open"), close),
            high=_to_float(row.get("High"), close),
            low=_to_float(row.get("Low"), close),
            close=close,
            adjusted_close=adj,
            volume=int(volume) if math.isfinite(volume) else 0,
        )

    return [bars[d] for d in sorted(bars)]


class YahooPriceProvider(PriceProvider):
    """PriceProvider backed by yfinance."""

    name = "yahoo"

    async def fetch_history(self, ticker: str, start: date, end: date) -> list[PriceBar]:
        """Daily bars for ticker within [start, end] (end inclusive)."""
        logger.info(f"Fetching {ticker} {start}..{end} from Yahoo Finance...")

        def _download() -> pd.DataFrame:
            # yfinance treats `end` as exclusive
            return yf.Ticker(ticker).history(
                start=start.isoformat(),
                end=(end + timedelta(days=1)).isoformat(),
                interval="1d",
                auto_adjust=False,
            )

        try:
            loop = asyncio.get_running_loop()
            hist = await loop.run_in_executor(None, _download)
        except Exception as e:
            logger.error(f"Error fetching {ticker} from Yahoo Finance: {e}")
            raise ExternalAPIError(
                "YahooPriceProvider",
                f"Failed to fetch history for {ticker}",
                {"error": str(e)},
            ) from e

        bars = history_to_bars(hist)
        if not bars:
            logger.warning(f"No data returned for {ticker}")
        return bars

    async def fetch_company_name(self, ticker: str) -> str:
        """Long company name from the quote summary."""

        def _info() -> dict:
            return yf.Ticker(ticker).info or {}

        try:
            loop = asyncio.get_running_loop()
            info = await loop.run_in_executor(None, _info)
        except Exception as e:
            logger.error(f"Error getting info for {ticker}: {e}")
            raise ExternalAPIError(
                "YahooPriceProvider",
                f"Failed to fetch company info for {ticker}",
                {"error": str(e)},
            ) from e

        return info.get("longName") or info.get("shortName") or ticker
