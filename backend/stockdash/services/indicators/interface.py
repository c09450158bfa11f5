"""
Indicator Engine Service Interface

Defines the contract for the indicator calculation layer.
"""

from abc import abstractmethod
from typing import Sequence

from stockdash.services.base import BaseService
from stockdash.schemas.market import PriceBar
from stockdash.schemas.indicators import ChartSeries, ComputeRequest, ComputeResponse


class IndicatorServiceInterface(BaseService[ComputeRequest, ComputeResponse]):
    """
    Indicator Engine Service Contract.

    INPUT: ComputeRequest
        - values: closing prices, oldest first
        - sma_windows / rsi_period

    OUTPUT: ComputeResponse
        - one SMA series per window and one RSI series,
          each index-aligned with `values`
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    @abstractmethod
    async def execute(self, input_data: ComputeRequest) -> ComputeResponse:
        """Calculate indicators over a raw close series."""
        pass

    @abstractmethod
    def build_chart(
        self,
        ticker: str,
        bars: Sequence[PriceBar],
        sma_windows: Sequence[int] = (20, 50),
        rsi_period: int = 14,
    ) -> ChartSeries:
        """
        Build the chart dataset for one ticker.

        Args:
            ticker: Symbol the bars belong to
            bars: PriceBars with strictly increasing dates
            sma_windows: Moving-average windows to overlay
            rsi_period: RSI lookback

        Returns:
            Chart dataset with indicators and 52-week summary
        """
        pass
