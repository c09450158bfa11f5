"""
Indicator Engine Service Implementation

Turns price bars into chart-ready indicator series.
NO LLM INVOLVEMENT - Pure Python/NumPy calculations.
"""

from typing import Optional, Sequence

from stockdash.schemas.market import PriceBar
from stockdash.schemas.indicators import (
    DEFAULT_RSI_PERIOD,
    DEFAULT_SMA_WINDOWS,
    ChartSeries,
    ComputeRequest,
    ComputeResponse,
    LatestValues,
    RangeSummary,
)
from stockdash.services.base import ValidationError
from stockdash.services.indicators.interface import IndicatorServiceInterface
from stockdash.services.indicators.calculations import (
    sma,
    rsi,
    fifty_two_week_range,
    get_last_valid,
)


def _moving_averages(
    closes: Sequence[float], windows: Sequence[int]
) -> dict[str, list[Optional[float]]]:
    return {f"sma{window}": sma(closes, window) for window in windows}


class IndicatorService(IndicatorServiceInterface):
    """
    Indicator Engine Service.

    Stateless; every call allocates fresh output.
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    async def execute(self, input_data: ComputeRequest) -> ComputeResponse:
        """Calculate SMA/RSI over a raw close series."""
        return ComputeResponse(
            count=len(input_data.values),
            moving_averages=_moving_averages(input_data.values, input_data.sma_windows),
            rsi_period=input_data.rsi_period,
            rsi=rsi(input_data.values, input_data.rsi_period),
        )

    def build_chart(
        self,
        ticker: str,
        bars: Sequence[PriceBar],
        sma_windows: Sequence[int] = tuple(DEFAULT_SMA_WINDOWS),
        rsi_period: int = DEFAULT_RSI_PERIOD,
    ) -> ChartSeries:
        """Build the chart dataset for one ticker."""
        if not bars:
            raise ValidationError(self.name, "No data", {"ticker": ticker})

        for prev, bar in zip(bars, bars[1:]):
            if bar.date <= prev.date:
                raise ValidationError(
                    self.name,
                    "Price bars must have strictly increasing dates",
                    {"ticker": ticker, "date": bar.date.isoformat()},
                )

        labels = [b.date for b in bars]
        closes = [b.close for b in bars]
        # Missing or zero high/low falls back to the close
        highs = [b.high or b.close for b in bars]
        lows = [b.low or b.close for b in bars]
        volumes = [b.volume or 0 for b in bars]

        moving_averages = _moving_averages(closes, sma_windows)
        rsi_values = rsi(closes, rsi_period)

        return ChartSeries(
            ticker=ticker,
            labels=labels,
            closes=closes,
            volumes=volumes,
            moving_averages=moving_averages,
            rsi_period=rsi_period,
            rsi=rsi_values,
            summary=RangeSummary(**fifty_two_week_range(highs, lows, volumes)),
            latest=LatestValues(
                close=closes[-1],
                rsi=get_last_valid(rsi_values),
                moving_averages={
                    key: get_last_valid(series)
                    for key, series in moving_averages.items()
                },
            ),
        )


# Singleton instance
_service_instance: Optional[IndicatorService] = None


def get_indicator_service() -> IndicatorService:
    """Get or create indicator service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = IndicatorService()
    return _service_instance
