import datetime
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from stockdash.schemas.indicators import ComputeRequest
from stockdash.schemas.market import PriceBar
from stockdash.services.base import ValidationError
from stockdash.services.indicators import IndicatorService, InvalidParameter


def _bars(closes, start=datetime.date(2024, 1, 1)):
    bars = []
    for i, close in enumerate(closes):
        bars.append(
            PriceBar(
                date=start + datetime.timedelta(days=i),
                open=close,
                high=close + 1,
                low=close - 1,
                close=close,
                adjusted_close=close,
                volume=1000 + i,
            )
        )
    return bars


class TestBuildChart(unittest.TestCase):
    def setUp(self):
        self.service = IndicatorService()

    def test_series_are_index_aligned(self):
        bars = _bars([100.0 + i for i in range(60)])
        chart = self.service.build_chart("ACME", bars)

        self.assertEqual(chart.ticker, "ACME")
        self.assertEqual(len(chart.labels), 60)
        self.assertEqual(set(chart.moving_averages), {"sma20", "sma50"})
        for series in list(chart.moving_averages.values()) + [chart.rsi]:
            self.assertEqual(len(series), 60)

        self.assertIsNone(chart.moving_averages["sma20"][18])
        self.assertEqual(chart.moving_averages["sma20"][19], 109.5)
        self.assertIsNone(chart.moving_averages["sma50"][48])
        self.assertEqual(chart.rsi[14], 100.0)
        self.assertEqual(chart.latest.close, 159.0)
        self.assertEqual(chart.latest.rsi, 100.0)
        self.assertEqual(chart.latest.moving_averages["sma20"], 149.5)

    def test_summary_over_last_year(self):
        bars = _bars([10.0, 20.0, 15.0])
        chart = self.service.build_chart("ACME", bars)

        self.assertEqual(chart.summary.high_52week, 21.0)
        self.assertEqual(chart.summary.low_52week, 9.0)
        self.assertEqual(chart.summary.avg_volume, 1001)

    def test_zero_high_low_fall_back_to_close(self):
        bar = PriceBar(
            date=datetime.date(2024, 1, 2),
            open=0, high=0, low=0, close=42.0, adjusted_close=42.0, volume=0,
        )
        chart = self.service.build_chart("ACME", [bar])
        self.assertEqual(chart.summary.high_52week, 42.0)
        self.assertEqual(chart.summary.low_52week, 42.0)

    def test_custom_windows(self):
        bars = _bars([1.0, 2.0, 3.0, 4.0, 5.0])
        chart = self.service.build_chart("ACME", bars, sma_windows=[3], rsi_period=2)
        self.assertEqual(chart.moving_averages, {"sma3": [None, None, 2.0, 3.0, 4.0]})
        self.assertEqual(chart.rsi, [None, None, 100.0, 100.0, 100.0])

    def test_empty_series_rejected(self):
        with self.assertRaises(ValidationError):
            self.service.build_chart("ACME", [])

    def test_dates_must_increase(self):
        bars = _bars([1.0, 2.0, 3.0])
        bars[2] = bars[2].model_copy(update={"date": bars[1].date})
        with self.assertRaises(ValidationError):
            self.service.build_chart("ACME", bars)

    def test_bad_window_raises_invalid_parameter(self):
        with self.assertRaises(InvalidParameter):
            self.service.build_chart("ACME", _bars([1.0, 2.0]), sma_windows=[0])


class TestCompute(unittest.IsolatedAsyncioTestCase):
    async def test_execute(self):
        service = IndicatorService()
        result = await service.execute(
            ComputeRequest(values=[1, 2, 1, 2], sma_windows=[2], rsi_period=2)
        )
        self.assertEqual(result.count, 4)
        self.assertEqual(result.moving_averages["sma2"], [None, 1.5, 1.5, 1.5])
        self.assertEqual(result.rsi, [None, None, 50.0, 75.0])

    async def test_defaults(self):
        service = IndicatorService()
        result = await service.execute(ComputeRequest(values=[]))
        self.assertEqual(result.moving_averages, {"sma20": [], "sma50": []})
        self.assertEqual(result.rsi_period, 14)
        self.assertEqual(result.rsi, [])


if __name__ == "__main__":
    unittest.main()
