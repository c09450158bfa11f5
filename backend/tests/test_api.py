import datetime
import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from fastapi.testclient import TestClient

from stockdash.api.deps import get_llm_client, get_price_provider
from stockdash.core.config import Settings
from stockdash.main import create_app
from stockdash.schemas.indicators import DEFAULT_SMA_WINDOWS
from stockdash.schemas.market import PriceBar
from stockdash.services.base import ExternalAPIError
from stockdash.services.llm import BaseLLMClient, LLMResponse
from stockdash.services.market_data import PriceProvider


TODAY = datetime.date.today()


def _make_bars(count=60):
    bars = []
    for i in range(count):
        close = 100.0 + i
        bars.append(
            PriceBar(
                date=TODAY - datetime.timedelta(days=count - 1 - i),
                open=close - 0.5,
                high=close + 1,
                low=close - 1,
                close=close,
                adjusted_close=close - 0.25,
                volume=1000 * (i + 1),
            )
        )
    return bars


class FakeProvider(PriceProvider):
    name = "fake"

    def __init__(self, bars):
        self.bars = bars
        self.history_calls = 0

    async def fetch_history(self, ticker, start, end):
        self.history_calls += 1
        return [b for b in self.bars if start <= b.date <= end]

    async def fetch_company_name(self, ticker):
        return f"Fake {ticker}"


class FakeLLM(BaseLLMClient):
    def __init__(self, content="", error=None):
        self.content = content
        self.error = error
        self.prompts = []

    async def generate(self, system_prompt, user_prompt, max_tokens=None):
        self.prompts.append((system_prompt, user_prompt))
        if self.error:
            raise self.error
        return LLMResponse(content=self.content, model="fake", usage={})


class ApiTestCase(unittest.TestCase):
    environment = "development"
    groq = True

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        settings = Settings(
            _env_file=None,
            environment=self.environment,
            database_url=f"sqlite+aiosqlite:///{Path(self.tmpdir.name) / 'test.db'}",
            groq_api_key="key" if self.groq else None,
            groq_model="model" if self.groq else None,
            groq_base="http://llm.invalid/v1" if self.groq else None,
        )
        self.app = create_app(settings)
        self.provider = FakeProvider(_make_bars())
        self.llm = FakeLLM(
            content='```json\n{"predicted_price": 160.5, "confidence": 0.6, "rationale": "Steady climb"}\n```'
        )
        self.app.dependency_overrides[get_price_provider] = lambda: self.provider
        if self.groq:
            self.app.dependency_overrides[get_llm_client] = lambda: self.llm

        self.client = TestClient(self.app)
        self.client.__enter__()

    def tearDown(self):
        self.client.__exit__(None, None, None)
        self.tmpdir.cleanup()


class TestHealth(ApiTestCase):
    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "healthy")


class TestCompanies(ApiTestCase):
    def test_seed_and_list(self):
        self.assertEqual(self.client.get("/api/companies").json(), [])

        response = self.client.get("/api/seed")
        self.assertEqual(response.json(), {"seeded": 3})
        # seeding twice keeps one row per ticker
        self.client.get("/api/seed")

        companies = self.client.get("/api/companies").json()
        self.assertEqual([c["ticker"] for c in companies], ["AAPL", "GOOGL", "MSFT"])
        self.assertEqual(companies[0]["name"], "Apple Inc.")

    def test_add_company_backfills_prices(self):
        response = self.client.post("/api/add-company", json={"ticker": " tsla "})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(), {"message": "TSLA added successfully", "name": "Fake TSLA"}
        )

        companies = self.client.get("/api/companies").json()
        self.assertEqual(companies, [{"ticker": "TSLA", "name": "Fake TSLA"}])

        historical = self.client.get("/api/historical/TSLA").json()
        self.assertEqual(historical["source"], "db")
        self.assertEqual(len(historical["data"]), 60)

    def test_add_company_requires_ticker(self):
        for body in ({}, {"ticker": ""}, {"ticker": "   "}):
            response = self.client.post("/api/add-company", json=body)
            self.assertEqual(response.status_code, 400)
            self.assertEqual(response.json()["error"], "Ticker is required")

    def test_company_info(self):
        self.client.get("/api/historical/acme")
        info = self.client.get("/api/company-info/ACME").json()
        self.assertEqual(info["high_52week"], 160.0)
        self.assertEqual(info["low_52week"], 99.0)
        self.assertEqual(info["avg_volume"], 30500)

    def test_company_info_without_data(self):
        info = self.client.get("/api/company-info/NONE").json()
        self.assertEqual(info, {"high_52week": None, "low_52week": None, "avg_volume": None})


class TestHistorical(ApiTestCase):
    def test_fetches_then_serves_from_db(self):
        first = self.client.get("/api/historical/acme")
        self.assertEqual(first.status_code, 200)
        body = first.json()
        self.assertEqual(body["source"], "yahoo")
        self.assertEqual(len(body["data"]), 60)
        self.assertEqual(
            set(body["data"][0]),
            {"date", "open", "high", "low", "close", "adjclose", "volume"},
        )

        second = self.client.get("/api/historical/ACME").json()
        self.assertEqual(second["source"], "db")
        self.assertEqual(second["data"], body["data"])
        self.assertEqual(self.provider.history_calls, 1)

    def test_date_range(self):
        start = (TODAY - datetime.timedelta(days=9)).isoformat()
        end = (TODAY - datetime.timedelta(days=5)).isoformat()
        body = self.client.get(f"/api/historical/ACME?start={start}&end={end}").json()
        dates = [row["date"] for row in body["data"]]
        self.assertEqual(len(dates), 5)
        self.assertEqual(dates[0], start)
        self.assertEqual(dates[-1], end)
        self.assertEqual(dates, sorted(dates))

    def test_start_after_end(self):
        response = self.client.get("/api/historical/ACME?start=2024-02-01&end=2024-01-01")
        self.assertEqual(response.status_code, 400)
        self.assertIn("error", response.json())

    def test_provider_failure(self):
        async def broken(ticker, start, end):
            raise ExternalAPIError("YahooPriceProvider", "Failed to fetch history for ACME")

        self.provider.fetch_history = broken
        response = self.client.get("/api/historical/ACME")
        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["error"], "Failed to fetch history for ACME")


class TestIndicators(ApiTestCase):
    def test_chart_series(self):
        body = self.client.get("/api/indicators/acme").json()
        self.assertEqual(body["ticker"], "ACME")
        self.assertEqual(len(body["labels"]), 60)
        self.assertEqual(body["moving_averages"]["sma20"][:19], [None] * 19)
        self.assertEqual(body["moving_averages"]["sma20"][19], 109.5)
        self.assertEqual(len(body["rsi"]), 60)
        self.assertEqual(body["rsi"][14], 100.0)
        self.assertEqual(body["summary"]["high_52week"], 160.0)

    def test_default_windows_stay_fixed(self):
        for _ in range(2):
            body = self.client.get("/api/indicators/ACME").json()
            self.assertEqual(set(body["moving_averages"]), {"sma20", "sma50"})
        self.assertEqual(DEFAULT_SMA_WINDOWS, (20, 50))

    def test_chart_custom_windows(self):
        body = self.client.get("/api/indicators/ACME?sma=5&sma=10&rsi_period=7").json()
        self.assertEqual(set(body["moving_averages"]), {"sma5", "sma10"})
        self.assertEqual(body["rsi_period"], 7)
        self.assertIsNone(body["rsi"][6])
        self.assertEqual(body["rsi"][7], 100.0)

    def test_chart_without_data(self):
        self.provider.bars = []
        response = self.client.get("/api/indicators/NONE")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "No data")

    def test_compute(self):
        response = self.client.post(
            "/api/indicators/compute",
            json={"values": [1, 2, 3, 4, 5], "sma_windows": [3], "rsi_period": 3},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["moving_averages"]["sma3"], [None, None, 2.0, 3.0, 4.0])
        self.assertEqual(body["rsi"], [None, None, None, 100.0, 100.0])

    def test_compute_rejects_bad_window(self):
        response = self.client.post(
            "/api/indicators/compute",
            json={"values": [1, 2, 3], "sma_windows": [0]},
        )
        self.assertEqual(response.status_code, 422)
        self.assertIn("window", response.json()["error"])


class TestPredict(ApiTestCase):
    def test_no_history(self):
        response = self.client.get("/api/predict/ACME")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"], "No historical data found for ticker")
        self.assertEqual(self.llm.prompts, [])

    def test_prediction_is_parsed_and_stored(self):
        self.client.get("/api/historical/ACME")

        response = self.client.get("/api/predict/acme")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {
                "prediction": {
                    "predicted_price": 160.5,
                    "confidence": 0.6,
                    "rationale": "Steady climb",
                }
            },
        )

        system_prompt, user_prompt = self.llm.prompts[0]
        self.assertEqual(system_prompt, "Output only JSON.")
        lines = user_prompt.splitlines()
        self.assertEqual(lines[0], "Historical prices for ACME:")
        series = lines[1:-1]
        self.assertEqual(len(series), 14)
        self.assertTrue(series[0].endswith(":146.0"))
        self.assertTrue(series[-1].endswith(":159.0"))

        rows = self.client.get("/api/debug/data/predictions").json()
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["ticker"], "ACME")
        self.assertEqual(rows[0]["predicted_price"], 160.5)
        self.assertEqual(rows[0]["confidence"], "0.6")

    def test_upstream_error_status_passes_through(self):
        self.client.get("/api/historical/ACME")
        self.llm.error = ExternalAPIError(
            "LLMClient", "Groq API request failed", {"details": "rate limited"}, status_code=429
        )
        response = self.client.get("/api/predict/ACME")
        self.assertEqual(response.status_code, 429)
        self.assertEqual(response.json()["error"], "Groq API request failed")


class TestPredictMisconfigured(ApiTestCase):
    groq = False

    def test_missing_groq_settings(self):
        response = self.client.get("/api/predict/ACME")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            response.json()["error"], "Server misconfigured: Missing Groq API settings"
        )


class TestDebug(ApiTestCase):
    def test_tables(self):
        self.client.get("/api/seed")
        body = self.client.get("/api/debug/tables").json()
        self.assertTrue(body["connected"])
        counts = {t["table"]: t["rows"] for t in body["tables"]}
        self.assertEqual(counts, {"companies": 3, "historical_prices": 0, "predictions": 0})

    def test_unknown_table(self):
        response = self.client.get("/api/debug/data/pg_user")
        self.assertEqual(response.status_code, 404)


class TestDebugHiddenInProduction(ApiTestCase):
    environment = "production"

    def test_debug_routes_absent(self):
        self.assertEqual(self.client.get("/api/debug/tables").status_code, 404)


class TestSettings(unittest.TestCase):
    def test_postgres_url_uses_asyncpg(self):
        settings = Settings(_env_file=None, database_url="postgres://u:p@host:5432/db")
        self.assertEqual(settings.database_url, "postgresql+asyncpg://u:p@host:5432/db")

    def test_frontend_url_added_to_cors(self):
        settings = Settings(_env_file=None, frontend_url="https://example.vercel.app/")
        self.assertIn("http://localhost:3000", settings.cors_origins)
        self.assertIn("https://example.vercel.app", settings.cors_origins)


if __name__ == "__main__":
    unittest.main()
