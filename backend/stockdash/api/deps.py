"""
Shared FastAPI dependencies.

Routes never reach for globals: settings and the database come from
app.state, services are built per request. Tests swap the provider and
LLM client through app.dependency_overrides.
"""

from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from stockdash.core.config import Settings
from stockdash.db.database import get_db
from stockdash.services.indicators import IndicatorService, get_indicator_service
from stockdash.services.llm import BaseLLMClient, PredictionService, build_llm_client
from stockdash.services.market_data import (
    MarketDataService,
    PriceProvider,
    YahooPriceProvider,
)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


_provider: Optional[PriceProvider] = None


def get_price_provider() -> PriceProvider:
    """Get or create the Yahoo Finance provider."""
    global _provider
    if _provider is None:
        _provider = YahooPriceProvider()
    return _provider


def get_llm_client(settings: Settings = Depends(get_app_settings)) -> BaseLLMClient:
    return build_llm_client(settings)


def get_market_data_service(
    session: AsyncSession = Depends(get_db),
    provider: PriceProvider = Depends(get_price_provider),
) -> MarketDataService:
    return MarketDataService(session, provider)


def get_prediction_service(
    session: AsyncSession = Depends(get_db),
    llm: BaseLLMClient = Depends(get_llm_client),
    settings: Settings = Depends(get_app_settings),
) -> PredictionService:
    return PredictionService(session, llm, history_days=settings.prediction_history_days)


def get_indicators() -> IndicatorService:
    return get_indicator_service()
