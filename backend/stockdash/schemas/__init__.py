"""
StockDash Schema Contracts

JSON contracts between the API, the services and the frontend.
"""

from stockdash.schemas.market import (
    DataSource,
    PriceBar,
    HistoricalResponse,
    CompanyOut,
    AddCompanyRequest,
    AddCompanyResponse,
    CompanyInfo,
)
from stockdash.schemas.indicators import (
    ComputeRequest,
    ComputeResponse,
    ChartSeries,
)
from stockdash.schemas.prediction import (
    PredictionResult,
    PredictionResponse,
)

__all__ = [
    # Market
    "DataSource",
    "PriceBar",
    "HistoricalResponse",
    "CompanyOut",
    "AddCompanyRequest",
    "AddCompanyResponse",
    "CompanyInfo",
    # Indicators
    "ComputeRequest",
    "ComputeResponse",
    "ChartSeries",
    # Prediction
    "PredictionResult",
    "PredictionResponse",
]
