"""
CONTRACT 1: Market Data

Input: ticker + date range
Output: HistoricalResponse (date-ordered PriceBars)

Price bars come from the local store when cached, otherwise from
Yahoo Finance (and are then written to the store).
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator


# =============================================================================
# ENUMS
# =============================================================================


class DataSource(str, Enum):
    DB = "db"
    YAHOO = "yahoo"


# =============================================================================
# PRICE DATA
# =============================================================================


class PriceBar(BaseModel):
    """One trading-day OHLCV observation."""

    date: date
    open: float = Field(..., ge=0)
    high: float = Field(..., ge=0)
    low: float = Field(..., ge=0)
    close: float = Field(..., ge=0)
    adjusted_close: float = Field(
        ...,
        ge=0,
        validation_alias=AliasChoices("adjusted_close", "adjclose"),
        serialization_alias="adjclose",
    )
    volume: int = Field(default=0, ge=0)

    @classmethod
    def from_row(cls, row) -> "PriceBar":
        """Build from a HistoricalPrice row."""
        return cls(
            date=row.date,
            open=row.open,
            high=row.high,
            low=row.low,
            close=row.close,
            adjusted_close=row.adjclose,
            volume=row.volume or 0,
        )


class HistoricalResponse(BaseModel):
    """Date-ordered bars plus where they came from."""

    source: DataSource
    data: list[PriceBar]


# =============================================================================
# COMPANIES
# =============================================================================


class CompanyOut(BaseModel):
    ticker: str
    name: str


class AddCompanyRequest(BaseModel):
    ticker: Optional[str] = Field(default=None, description="Ticker symbol, e.g. AAPL")

    @field_validator("ticker")
    @classmethod
    def normalize(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip().upper() or None


class AddCompanyResponse(BaseModel):
    message: str
    name: str


class SeedResponse(BaseModel):
    seeded: int


class CompanyInfo(BaseModel):
    """Stats over the last year of stored bars; None when nothing is stored."""

    high_52week: Optional[float] = None
    low_52week: Optional[float] = None
    avg_volume: Optional[int] = None


class TableCount(BaseModel):
    table: str
    rows: int


class DebugTablesResponse(BaseModel):
    connected: bool
    tables: list[TableCount]
    checked_at: datetime = Field(default_factory=datetime.utcnow)
