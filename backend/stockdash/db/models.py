"""
SQLAlchemy models for the StockDash database.

Persists:
- Tracked companies
- Daily price history (the cache in front of Yahoo Finance)
- AI price predictions
"""

from datetime import datetime

from sqlalchemy import (
    BigInteger,
    Column,
    Date,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class Company(Base):
    """A ticker the dashboard knows about."""
    __tablename__ = "companies"

    ticker = Column(String(20), primary_key=True)
    name = Column(String(255), nullable=False)
    last_updated = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class HistoricalPrice(Base):
    """
    One daily OHLCV bar.
    (ticker, date) is unique; re-fetched bars overwrite the stored row.
    """
    __tablename__ = "historical_prices"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ticker = Column(String(20), nullable=False)
    date = Column(Date, nullable=False)

    open = Column(Float, nullable=False)
    high = Column(Float, nullable=False)
    low = Column(Float, nullable=False)
    close = Column(Float, nullable=False)
    adjclose = Column(Float, nullable=False)
    volume = Column(BigInteger, default=0)

    __table_args__ = (
        UniqueConstraint("ticker", "date", name="uq_historical_prices_ticker_date"),
        Index("ix_historical_prices_ticker_date", "ticker", "date"),
    )


class Prediction(Base):
    """
    LLM next-day close prediction.
    Stored for later comparison against the real close.
    """
    __tablename__ = "predictions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ticker = Column(String(20), nullable=False, index=True)
    predicted_price = Column(Float, nullable=True)
    confidence = Column(String(50), nullable=True)  # model may answer 0.7 or "medium"
    rationale = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
