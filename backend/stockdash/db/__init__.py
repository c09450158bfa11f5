"""
Database module for StockDash.

Provides the Database handle, session dependency and models.
"""

from stockdash.db.database import Database, get_db
from stockdash.db.models import Base, Company, HistoricalPrice, Prediction

__all__ = [
    "Database",
    "get_db",
    "Base",
    "Company",
    "HistoricalPrice",
    "Prediction",
]
