"""
Database connection and session management.

The engine lives on a Database object created at application startup
and stored on app.state; routes get sessions through get_db().
SQLite (aiosqlite) locally, PostgreSQL (asyncpg) when DATABASE_URL says so.
"""

import logging
import os
from contextlib import asynccontextmanager
from datetime import date, datetime
from typing import AsyncGenerator, Iterable, Optional

from fastapi import Request
from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from stockdash.db.models import Base, Company, HistoricalPrice, Prediction
from stockdash.services.indicators.calculations import round_half_up

logger = logging.getLogger(__name__)


# Tables exposed through the debug endpoints
TABLES = {
    Company.__tablename__: Company,
    HistoricalPrice.__tablename__: HistoricalPrice,
    Prediction.__tablename__: Prediction,
}


class Database:
    """Owns the async engine and session factory for one application."""

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        db_url = make_url(url)

        if db_url.drivername.startswith("sqlite"):
            in_memory = db_url.database in (None, "", ":memory:")
            engine_args = {}
            if in_memory:
                # One shared connection, or every session sees an empty database
                engine_args["poolclass"] = StaticPool
            else:
                directory = os.path.dirname(os.path.abspath(db_url.database))
                os.makedirs(directory, exist_ok=True)
            # Note: SQLite requires check_same_thread=False for async
            self.engine = create_async_engine(
                url,
                echo=echo,
                connect_args={"check_same_thread": False},
                **engine_args,
            )
        else:
            self.engine = create_async_engine(url, echo=echo, pool_pre_ping=True)

        self.sessionmaker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    async def init(self) -> None:
        """
        Create all tables.
        Called on application startup.
        """
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info(f"Database initialized at: {make_url(self.url).render_as_string(hide_password=True)}")
        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
            raise

    async def close(self) -> None:
        """
        Close database connections.
        Called on application shutdown.
        """
        await self.engine.dispose()
        logger.info("Database connections closed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session that commits on success and rolls back on error."""
        async with self.sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides a database session.
    Use with FastAPI Depends().
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session


# =============================================================================
# UPSERT SUPPORT
# =============================================================================


# Columns refreshed when a stored bar is fetched again
PRICE_COLUMNS = ("open", "high", "low", "close", "adjclose", "volume")

# Rows per INSERT; keeps bound parameters under SQLite's 999 limit
UPSERT_BATCH_SIZE = 100

_INSERTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


def _dialect_insert(session: AsyncSession):
    """INSERT construct with ON CONFLICT support for the session's database."""
    dialect = session.get_bind().dialect.name
    try:
        return _INSERTS[dialect]
    except KeyError:
        raise ValueError(f"Upserts are not supported on {dialect}") from None


# =============================================================================
# COMPANIES
# =============================================================================


async def list_companies(session: AsyncSession) -> list[Company]:
    """All companies ordered by ticker."""
    result = await session.execute(select(Company).order_by(Company.ticker))
    return list(result.scalars().all())


async def upsert_company(session: AsyncSession, ticker: str, name: str) -> Company:
    """Insert a company or refresh its name."""
    insert = _dialect_insert(session)
    stmt = insert(Company).values(ticker=ticker, name=name, last_updated=datetime.utcnow())
    stmt = stmt.on_conflict_do_update(
        index_elements=[Company.ticker],
        set_={"name": stmt.excluded.name, "last_updated": stmt.excluded.last_updated},
    )
    await session.execute(stmt)
    return await session.get(Company, ticker, populate_existing=True)


# =============================================================================
# HISTORICAL PRICES
# =============================================================================


async def get_prices(
    session: AsyncSession, ticker: str, start: date, end: date
) -> list[HistoricalPrice]:
    """Stored bars for ticker within [start, end], oldest first."""
    result = await session.execute(
        select(HistoricalPrice)
        .where(
            HistoricalPrice.ticker == ticker,
            HistoricalPrice.date >= start,
            HistoricalPrice.date <= end,
        )
        .order_by(HistoricalPrice.date)
    )
    return list(result.scalars().all())


async def upsert_prices(session: AsyncSession, ticker: str, bars: Iterable) -> int:
    """
    Store PriceBars for ticker, overwriting rows with the same date.

    Returns the number of bars written.
    """
    # Last bar wins when a date repeats; one statement may not touch a row twice
    rows = {
        bar.date: {
            "ticker": ticker,
            "date": bar.date,
            "open": bar.open,
            "high": bar.high,
            "low": bar.low,
            "close": bar.close,
            "adjclose": bar.adjusted_close,
            "volume": bar.volume,
        }
        for bar in bars
    }
    if not rows:
        return 0

    insert = _dialect_insert(session)
    values = list(rows.values())
    for offset in range(0, len(values), UPSERT_BATCH_SIZE):
        stmt = insert(HistoricalPrice).values(values[offset : offset + UPSERT_BATCH_SIZE])
        stmt = stmt.on_conflict_do_update(
            index_elements=[HistoricalPrice.ticker, HistoricalPrice.date],
            set_={column: stmt.excluded[column] for column in PRICE_COLUMNS},
        )
        await session.execute(stmt)

    return len(values)


async def get_recent_closes(
    session: AsyncSession, ticker: str, limit: int = 14
) -> list[HistoricalPrice]:
    """Most recent `limit` bars for ticker, newest first."""
    result = await session.execute(
        select(HistoricalPrice)
        .where(HistoricalPrice.ticker == ticker)
        .order_by(HistoricalPrice.date.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def get_price_stats(session: AsyncSession, ticker: str, since: date) -> dict:
    """52-week style high/low/average volume over stored bars since `since`."""
    result = await session.execute(
        select(
            func.max(HistoricalPrice.high),
            func.min(HistoricalPrice.low),
            func.avg(HistoricalPrice.volume),
        ).where(HistoricalPrice.ticker == ticker, HistoricalPrice.date >= since)
    )
    high, low, avg_volume = result.one()
    return {
        "high_52week": high,
        "low_52week": low,
        "avg_volume": int(round_half_up(avg_volume)) if avg_volume is not None else None,
    }


# =============================================================================
# PREDICTIONS
# =============================================================================


async def add_prediction(
    session: AsyncSession,
    ticker: str,
    predicted_price: Optional[float],
    confidence: Optional[str],
    rationale: str,
) -> Prediction:
    """Store an AI prediction."""
    prediction = Prediction(
        ticker=ticker,
        predicted_price=predicted_price,
        confidence=confidence,
        rationale=rationale,
    )
    session.add(prediction)
    await session.flush()
    return prediction


# =============================================================================
# DEBUG HELPERS
# =============================================================================


async def count_rows(session: AsyncSession) -> list[dict]:
    """Row count per table, ordered by table name."""
    counts = []
    for table_name in sorted(TABLES):
        model = TABLES[table_name]
        result = await session.execute(select(func.count()).select_from(model))
        counts.append({"table": table_name, "rows": result.scalar_one()})
    return counts


async def dump_table(session: AsyncSession, table_name: str) -> Optional[list[dict]]:
    """All rows of a known table as dicts, or None for an unknown table."""
    model = TABLES.get(table_name)
    if model is None:
        return None

    result = await session.execute(select(model))
    columns = [c.name for c in model.__table__.columns]
    return [
        {name: getattr(row, name) for name in columns}
        for row in result.scalars().all()
    ]
