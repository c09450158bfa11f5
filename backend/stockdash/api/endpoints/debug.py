"""
Debug API Endpoints

Table inspection for local development. Not mounted in production.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from stockdash.db import database as db
from stockdash.db.database import get_db
from stockdash.schemas.market import DebugTablesResponse
from stockdash.services.base import NotFoundError

router = APIRouter()


@router.get("/tables", response_model=DebugTablesResponse)
async def get_tables(session: AsyncSession = Depends(get_db)):
    """Row count for every table."""
    tables = await db.count_rows(session)
    return {"connected": True, "tables": tables}


@router.get("/data/{table}")
async def get_table_data(table: str, session: AsyncSession = Depends(get_db)):
    """Dump every row of a known table."""
    rows = await db.dump_table(session, table)
    if rows is None:
        raise NotFoundError("DebugAPI", f"Unknown table: {table}")
    return rows
