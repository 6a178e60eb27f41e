from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func
from typing import Any, Dict, List

from invoicedesk.models.revenue import Revenue as RevenueModel
from invoicedesk.db.upsert import insert_on_conflict_do_nothing

async def count_revenue(db: AsyncSession) -> int:
    result = await db.execute(select(func.count(RevenueModel.month)))
    return result.scalar_one()

async def upsert_revenue(db: AsyncSession, *, revenue_in: List[Dict[str, Any]]) -> int:
    """
    Insert monthly revenue keyed by month; existing months are left as they are.
    """
    rows = [{"month": row["month"], "revenue": row["revenue"]} for row in revenue_in]
    return await insert_on_conflict_do_nothing(db, RevenueModel, rows, conflict_columns=["month"])
