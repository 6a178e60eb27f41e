from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func
from typing import Any, Dict, List
import uuid

from invoicedesk.models.customer import Customer as CustomerModel # Alias
from invoicedesk.db.upsert import insert_on_conflict_do_nothing

async def get_customer(db: AsyncSession, customer_id: uuid.UUID) -> CustomerModel | None:
    """
    Get a single customer by its ID.
    """
    result = await db.execute(select(CustomerModel).filter(CustomerModel.id == customer_id))
    return result.scalars().first()

async def get_customer_by_email(db: AsyncSession, *, email: str) -> CustomerModel | None:
    result = await db.execute(select(CustomerModel).filter(CustomerModel.email == email))
    return result.scalars().first()

async def get_customer_ids_by_email(db: AsyncSession) -> Dict[str, uuid.UUID]:
    """
    Map of email -> store-assigned id for every committed customer.
    """
    result = await db.execute(select(CustomerModel.email, CustomerModel.id))
    return {email: customer_id for email, customer_id in result.all()}

async def count_customers(db: AsyncSession) -> int:
    result = await db.execute(select(func.count(CustomerModel.id)))
    return result.scalar_one()

async def upsert_customers(db: AsyncSession, *, customers_in: List[Dict[str, Any]]) -> int:
    """
    Insert customers keyed by email; existing customers are left as they are.
    Returns rows inserted.
    """
    rows = [
        {
            "id": uuid.uuid4(),
            "name": customer_in["name"],
            "email": customer_in["email"],
            "image_url": customer_in.get("image_url"),
        }
        for customer_in in customers_in
    ]
    return await insert_on_conflict_do_nothing(db, CustomerModel, rows, conflict_columns=["email"])
