# backend/invoicedesk/crud/crud_invoice.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import joinedload
from sqlalchemy import func, insert
from collections import Counter
from typing import Any, Dict, List, Optional
import uuid

from invoicedesk.models.invoice import Invoice as InvoiceModel
from invoicedesk.models.customer import Customer as CustomerModel
from invoicedesk.schemas.invoice import InvoiceCreate, InvoiceUpdate, InvoiceStatusEnum


async def get_invoice(db: AsyncSession, invoice_id: uuid.UUID) -> Optional[InvoiceModel]:
    """
    Get a single invoice by its ID, with its customer loaded.
    """
    result = await db.execute(
        select(InvoiceModel)
        .options(joinedload(InvoiceModel.customer))
        .filter(InvoiceModel.id == invoice_id)
    )
    return result.scalars().first()

async def get_invoices_by_amount(db: AsyncSession, *, amount: int) -> List[InvoiceModel]:
    result = await db.execute(
        select(InvoiceModel)
        .options(joinedload(InvoiceModel.customer))
        .filter(InvoiceModel.amount == amount)
    )
    return result.scalars().all()

async def count_invoices(db: AsyncSession) -> int:
    result = await db.execute(select(func.count(InvoiceModel.id)))
    return result.scalar_one()

async def create_invoice(db: AsyncSession, *, invoice_in: InvoiceCreate) -> InvoiceModel:
    """
    Create an invoice linked to an existing customer.
    Raises ValueError if the customer does not exist.
    """
    customer = await db.get(CustomerModel, invoice_in.customer_id)
    if customer is None:
        raise ValueError(f"Customer with id {invoice_in.customer_id} not found.")

    db_obj = InvoiceModel(**invoice_in.model_dump(), customer=customer)
    db.add(db_obj)
    await db.commit()
    await db.refresh(db_obj)
    return db_obj

async def update_invoice(
    db: AsyncSession, *, db_invoice: InvoiceModel, invoice_in: InvoiceUpdate
) -> InvoiceModel:
    """
    Update customer link, amount and status of an existing invoice.
    Raises ValueError if the new customer does not exist.
    """
    if invoice_in.customer_id != db_invoice.customer_id:
        customer = await db.get(CustomerModel, invoice_in.customer_id)
        if customer is None:
            raise ValueError(f"Customer with id {invoice_in.customer_id} not found.")
        db_invoice.customer = customer

    db_invoice.amount = invoice_in.amount
    db_invoice.status = invoice_in.status
    db.add(db_invoice)
    await db.commit()
    await db.refresh(db_invoice)
    return db_invoice

async def delete_invoice(db: AsyncSession, *, db_invoice: InvoiceModel) -> InvoiceModel:
    await db.delete(db_invoice)
    await db.commit()
    return db_invoice


async def get_invoice_key_counts(
    db: AsyncSession, *, customer_ids: List[uuid.UUID]
) -> Counter:
    """
    How many invoices exist per (customer_id, amount, status, date) for the
    given customers. Used to make repeated seeding skip what is already there.
    """
    if not customer_ids:
        return Counter()
    result = await db.execute(
        select(InvoiceModel.customer_id, InvoiceModel.amount, InvoiceModel.status, InvoiceModel.date)
        .filter(InvoiceModel.customer_id.in_(customer_ids))
    )
    return Counter(
        (customer_id, amount, InvoiceStatusEnum(status), invoice_date)
        for customer_id, amount, status, invoice_date in result.all()
    )

async def bulk_create_invoices(db: AsyncSession, *, invoices_in: List[InvoiceCreate]) -> int:
    """
    Insert many invoices in a single statement. The caller is responsible for
    the customer ids being valid. Returns rows inserted.
    """
    if not invoices_in:
        return 0
    rows: List[Dict[str, Any]] = [
        {"id": uuid.uuid4(), **invoice_in.model_dump()} for invoice_in in invoices_in
    ]
    await db.execute(insert(InvoiceModel), rows)
    return len(rows)
