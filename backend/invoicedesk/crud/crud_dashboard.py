"""
Read queries behind the dashboard pages.

Every function here turns a database failure into a StoreError with a
generic message; the driver error is logged, never returned to the client.
"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import joinedload, selectinload
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import func, or_, cast, String
from datetime import date
from decimal import Decimal, InvalidOperation
from functools import wraps
from typing import Any, Callable, Dict, List, Optional
import logging
import math

from invoicedesk.core.config import settings
from invoicedesk.core.exceptions import InvoiceNotFoundError, StoreError
from invoicedesk.core.utils import cents_to_dollars, format_currency
from invoicedesk.db.session import Database
from invoicedesk.models.invoice import Invoice as InvoiceModel
from invoicedesk.models.customer import Customer as CustomerModel
from invoicedesk.models.revenue import Revenue as RevenueModel
from invoicedesk.schemas.invoice import InvoiceStatusEnum

logger = logging.getLogger(__name__)


def _store_errors(failure_message: str):
    def decorator(func_: Callable):
        @wraps(func_)
        async def wrapper(*args, **kwargs):
            try:
                return await func_(*args, **kwargs)
            except SQLAlchemyError as exc:
                logger.exception("Database Error: %s", failure_message)
                raise StoreError(failure_message) from exc
        return wrapper
    return decorator


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")

def _parse_amount(query: str) -> Optional[int]:
    try:
        amount = Decimal(query)
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount != amount.to_integral_value():
        return None
    return int(amount)

def _parse_date(query: str) -> Optional[date]:
    try:
        return date.fromisoformat(query)
    except ValueError:
        return None

def _invoice_search_clause(query: str):
    """
    An invoice matches when the customer's name or email, or the status,
    contains `query` (case-insensitive), or when the amount or date equals it.
    """
    query = query.strip()
    pattern = f"%{_escape_like(query)}%"
    conditions = [
        CustomerModel.name.ilike(pattern, escape="\\"),
        CustomerModel.email.ilike(pattern, escape="\\"),
        cast(InvoiceModel.status, String).ilike(pattern, escape="\\"),
    ]
    amount = _parse_amount(query)
    if amount is not None:
        conditions.append(InvoiceModel.amount == amount)
    search_date = _parse_date(query)
    if search_date is not None:
        conditions.append(InvoiceModel.date == search_date)
    return or_(*conditions)


@_store_errors("Failed to fetch revenue data.")
async def fetch_revenue(db: AsyncSession) -> List[RevenueModel]:
    result = await db.execute(select(RevenueModel))
    return result.scalars().all()


@_store_errors("Failed to fetch the latest invoices.")
async def fetch_latest_invoices(
    db: AsyncSession, *, limit: int = settings.LATEST_INVOICES_LIMIT
) -> List[Dict[str, Any]]:
    result = await db.execute(
        select(InvoiceModel)
        .options(joinedload(InvoiceModel.customer))
        .order_by(InvoiceModel.date.desc())
        .limit(limit)
    )
    return [
        {
            "id": invoice.id,
            "amount": format_currency(invoice.amount),
            "name": invoice.customer.name,
            "image_url": invoice.customer.image_url,
            "email": invoice.customer.email,
        }
        for invoice in result.scalars().all()
    ]


@_store_errors("Failed to fetch card data.")
async def fetch_card_data(db: AsyncSession) -> Dict[str, Any]:
    invoice_count = (await db.execute(select(func.count(InvoiceModel.id)))).scalar_one()
    customer_count = (await db.execute(select(func.count(CustomerModel.id)))).scalar_one()

    totals_result = await db.execute(
        select(InvoiceModel.status, func.sum(InvoiceModel.amount))
        .group_by(InvoiceModel.status)
    )
    totals = {InvoiceStatusEnum(status): total or 0 for status, total in totals_result.all()}

    return {
        "number_of_customers": customer_count,
        "number_of_invoices": invoice_count,
        "total_paid_invoices": format_currency(totals.get(InvoiceStatusEnum.PAID, 0)),
        "total_pending_invoices": format_currency(totals.get(InvoiceStatusEnum.PENDING, 0)),
    }


@_store_errors("Failed to fetch invoices.")
async def fetch_filtered_invoices(
    db: AsyncSession, *, query: str = "", current_page: int = 1,
    items_per_page: int = settings.ITEMS_PER_PAGE
) -> List[Dict[str, Any]]:
    offset = (max(current_page, 1) - 1) * items_per_page
    result = await db.execute(
        select(InvoiceModel)
        .join(InvoiceModel.customer)
        .options(joinedload(InvoiceModel.customer))
        .filter(_invoice_search_clause(query))
        .order_by(InvoiceModel.date.desc(), InvoiceModel.id)
        .offset(offset)
        .limit(items_per_page)
    )
    return [
        {
            "id": invoice.id,
            "amount": invoice.amount,
            "date": invoice.date,
            "status": invoice.status,
            "name": invoice.customer.name,
            "email": invoice.customer.email,
            "image_url": invoice.customer.image_url,
        }
        for invoice in result.scalars().all()
    ]


@_store_errors("Failed to fetch total number of invoices.")
async def fetch_invoices_pages(
    db: AsyncSession, *, query: str = "", items_per_page: int = settings.ITEMS_PER_PAGE
) -> int:
    result = await db.execute(
        select(func.count(InvoiceModel.id))
        .join(InvoiceModel.customer)
        .filter(_invoice_search_clause(query))
    )
    return math.ceil(result.scalar_one() / items_per_page)


@_store_errors("Failed to fetch invoice.")
async def fetch_invoice_by_id(
    db: AsyncSession, invoice_id: str, *,
    is_valid_id: Callable[[object], bool] = Database.is_valid_id
) -> Dict[str, Any]:
    """
    Invoice for the edit form, amount converted back to dollars.
    Raises InvoiceNotFoundError for a malformed or unknown id.
    """
    if not is_valid_id(invoice_id):
        raise InvoiceNotFoundError(invoice_id)
    result = await db.execute(
        select(InvoiceModel.id, InvoiceModel.customer_id, InvoiceModel.amount, InvoiceModel.status)
        .filter(InvoiceModel.id == Database.as_id(invoice_id))
    )
    row = result.first()
    if row is None:
        raise InvoiceNotFoundError(invoice_id)
    return {
        "id": row.id,
        "customer_id": row.customer_id,
        "amount": cents_to_dollars(row.amount),
        "status": row.status,
    }


@_store_errors("Failed to fetch all customers.")
async def fetch_customers(db: AsyncSession) -> List[Dict[str, Any]]:
    result = await db.execute(
        select(CustomerModel.id, CustomerModel.name).order_by(CustomerModel.name)
    )
    return [{"id": customer_id, "name": name} for customer_id, name in result.all()]


@_store_errors("Failed to fetch customer table.")
async def fetch_filtered_customers(db: AsyncSession, *, query: str = "") -> List[Dict[str, Any]]:
    pattern = f"%{_escape_like(query.strip())}%"
    result = await db.execute(
        select(CustomerModel)
        .options(selectinload(CustomerModel.invoices))
        .filter(or_(
            CustomerModel.name.ilike(pattern, escape="\\"),
            CustomerModel.email.ilike(pattern, escape="\\"),
        ))
        .order_by(CustomerModel.name)
    )

    customers = []
    for customer in result.scalars().all():
        total_paid = sum(i.amount for i in customer.invoices if i.status == InvoiceStatusEnum.PAID)
        total_pending = sum(i.amount for i in customer.invoices if i.status == InvoiceStatusEnum.PENDING)
        customers.append({
            "id": customer.id,
            "name": customer.name,
            "email": customer.email,
            "image_url": customer.image_url,
            "total_invoices": len(customer.invoices),
            "total_pending": format_currency(total_pending),
            "total_paid": format_currency(total_paid),
        })
    return customers
