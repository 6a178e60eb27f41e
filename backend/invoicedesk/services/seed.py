"""
Database seeding pipeline.

Stages run strictly in order (users, customers, invoices, revenue) and each
one commits before the next starts: invoice seeding reads back the customers
committed by the previous stage to resolve its foreign keys. Every stage is
safe to re-run; unique keys (email, month) make the inserts no-ops for rows
that already exist, and invoices already present are skipped.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from invoicedesk import crud
from invoicedesk.core.exceptions import SeedError, SeedReferenceError
from invoicedesk.core.security import get_password_hash
from invoicedesk.db import placeholder_data
from invoicedesk.db.session import Database
from invoicedesk.schemas.invoice import InvoiceCreate
from invoicedesk.schemas.seed import SeedCounts

logger = logging.getLogger(__name__)


def _require_list(records: Any, entity: str) -> None:
    if not isinstance(records, list):
        raise TypeError(f"{entity} must be a list")


def unique_by_email(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Drop records whose email was already seen; the first occurrence wins."""
    seen = set()
    unique = []
    for record in records:
        if record["email"] in seen:
            continue
        seen.add(record["email"])
        unique.append(record)
    return unique


async def seed_users(db: AsyncSession, users: List[Dict[str, Any]]) -> int:
    _require_list(users, "Users")
    unique_users = unique_by_email(users)

    # bcrypt is CPU bound: hash on worker threads, all users at once
    hashed_passwords = await asyncio.gather(
        *(asyncio.to_thread(get_password_hash, user["password"]) for user in unique_users)
    )
    inserted = await crud.user.upsert_users(
        db,
        users_in=[
            {"name": user["name"], "email": user["email"], "hashed_password": hashed}
            for user, hashed in zip(unique_users, hashed_passwords)
        ],
    )
    logger.info("Seeded users: %d unique, %d inserted", len(unique_users), inserted)
    return len(unique_users)


async def seed_customers(db: AsyncSession, customers: List[Dict[str, Any]]) -> int:
    _require_list(customers, "Customers")
    inserted = await crud.customer.upsert_customers(db, customers_in=customers)
    logger.info("Seeded customers: %d in fixture, %d inserted", len(customers), inserted)
    return len(customers)


async def seed_invoices(
    db: AsyncSession, invoices: List[Dict[str, Any]], customers: List[Dict[str, Any]]
) -> int:
    """
    Fixture invoices point at fixture customer ids, which are not the ids the
    store assigned. Resolve each one through the customer's email.
    """
    _require_list(invoices, "Invoices")
    _require_list(customers, "Customers")

    store_ids_by_email = await crud.customer.get_customer_ids_by_email(db)
    fixture_emails_by_id = {customer["id"]: customer["email"] for customer in customers}
    logger.debug("Customer mapping: %s", store_ids_by_email)

    invoices_in: List[InvoiceCreate] = []
    for invoice in invoices:
        fixture_customer_id = invoice["customer_id"]
        customer_id = store_ids_by_email.get(fixture_emails_by_id.get(fixture_customer_id))
        if customer_id is None:
            raise SeedReferenceError(
                f"No matching customer found for customer_id: {fixture_customer_id}"
            )
        invoices_in.append(
            InvoiceCreate(
                customer_id=customer_id,
                amount=invoice["amount"],
                status=invoice["status"],
                date=invoice["date"],
            )
        )

    existing = await crud.invoice.get_invoice_key_counts(
        db, customer_ids=list({invoice_in.customer_id for invoice_in in invoices_in})
    )
    new_invoices = []
    for invoice_in in invoices_in:
        key = (invoice_in.customer_id, invoice_in.amount, invoice_in.status, invoice_in.date)
        if existing[key] > 0:
            existing[key] -= 1
            continue
        new_invoices.append(invoice_in)

    inserted = await crud.invoice.bulk_create_invoices(db, invoices_in=new_invoices)
    logger.info("Seeded invoices: %d in fixture, %d inserted", len(invoices), inserted)
    return len(invoices)


async def seed_revenue(db: AsyncSession, revenue: List[Dict[str, Any]]) -> int:
    _require_list(revenue, "Revenue")
    inserted = await crud.revenue.upsert_revenue(db, revenue_in=revenue)
    logger.info("Seeded revenue: %d in fixture, %d inserted", len(revenue), inserted)
    return len(revenue)


def _describe(exc: Exception) -> str:
    if isinstance(exc, SQLAlchemyError):
        return f"database error ({exc.__class__.__name__})"
    return str(exc) or exc.__class__.__name__


async def run_seed(
    database: Database,
    *,
    users: Optional[List[Dict[str, Any]]] = None,
    customers: Optional[List[Dict[str, Any]]] = None,
    invoices: Optional[List[Dict[str, Any]]] = None,
    revenue: Optional[List[Dict[str, Any]]] = None,
) -> SeedCounts:
    """
    Seed the store, defaulting to the bundled placeholder data.
    Raises SeedError naming the stage that failed; later stages do not run.
    """
    users = placeholder_data.users if users is None else users
    customers = placeholder_data.customers if customers is None else customers
    invoices = placeholder_data.invoices if invoices is None else invoices
    revenue = placeholder_data.revenue if revenue is None else revenue

    stages: List[tuple[str, Callable[[AsyncSession], Awaitable[int]]]] = [
        ("users", lambda db: seed_users(db, users)),
        ("customers", lambda db: seed_customers(db, customers)),
        ("invoices", lambda db: seed_invoices(db, invoices, customers)),
        ("revenue", lambda db: seed_revenue(db, revenue)),
    ]

    counts: Dict[str, int] = {}
    async with database.session() as db:
        for stage, step in stages:
            try:
                counts[stage] = await step(db)
                await db.commit()
            except Exception as exc:
                await db.rollback()
                logger.error("Seeding stage '%s' failed: %s", stage, exc)
                raise SeedError(stage, _describe(exc)) from exc

    return SeedCounts(**counts)
