from __future__ import annotations

import pytest
from sqlalchemy import select

from invoicedesk import crud
from invoicedesk.core.exceptions import SeedError, SeedReferenceError
from invoicedesk.core.security import verify_password
from invoicedesk.db import placeholder_data
from invoicedesk.models import Customer, Invoice, User
from invoicedesk.services.seed import run_seed, seed_invoices, unique_by_email


async def _row_counts(database) -> dict:
    async with database.session() as db:
        return {
            "users": await crud.user.count_users(db),
            "customers": await crud.customer.count_customers(db),
            "invoices": await crud.invoice.count_invoices(db),
            "revenue": await crud.revenue.count_revenue(db),
        }


@pytest.mark.asyncio
async def test_seed_populates_empty_store(database) -> None:
    counts = await run_seed(database)

    assert counts.model_dump() == {"users": 1, "customers": 6, "invoices": 13, "revenue": 12}
    assert await _row_counts(database) == counts.model_dump()


@pytest.mark.asyncio
async def test_seed_twice_is_idempotent(database) -> None:
    await run_seed(database)
    once = await _row_counts(database)

    await run_seed(database)
    assert await _row_counts(database) == once


@pytest.mark.asyncio
async def test_seed_users_are_stored_with_password_hash(database) -> None:
    await run_seed(database)

    async with database.session() as db:
        user = await crud.user.get_user_by_email(db, email="user@nextmail.com")
    assert user is not None
    assert user.hashed_password != "123456"
    assert verify_password("123456", user.hashed_password)


@pytest.mark.asyncio
async def test_duplicate_fixture_emails_store_one_user(database) -> None:
    users = [
        {"name": "First", "email": "dup@example.com", "password": "secret-1"},
        {"name": "Second", "email": "dup@example.com", "password": "secret-2"},
        {"name": "Other", "email": "other@example.com", "password": "secret-3"},
    ]
    counts = await run_seed(database, users=users, customers=[], invoices=[], revenue=[])

    assert counts.users == 2
    async with database.session() as db:
        result = await db.execute(select(User).filter(User.email == "dup@example.com"))
        stored = result.scalars().all()
    assert len(stored) == 1
    assert stored[0].name == "First"
    assert verify_password("secret-1", stored[0].hashed_password)


def test_unique_by_email_keeps_first_occurrence() -> None:
    records = [{"email": "a"}, {"email": "b", "n": 1}, {"email": "b", "n": 2}]
    assert unique_by_email(records) == [{"email": "a"}, {"email": "b", "n": 1}]


@pytest.mark.asyncio
async def test_invoice_foreign_key_is_resolved_by_email(database) -> None:
    customers = [{"id": "c1", "name": "A", "email": "a@x.com", "image_url": None}]
    invoices = [{"customer_id": "c1", "amount": 500, "status": "pending", "date": "2024-01-15"}]

    await run_seed(database, users=[], customers=customers, invoices=invoices, revenue=[])

    async with database.session() as db:
        customer = await crud.customer.get_customer_by_email(db, email="a@x.com")
        result = await db.execute(select(Invoice))
        stored = result.scalars().all()
    assert len(stored) == 1
    assert stored[0].customer_id == customer.id
    assert str(customer.id) != "c1"
    assert stored[0].amount == 500


@pytest.mark.asyncio
async def test_seeding_invoices_before_customers_names_the_reference(session) -> None:
    with pytest.raises(SeedReferenceError) as excinfo:
        await seed_invoices(session, placeholder_data.invoices, placeholder_data.customers)

    first_fixture_id = placeholder_data.invoices[0]["customer_id"]
    assert excinfo.value.message == f"No matching customer found for customer_id: {first_fixture_id}"


@pytest.mark.asyncio
async def test_failed_stage_aborts_remaining_stages(database) -> None:
    customers = [{"id": "c1", "name": "A", "email": "a@x.com"}]
    invoices = [{"customer_id": "missing", "amount": 500, "status": "paid", "date": "2024-01-15"}]

    with pytest.raises(SeedError) as excinfo:
        await run_seed(
            database,
            users=[],
            customers=customers,
            invoices=invoices,
            revenue=placeholder_data.revenue,
        )

    assert excinfo.value.stage == "invoices"
    assert str(excinfo.value) == "Failed to seed invoices: No matching customer found for customer_id: missing"
    counts = await _row_counts(database)
    # Earlier stages stay committed, later ones never ran
    assert counts["customers"] == 1
    assert counts["invoices"] == 0
    assert counts["revenue"] == 0


@pytest.mark.asyncio
async def test_non_list_fixture_is_reported_for_its_stage(database) -> None:
    with pytest.raises(SeedError) as excinfo:
        await run_seed(database, users="not-a-list")

    assert excinfo.value.message == "Failed to seed users: Users must be a list"
    assert (await _row_counts(database))["customers"] == 0


@pytest.mark.asyncio
async def test_reseed_skips_existing_invoices_but_adds_new_ones(database) -> None:
    customers = [{"id": "c1", "name": "A", "email": "a@x.com"}]
    first = [{"customer_id": "c1", "amount": 500, "status": "pending", "date": "2024-01-15"}]
    second = first + [{"customer_id": "c1", "amount": 700, "status": "paid", "date": "2024-02-01"}]

    await run_seed(database, users=[], customers=customers, invoices=first, revenue=[])
    await run_seed(database, users=[], customers=customers, invoices=second, revenue=[])

    async with database.session() as db:
        result = await db.execute(select(Invoice.amount).order_by(Invoice.amount))
        amounts = result.scalars().all()
    assert amounts == [500, 700]


@pytest.mark.asyncio
async def test_existing_customer_rows_are_not_overwritten(database) -> None:
    await run_seed(database, users=[], customers=[{"id": "c1", "name": "Original", "email": "a@x.com"}], invoices=[], revenue=[])
    await run_seed(database, users=[], customers=[{"id": "c1", "name": "Renamed", "email": "a@x.com"}], invoices=[], revenue=[])

    async with database.session() as db:
        result = await db.execute(select(Customer))
        stored = result.scalars().all()
    assert [c.name for c in stored] == ["Original"]
