from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from invoicedesk import crud
from invoicedesk.core.exceptions import InvoiceNotFoundError, StoreError
from invoicedesk.schemas.invoice import InvoiceStatusEnum


@pytest.mark.asyncio
async def test_card_data_sums_by_status(session, seeded) -> None:
    cards = await crud.dashboard.fetch_card_data(session)
    assert cards == {
        "number_of_customers": 6,
        "number_of_invoices": 13,
        "total_paid_invoices": "$1,006.26",
        "total_pending_invoices": "$1,256.32",
    }


@pytest.mark.asyncio
async def test_card_data_on_empty_store(session) -> None:
    cards = await crud.dashboard.fetch_card_data(session)
    assert cards["number_of_invoices"] == 0
    assert cards["total_paid_invoices"] == "$0.00"
    assert cards["total_pending_invoices"] == "$0.00"


@pytest.mark.asyncio
async def test_revenue_has_every_month(session, seeded) -> None:
    rows = await crud.dashboard.fetch_revenue(session)
    by_month = {row.month: row.revenue for row in rows}
    assert len(by_month) == 12
    assert by_month["Jan"] == 2000
    assert by_month["Dec"] == 4800


@pytest.mark.asyncio
async def test_latest_invoices_newest_first(session, seeded) -> None:
    latest = await crud.dashboard.fetch_latest_invoices(session)
    assert len(latest) == 5
    assert latest[0]["name"] == "Michael Novotny"
    assert latest[0]["amount"] == "$448.00"
    assert latest[0]["email"] == "michael@novotny.com"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "query, expected",
    [
        ("", 13),
        ("evil", 2),
        ("EVIL", 2),
        ("delba", 2),
        ("@rabbit.com", 2),
        ("paid", 8),
        ("pending", 5),
        ("666", 1),
        ("2023-06-27", 1),
        ("%", 0),
        ("nobody", 0),
    ],
)
async def test_invoice_search(session, seeded, query: str, expected: int) -> None:
    rows = await crud.dashboard.fetch_filtered_invoices(session, query=query, items_per_page=50)
    assert len(rows) == expected


@pytest.mark.asyncio
async def test_invoice_pages_and_ordering(session, seeded) -> None:
    first = await crud.dashboard.fetch_filtered_invoices(session, current_page=1)
    last = await crud.dashboard.fetch_filtered_invoices(session, current_page=3)

    assert [row["date"] for row in first] == sorted((row["date"] for row in first), reverse=True)
    assert first[0]["date"] == date(2023, 9, 10)
    assert len(first) == 6
    assert [row["date"] for row in last] == [date(2022, 6, 5)]

    assert await crud.dashboard.fetch_invoices_pages(session) == 3
    assert await crud.dashboard.fetch_invoices_pages(session, query="evil") == 1
    assert await crud.dashboard.fetch_invoices_pages(session, query="nobody") == 0


@pytest.mark.asyncio
async def test_invoice_row_carries_customer_and_cents(session, seeded) -> None:
    [row] = await crud.dashboard.fetch_filtered_invoices(session, query="666")
    assert row["amount"] == 666
    assert row["status"] == InvoiceStatusEnum.PENDING
    assert row["name"] == "Evil Rabbit"
    assert row["image_url"] == "/customers/evil-rabbit.png"


@pytest.mark.asyncio
async def test_fetch_invoice_by_id_returns_dollars(session, seeded) -> None:
    [row] = await crud.dashboard.fetch_filtered_invoices(session, query="666")
    invoice = await crud.dashboard.fetch_invoice_by_id(session, str(row["id"]))
    assert invoice["amount"] == Decimal("6.66")
    assert invoice["status"] == InvoiceStatusEnum.PENDING


@pytest.mark.asyncio
@pytest.mark.parametrize("invoice_id", ["not-an-id", str(uuid.UUID(int=0))])
async def test_fetch_invoice_by_id_not_found(session, seeded, invoice_id: str) -> None:
    with pytest.raises(InvoiceNotFoundError) as excinfo:
        await crud.dashboard.fetch_invoice_by_id(session, invoice_id)
    assert excinfo.value.status_code == 404


@pytest.mark.asyncio
async def test_customers_sorted_by_name(session, seeded) -> None:
    customers = await crud.dashboard.fetch_customers(session)
    assert [c["name"] for c in customers] == [
        "Amy Burns",
        "Balazs Orban",
        "Delba de Oliveira",
        "Evil Rabbit",
        "Lee Robinson",
        "Michael Novotny",
    ]


@pytest.mark.asyncio
async def test_customers_table_totals(session, seeded) -> None:
    [evil] = await crud.dashboard.fetch_filtered_customers(session, query="rabbit")
    assert evil["total_invoices"] == 2
    assert evil["total_pending"] == "$164.61"
    assert evil["total_paid"] == "$0.00"

    everyone = await crud.dashboard.fetch_filtered_customers(session)
    assert len(everyone) == 6


@pytest.mark.asyncio
async def test_database_failure_becomes_store_error() -> None:
    class BrokenSession:
        async def execute(self, *args, **kwargs):
            raise OperationalError("SELECT 1", {}, Exception("connection lost"))

    with pytest.raises(StoreError) as excinfo:
        await crud.dashboard.fetch_card_data(BrokenSession())
    assert excinfo.value.message == "Failed to fetch card data."
    assert "connection lost" not in excinfo.value.message
