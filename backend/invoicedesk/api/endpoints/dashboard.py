from fastapi import APIRouter, Depends, Query, Request
from fastapi.encoders import jsonable_encoder
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, List

from invoicedesk import crud, models, schemas
from invoicedesk.api import deps
from invoicedesk.core.cache import ViewCache
from invoicedesk.services.invoice_actions import INVOICES_PATH

# Every dashboard view requires a logged-in user
router = APIRouter(dependencies=[Depends(deps.get_current_user)])

@router.get("/revenue", response_model=List[schemas.RevenueRow])
async def read_revenue(db: AsyncSession = Depends(deps.get_db)) -> Any:
    return await crud.dashboard.fetch_revenue(db)

@router.get("/latest-invoices", response_model=List[schemas.LatestInvoice])
async def read_latest_invoices(db: AsyncSession = Depends(deps.get_db)) -> Any:
    return await crud.dashboard.fetch_latest_invoices(db)

@router.get("/cards", response_model=schemas.CardData)
async def read_card_data(db: AsyncSession = Depends(deps.get_db)) -> Any:
    return await crud.dashboard.fetch_card_data(db)

@router.get("/invoices", response_model=List[schemas.InvoicesTableRow])
async def read_invoices(
    request: Request,
    *,
    db: AsyncSession = Depends(deps.get_db),
    cache: ViewCache = Depends(deps.get_view_cache),
    query: str = Query("", description="Search customers, amounts, dates and statuses"),
    page: int = Query(1, ge=1),
) -> Any:
    """
    One page of the invoices table. Cached per query string until an invoice
    action revalidates the listing.
    """
    cache_key = str(request.url.query)
    cached = cache.get(INVOICES_PATH, cache_key)
    if cached is not None:
        return cached

    invoices = await crud.dashboard.fetch_filtered_invoices(db, query=query, current_page=page)
    view = jsonable_encoder(invoices)
    cache.set(INVOICES_PATH, cache_key, view)
    return view

@router.get("/invoices/pages", response_model=schemas.InvoicesPages)
async def read_invoices_pages(
    db: AsyncSession = Depends(deps.get_db),
    query: str = Query(""),
) -> Any:
    total_pages = await crud.dashboard.fetch_invoices_pages(db, query=query)
    return {"total_pages": total_pages}

@router.get("/invoices/{invoice_id}", response_model=schemas.InvoiceEditForm)
async def read_invoice(invoice_id: str, db: AsyncSession = Depends(deps.get_db)) -> Any:
    """
    Invoice for the edit form; 404 for malformed or unknown ids.
    """
    return await crud.dashboard.fetch_invoice_by_id(db, invoice_id)

@router.get("/customers", response_model=List[schemas.CustomerField])
async def read_customers(db: AsyncSession = Depends(deps.get_db)) -> Any:
    return await crud.dashboard.fetch_customers(db)

@router.get("/customers/table", response_model=List[schemas.CustomersTableRow])
async def read_customers_table(
    db: AsyncSession = Depends(deps.get_db),
    query: str = Query(""),
) -> Any:
    return await crud.dashboard.fetch_filtered_customers(db, query=query)
