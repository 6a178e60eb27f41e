from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from typing import List
import logging

from invoicedesk import crud, schemas
from invoicedesk.api import deps
from invoicedesk.core.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get(
    "",
    response_model=List[schemas.QueryInvoice],
    responses={500: {"model": schemas.ErrorResponse}},
)
async def list_invoices(db: AsyncSession = Depends(deps.get_db)):
    """
    Debug query: invoices with a fixed amount, with their customer's name.
    """
    try:
        invoices = await crud.invoice.get_invoices_by_amount(db, amount=settings.DEBUG_QUERY_AMOUNT)
    except SQLAlchemyError:
        logger.exception("Database Error: failed to run debug query")
        return JSONResponse(status_code=500, content={"error": "Failed to query invoices."})
    return invoices
