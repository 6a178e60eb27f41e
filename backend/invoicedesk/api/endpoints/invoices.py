# backend/invoicedesk/api/endpoints/invoices.py
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any

from invoicedesk import schemas
from invoicedesk.api import deps
from invoicedesk.core.cache import ViewCache
from invoicedesk.services import invoice_actions

router = APIRouter(dependencies=[Depends(deps.get_current_user)])


def _apply_effects(result: schemas.ActionSuccess, cache: ViewCache) -> Any:
    """
    Post-commit effects of a successful action: drop stale cached views,
    then redirect (form submissions) or acknowledge.
    """
    for path in result.revalidate_paths:
        cache.revalidate_path(path)
    if result.redirect_to:
        return RedirectResponse(url=result.redirect_to, status_code=status.HTTP_303_SEE_OTHER)
    return {"message": result.message}


def _form_errors(result: schemas.FormState) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=result.model_dump(),
    )


@router.post("/create", responses={422: {"model": schemas.FormState}})
async def create_invoice(
    request: Request,
    *,
    db: AsyncSession = Depends(deps.get_db),
    cache: ViewCache = Depends(deps.get_view_cache),
) -> Any:
    form = await request.form()
    result = await invoice_actions.create_invoice(db, form)
    if isinstance(result, schemas.FormState):
        return _form_errors(result)
    return _apply_effects(result, cache)


@router.post("/{invoice_id}/edit", responses={422: {"model": schemas.FormState}})
async def update_invoice(
    invoice_id: str,
    request: Request,
    *,
    db: AsyncSession = Depends(deps.get_db),
    cache: ViewCache = Depends(deps.get_view_cache),
) -> Any:
    form = await request.form()
    result = await invoice_actions.update_invoice(db, invoice_id, form)
    if isinstance(result, schemas.FormState):
        return _form_errors(result)
    return _apply_effects(result, cache)


@router.post("/{invoice_id}/delete")
async def delete_invoice(
    invoice_id: str,
    *,
    db: AsyncSession = Depends(deps.get_db),
    cache: ViewCache = Depends(deps.get_view_cache),
) -> Any:
    result = await invoice_actions.delete_invoice(db, invoice_id)
    return _apply_effects(result, cache)
