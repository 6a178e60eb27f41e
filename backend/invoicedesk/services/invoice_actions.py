"""
Invoice form actions: validate, write, and report what the web layer should
do next. Bad user input comes back as a FormState; database failures are
raised as StoreError; unknown invoices as InvoiceNotFoundError.
"""
import logging
from typing import Any, Mapping, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from invoicedesk import crud, models
from invoicedesk.core.exceptions import InvoiceNotFoundError, StoreError
from invoicedesk.db.session import Database
from invoicedesk.schemas.invoice import (
    ActionSuccess,
    CREATE_FAILED_MESSAGE,
    FIELD_ERROR_MESSAGES,
    FormState,
    InvoiceCreate,
    InvoiceUpdate,
    UPDATE_FAILED_MESSAGE,
    validate_invoice_form,
)

logger = logging.getLogger(__name__)

INVOICES_PATH = "/dashboard/invoices"

ActionResult = Union[ActionSuccess, FormState]


def _unknown_customer(message: str) -> FormState:
    return FormState(errors={"customerId": [FIELD_ERROR_MESSAGES["customerId"]]}, message=message)


async def _get_customer(db: AsyncSession, customer_id: str) -> Optional[models.Customer]:
    if not Database.is_valid_id(customer_id):
        return None
    try:
        return await crud.customer.get_customer(db, customer_id=Database.as_id(customer_id))
    except SQLAlchemyError as exc:
        logger.exception("Database Error: failed to look up customer %s", customer_id)
        raise StoreError("Database Error: Failed to fetch customer.") from exc


async def _get_invoice(db: AsyncSession, invoice_id: str) -> models.Invoice:
    if not Database.is_valid_id(invoice_id):
        raise InvoiceNotFoundError(invoice_id)
    try:
        db_invoice = await crud.invoice.get_invoice(db, invoice_id=Database.as_id(invoice_id))
    except SQLAlchemyError as exc:
        logger.exception("Database Error: failed to look up invoice %s", invoice_id)
        raise StoreError("Database Error: Failed to fetch invoice.") from exc
    if db_invoice is None:
        raise InvoiceNotFoundError(invoice_id)
    return db_invoice


async def create_invoice(db: AsyncSession, form_data: Mapping[str, Any]) -> ActionResult:
    validated = validate_invoice_form(form_data, message=CREATE_FAILED_MESSAGE)
    if isinstance(validated, FormState):
        return validated

    customer = await _get_customer(db, validated.customer_id)
    if customer is None:
        return _unknown_customer(CREATE_FAILED_MESSAGE)

    invoice_in = InvoiceCreate(
        customer_id=customer.id,
        amount=validated.amount_in_cents,
        status=validated.status,
    )
    try:
        invoice = await crud.invoice.create_invoice(db, invoice_in=invoice_in)
    except ValueError:
        # Customer removed between the lookup and the write
        await db.rollback()
        return _unknown_customer(CREATE_FAILED_MESSAGE)
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Database Error: failed to create invoice")
        raise StoreError("Database Error: Failed to Create Invoice.") from exc

    logger.info("Created invoice %s for customer %s", invoice.id, customer.id)
    return ActionSuccess(
        message="Created Invoice.",
        invoice_id=invoice.id,
        revalidate_paths=[INVOICES_PATH],
        redirect_to=INVOICES_PATH,
    )


async def update_invoice(db: AsyncSession, invoice_id: str, form_data: Mapping[str, Any]) -> ActionResult:
    db_invoice = await _get_invoice(db, invoice_id)

    validated = validate_invoice_form(form_data, message=UPDATE_FAILED_MESSAGE)
    if isinstance(validated, FormState):
        return validated

    customer = await _get_customer(db, validated.customer_id)
    if customer is None:
        return _unknown_customer(UPDATE_FAILED_MESSAGE)

    invoice_in = InvoiceUpdate(
        customer_id=customer.id,
        amount=validated.amount_in_cents,
        status=validated.status,
    )
    try:
        invoice = await crud.invoice.update_invoice(db, db_invoice=db_invoice, invoice_in=invoice_in)
    except ValueError:
        await db.rollback()
        return _unknown_customer(UPDATE_FAILED_MESSAGE)
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Database Error: failed to update invoice %s", invoice_id)
        raise StoreError("Database Error: Failed to Update Invoice.") from exc

    logger.info("Updated invoice %s", invoice.id)
    return ActionSuccess(
        message="Updated Invoice.",
        invoice_id=invoice.id,
        revalidate_paths=[INVOICES_PATH],
        redirect_to=INVOICES_PATH,
    )


async def delete_invoice(db: AsyncSession, invoice_id: str) -> ActionSuccess:
    db_invoice = await _get_invoice(db, invoice_id)
    try:
        await crud.invoice.delete_invoice(db, db_invoice=db_invoice)
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Database Error: failed to delete invoice %s", invoice_id)
        raise StoreError("Database Error: Failed to Delete Invoice.") from exc

    logger.info("Deleted invoice %s", db_invoice.id)
    return ActionSuccess(
        message="Deleted Invoice.",
        invoice_id=db_invoice.id,
        revalidate_paths=[INVOICES_PATH],
    )
