from pydantic import BaseModel, Field, ConfigDict, ValidationError, constr, field_validator
from typing import Any, Dict, List, Mapping, Optional, Union
from decimal import Decimal
from datetime import date, datetime, timezone
import datetime as dt
from enum import Enum
import uuid

from invoicedesk.core.exceptions import InvoiceFormError
from invoicedesk.core.utils import dollars_to_cents

# --- Enums for Invoice ---
class InvoiceStatusEnum(str, Enum):
    PENDING = "pending"
    PAID = "paid"


def _today_utc() -> date:
    return datetime.now(timezone.utc).date()


# --- Form validation ---
# Keys are the form field names as submitted by the invoice forms.
FIELD_ERROR_MESSAGES: Dict[str, str] = {
    "customerId": "Please select a customer.",
    "amount": "Please enter an amount greater than $0.",
    "status": "Please select an invoice status.",
}
_FIELD_ALIASES = {"customer_id": "customerId"}

# Largest amount the integer cents column holds (2**31 - 1 cents)
MAX_AMOUNT = Decimal("21474836.47")

CREATE_FAILED_MESSAGE = "Missing Fields. Failed to Create Invoice."
UPDATE_FAILED_MESSAGE = "Missing Fields. Failed to Update Invoice."


class InvoiceForm(BaseModel):
    """Validated create/update invoice form. `amount` is in dollars."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    customer_id: constr(strip_whitespace=True, min_length=1) = Field(alias="customerId")
    amount: Decimal = Field(gt=0, le=MAX_AMOUNT)
    status: InvoiceStatusEnum

    @field_validator("amount")
    @classmethod
    def amount_has_cents(cls, value: Decimal) -> Decimal:
        if dollars_to_cents(value) < 1:
            raise ValueError("amount rounds to zero cents")
        return value

    @property
    def amount_in_cents(self) -> int:
        return dollars_to_cents(self.amount)


class FormState(BaseModel):
    """Field errors to re-display on the form, plus a summary message."""
    errors: Dict[str, List[str]] = Field(default_factory=dict)
    message: Optional[str] = None


class ActionSuccess(BaseModel):
    """
    Outcome of a committed invoice mutation. The web layer applies the
    effects: revalidate the cached views, then redirect if asked to.
    """
    message: str
    invoice_id: Optional[uuid.UUID] = None
    revalidate_paths: List[str] = Field(default_factory=list)
    redirect_to: Optional[str] = None


def _form_values(data: Mapping[str, Any]) -> Dict[str, Any]:
    values = {}
    for field in FIELD_ERROR_MESSAGES:
        value = data.get(field)
        if value is None:
            # Accept the python-side names too (customer_id)
            for name, alias in _FIELD_ALIASES.items():
                if alias == field:
                    value = data.get(name)
        values[field] = value
    return values


def _error_field(error: Dict[str, Any]) -> str:
    loc = error.get("loc") or ("",)
    field = str(loc[0])
    return _FIELD_ALIASES.get(field, field)


def parse_invoice_form(data: Mapping[str, Any]) -> InvoiceForm:
    """
    Strict mode: return the validated form or raise InvoiceFormError for the
    first invalid field.
    """
    try:
        return InvoiceForm.model_validate(_form_values(data))
    except ValidationError as exc:
        first = exc.errors()[0]
        field = _error_field(first)
        raise InvoiceFormError(field, FIELD_ERROR_MESSAGES.get(field, first["msg"])) from exc


def validate_invoice_form(
    data: Mapping[str, Any], *, message: str = CREATE_FAILED_MESSAGE
) -> Union[InvoiceForm, FormState]:
    """
    Collecting mode: return the validated form, or a FormState carrying every
    field error. Never raises for bad user input.
    """
    try:
        return InvoiceForm.model_validate(_form_values(data))
    except ValidationError as exc:
        errors: Dict[str, List[str]] = {}
        for error in exc.errors():
            field = _error_field(error)
            text = FIELD_ERROR_MESSAGES.get(field, error["msg"])
            field_errors = errors.setdefault(field, [])
            if text not in field_errors:
                field_errors.append(text)
        return FormState(errors=errors, message=message)


# --- Store-side schemas ---
class InvoiceCreate(BaseModel):
    customer_id: uuid.UUID
    amount: int = Field(gt=0) # Cents
    status: InvoiceStatusEnum
    date: dt.date = Field(default_factory=_today_utc)

class InvoiceUpdate(BaseModel):
    customer_id: uuid.UUID
    amount: int = Field(gt=0) # Cents
    status: InvoiceStatusEnum

# Edit form payload: amount converted back to dollars
class InvoiceEditForm(BaseModel):
    id: uuid.UUID
    customer_id: uuid.UUID
    amount: Decimal
    status: InvoiceStatusEnum

# --- /query projection ---
class QueryInvoiceCustomer(BaseModel):
    name: str

    model_config = ConfigDict(from_attributes=True)

class QueryInvoice(BaseModel):
    amount: int
    customer: QueryInvoiceCustomer

    model_config = ConfigDict(from_attributes=True)
