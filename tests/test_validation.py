from __future__ import annotations

from decimal import Decimal

import pytest

from invoicedesk.core.exceptions import InvoiceFormError
from invoicedesk.core.utils import cents_to_dollars, dollars_to_cents
from invoicedesk.schemas.invoice import (
    FormState,
    InvoiceForm,
    InvoiceStatusEnum,
    MAX_AMOUNT,
    UPDATE_FAILED_MESSAGE,
    parse_invoice_form,
    validate_invoice_form,
)

CUSTOMER_ID = "3958dc9e-712f-4377-85e9-fec4b6a6442a"


def test_valid_form_is_parsed_and_typed() -> None:
    form = parse_invoice_form({"customerId": CUSTOMER_ID, "amount": "157.95", "status": "pending"})
    assert form.customer_id == CUSTOMER_ID
    assert form.amount == Decimal("157.95")
    assert form.status is InvoiceStatusEnum.PENDING
    assert form.amount_in_cents == 15795


def test_collecting_mode_returns_form_on_success() -> None:
    result = validate_invoice_form({"customerId": CUSTOMER_ID, "amount": "5", "status": "paid"})
    assert isinstance(result, InvoiceForm)
    assert result.amount_in_cents == 500


@pytest.mark.parametrize(
    "data, field, message",
    [
        ({"amount": "10", "status": "paid"}, "customerId", "Please select a customer."),
        ({"customerId": "", "amount": "10", "status": "paid"}, "customerId", "Please select a customer."),
        ({"customerId": 42, "amount": "10", "status": "paid"}, "customerId", "Please select a customer."),
        ({"customerId": CUSTOMER_ID, "amount": "0", "status": "paid"}, "amount", "Please enter an amount greater than $0."),
        ({"customerId": CUSTOMER_ID, "amount": "-3.50", "status": "paid"}, "amount", "Please enter an amount greater than $0."),
        ({"customerId": CUSTOMER_ID, "amount": "abc", "status": "paid"}, "amount", "Please enter an amount greater than $0."),
        ({"customerId": CUSTOMER_ID, "amount": "NaN", "status": "paid"}, "amount", "Please enter an amount greater than $0."),
        ({"customerId": CUSTOMER_ID, "amount": "0.001", "status": "paid"}, "amount", "Please enter an amount greater than $0."),
        ({"customerId": CUSTOMER_ID, "amount": "1e30", "status": "paid"}, "amount", "Please enter an amount greater than $0."),
        ({"customerId": CUSTOMER_ID, "amount": "21474836.48", "status": "paid"}, "amount", "Please enter an amount greater than $0."),
        ({"customerId": CUSTOMER_ID, "status": "paid"}, "amount", "Please enter an amount greater than $0."),
        ({"customerId": CUSTOMER_ID, "amount": "10", "status": "overdue"}, "status", "Please select an invoice status."),
        ({"customerId": CUSTOMER_ID, "amount": "10", "status": "PAID"}, "status", "Please select an invoice status."),
        ({"customerId": CUSTOMER_ID, "amount": "10"}, "status", "Please select an invoice status."),
    ],
)
def test_strict_mode_raises_field_message(data, field, message) -> None:
    with pytest.raises(InvoiceFormError) as excinfo:
        parse_invoice_form(data)
    assert excinfo.value.field == field
    assert excinfo.value.message == message


def test_collecting_mode_gathers_every_field_error() -> None:
    result = validate_invoice_form({"customerId": "", "amount": "0", "status": "draft"})
    assert isinstance(result, FormState)
    assert result.errors == {
        "customerId": ["Please select a customer."],
        "amount": ["Please enter an amount greater than $0."],
        "status": ["Please select an invoice status."],
    }
    assert result.message == "Missing Fields. Failed to Create Invoice."


def test_collecting_mode_uses_caller_message() -> None:
    result = validate_invoice_form({}, message=UPDATE_FAILED_MESSAGE)
    assert isinstance(result, FormState)
    assert set(result.errors) == {"customerId", "amount", "status"}
    assert result.message == UPDATE_FAILED_MESSAGE


def test_python_side_field_name_is_accepted() -> None:
    form = parse_invoice_form({"customer_id": CUSTOMER_ID, "amount": "1", "status": "paid"})
    assert form.customer_id == CUSTOMER_ID


@pytest.mark.parametrize("dollars", ["0.01", "0.10", "0.29", "1", "19.99", "1234.56", "100000.07"])
def test_amount_round_trips_through_cents(dollars) -> None:
    cents = dollars_to_cents(Decimal(dollars))
    assert isinstance(cents, int)
    assert cents_to_dollars(cents) == Decimal(dollars)


def test_amount_beyond_two_decimals_rounds_half_up() -> None:
    assert dollars_to_cents(Decimal("10.005")) == 1001
    assert dollars_to_cents(Decimal("10.004")) == 1000


@pytest.mark.parametrize("amount", ["0.001", "0.004", "1e30", "21474836.48"])
def test_collecting_mode_rejects_amounts_outside_cents_range(amount) -> None:
    result = validate_invoice_form({"customerId": CUSTOMER_ID, "amount": amount, "status": "paid"})
    assert isinstance(result, FormState)
    assert result.errors == {"amount": ["Please enter an amount greater than $0."]}


def test_amount_bounds_in_cents() -> None:
    # Half a cent rounds up to the smallest storable amount
    smallest = parse_invoice_form({"customerId": CUSTOMER_ID, "amount": "0.005", "status": "paid"})
    assert smallest.amount_in_cents == 1

    largest = parse_invoice_form({"customerId": CUSTOMER_ID, "amount": str(MAX_AMOUNT), "status": "paid"})
    assert largest.amount_in_cents == 2**31 - 1
