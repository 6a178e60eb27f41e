from .user import UserOut, Token, TokenPayload
from .customer import Customer, CustomerField, CustomersTableRow
from .invoice import (
    InvoiceStatusEnum, InvoiceForm, FormState, ActionSuccess, InvoiceCreate, InvoiceUpdate,
    InvoiceEditForm, QueryInvoice, parse_invoice_form, validate_invoice_form,
)
from .dashboard import RevenueRow, LatestInvoice, CardData, InvoicesTableRow, InvoicesPages
from .seed import SeedCounts, SeedResponse, ErrorResponse
