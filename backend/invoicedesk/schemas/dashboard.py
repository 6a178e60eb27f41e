from pydantic import BaseModel, ConfigDict
from datetime import date
from typing import Optional
import uuid

from invoicedesk.schemas.invoice import InvoiceStatusEnum

class RevenueRow(BaseModel):
    month: str
    revenue: int

    model_config = ConfigDict(from_attributes=True)

class LatestInvoice(BaseModel):
    id: uuid.UUID
    amount: str # Formatted currency, e.g. "$157.95"
    name: str
    image_url: Optional[str] = None
    email: str

class CardData(BaseModel):
    number_of_customers: int
    number_of_invoices: int
    total_paid_invoices: str
    total_pending_invoices: str

class InvoicesTableRow(BaseModel):
    id: uuid.UUID
    amount: int # Cents
    date: date
    status: InvoiceStatusEnum
    name: str
    email: str
    image_url: Optional[str] = None

class InvoicesPages(BaseModel):
    total_pages: int
