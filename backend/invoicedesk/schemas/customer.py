from pydantic import BaseModel, EmailStr, ConfigDict
from typing import Optional
import uuid

class CustomerBase(BaseModel):
    name: str
    email: EmailStr
    image_url: Optional[str] = None

class Customer(CustomerBase):
    id: uuid.UUID

    model_config = ConfigDict(from_attributes=True)

# Minimal shape used to fill the customer <select> on invoice forms
class CustomerField(BaseModel):
    id: uuid.UUID
    name: str

    model_config = ConfigDict(from_attributes=True)

class CustomersTableRow(Customer):
    total_invoices: int
    total_pending: str
    total_paid: str
