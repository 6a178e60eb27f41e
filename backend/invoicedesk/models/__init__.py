# backend/invoicedesk/models/__init__.py
from .user import User
from .customer import Customer
from .invoice import Invoice
from .revenue import Revenue
