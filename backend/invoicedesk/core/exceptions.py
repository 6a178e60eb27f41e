"""
Application error types.

The API layer maps these to HTTP responses; see the exception handlers
registered in invoicedesk.main.
"""
from typing import Optional


class AppError(Exception):
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(AppError):
    status_code = 404


class InvoiceNotFoundError(NotFoundError):
    def __init__(self, invoice_id: object):
        super().__init__("Invoice not found")
        self.invoice_id = invoice_id


class StoreError(AppError):
    """A database failure, with the raw driver error kept off the message."""


class InvoiceFormError(AppError):
    """Raised by strict form validation on the first invalid field."""
    status_code = 422

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class SeedReferenceError(AppError):
    """A fixture invoice points at a customer that is not in the store."""


class SeedError(AppError):
    def __init__(self, stage: str, cause: str):
        super().__init__(f"Failed to seed {stage}: {cause}")
        self.stage = stage
        self.cause = cause


class AuthenticationError(AppError):
    pass


class InvalidCredentialsError(AuthenticationError):
    status_code = 401

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "Invalid credentials.")
