from pydantic import BaseModel

class SeedCounts(BaseModel):
    users: int
    customers: int
    invoices: int
    revenue: int

class SeedResponse(BaseModel):
    message: str
    counts: SeedCounts

class ErrorResponse(BaseModel):
    error: str
