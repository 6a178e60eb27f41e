from fastapi import APIRouter

# Import endpoint modules
from invoicedesk.api.endpoints import login
from invoicedesk.api.endpoints import users
from invoicedesk.api.endpoints import seed
from invoicedesk.api.endpoints import query
from invoicedesk.api.endpoints import dashboard
from invoicedesk.api.endpoints import invoices

api_router = APIRouter()

api_router.include_router(login.router, prefix="/login", tags=["Login"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(seed.router, prefix="/seed", tags=["Seed"])
api_router.include_router(query.router, prefix="/query", tags=["Query"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
api_router.include_router(invoices.router, prefix="/dashboard/invoices", tags=["Invoices"])
