from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import logging

from invoicedesk import schemas
from invoicedesk.api import deps
from invoicedesk.core.exceptions import SeedError
from invoicedesk.db.session import Database
from invoicedesk.services import seed

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get(
    "",
    response_model=schemas.SeedResponse,
    responses={500: {"model": schemas.ErrorResponse}},
)
async def seed_database(database: Database = Depends(deps.get_database)):
    """
    Populate the store with the placeholder dataset. Safe to call repeatedly.
    """
    try:
        counts = await seed.run_seed(database)
    except SeedError as exc:
        logger.error(f"Seeding error: {exc.message}")
        return JSONResponse(status_code=500, content={"error": exc.message})
    return {"message": "Database seeded successfully", "counts": counts}
