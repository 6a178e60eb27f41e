from fastapi import APIRouter, Depends
from typing import Any

from invoicedesk import models, schemas
from invoicedesk.api import deps

router = APIRouter()

@router.get("/me", response_model=schemas.UserOut)
async def read_users_me(
    current_user: models.User = Depends(deps.get_current_user),
) -> Any:
    """
    Get current user.
    """
    return current_user
