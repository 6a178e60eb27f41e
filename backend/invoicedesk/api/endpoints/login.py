from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm # Standard form for username/password
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import timedelta
import logging

from invoicedesk import crud, schemas
from invoicedesk.api.deps import get_db
from invoicedesk.core.exceptions import AuthenticationError, InvalidCredentialsError
from invoicedesk.core.security import create_access_token
from invoicedesk.core.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/access-token", response_model=schemas.Token)
async def login_for_access_token(
    db: AsyncSession = Depends(get_db),
    form_data: OAuth2PasswordRequestForm = Depends() # Username is form_data.username, password is form_data.password
):
    """
    OAuth2 compatible token login, get an access token for future requests.
    'username' field in the form should be the user's email.
    """
    try:
        user = await crud.user.authenticate_user(
            db, email=form_data.username, password=form_data.password
        )
    except InvalidCredentialsError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except AuthenticationError as exc:
        logger.error(f"Authentication failed: {exc.message}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Something went wrong.",
        )

    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        subject=str(user.id), expires_delta=access_token_expires # Use user.id as subject
    )
    return {"access_token": access_token, "token_type": "bearer"}
