from typing import AsyncIterator
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from invoicedesk.core.security import decode_token
from invoicedesk.core.cache import ViewCache
from invoicedesk.db.session import Database
from invoicedesk import crud, models

# Clients send email/password here to get a token
reusable_oauth2 = OAuth2PasswordBearer(tokenUrl="/login/access-token")


def get_database(request: Request) -> Database:
    """
    The Database built by the application factory.
    """
    return request.app.state.database


def get_view_cache(request: Request) -> ViewCache:
    return request.app.state.view_cache


async def get_db(database: Database = Depends(get_database)) -> AsyncIterator[AsyncSession]:
    """
    Dependency to get a database session.
    Ensures the session is closed after the request.
    """
    async with database.session() as db:
        yield db


async def get_current_user(
    db: AsyncSession = Depends(get_db), token: str = Depends(reusable_oauth2)
) -> models.User:
    """
    Dependency to get the current user from a JWT token.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    token_data = decode_token(token)
    if not token_data or not token_data.sub: # token_data.sub is the user_id
        raise credentials_exception

    if not Database.is_valid_id(token_data.sub):
        raise credentials_exception

    user = await crud.user.get_user(db, user_id=Database.as_id(token_data.sub))
    if not user:
        raise credentials_exception
    return user
