from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from typing import Any, Dict, List
import logging
import uuid

from invoicedesk.models.user import User as UserModel # Alias to avoid name clash
from invoicedesk.core.security import verify_password
from invoicedesk.core.exceptions import AuthenticationError, InvalidCredentialsError
from invoicedesk.db.upsert import insert_on_conflict_do_nothing

logger = logging.getLogger(__name__)


async def get_user(db: AsyncSession, user_id: uuid.UUID) -> UserModel | None:
    """
    Get a user by their ID.
    """
    result = await db.execute(select(UserModel).filter(UserModel.id == user_id))
    return result.scalars().first()

async def get_user_by_email(db: AsyncSession, email: str) -> UserModel | None:
    """
    Get a user by their email address.
    """
    result = await db.execute(select(UserModel).filter(UserModel.email == email))
    return result.scalars().first()

async def count_users(db: AsyncSession) -> int:
    result = await db.execute(select(func.count(UserModel.id)))
    return result.scalar_one()

async def upsert_users(db: AsyncSession, *, users_in: List[Dict[str, Any]]) -> int:
    """
    Insert users keyed by email; existing users are left as they are.
    Each dict needs name, email and hashed_password. Returns rows inserted.
    """
    rows = [
        {
            "id": uuid.uuid4(),
            "name": user_in["name"],
            "email": user_in["email"],
            "hashed_password": user_in["hashed_password"],
        }
        for user_in in users_in
    ]
    return await insert_on_conflict_do_nothing(db, UserModel, rows, conflict_columns=["email"])

async def authenticate_user(
    db: AsyncSession, *, email: str, password: str
) -> UserModel:
    """
    Authenticate a user by email and password.
    Raises InvalidCredentialsError for an unknown email or a wrong password,
    AuthenticationError when the lookup itself fails.
    """
    try:
        user = await get_user_by_email(db, email=email)
    except SQLAlchemyError as exc:
        logger.exception("Failed to fetch user during authentication")
        raise AuthenticationError("Failed to fetch user.") from exc
    if not user:
        raise InvalidCredentialsError()
    if not verify_password(password, user.hashed_password):
        raise InvalidCredentialsError()
    return user
