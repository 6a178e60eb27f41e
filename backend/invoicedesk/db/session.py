from contextlib import asynccontextmanager
from typing import Any, AsyncIterator
import logging
import uuid

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

logger = logging.getLogger(__name__)


class Database:
    """
    Owns the async engine (connection pool) and the session factory.

    One instance is built per application (or per test) and handed to the
    request handlers and the seeding pipeline; nothing here is a module global.
    """

    def __init__(self, url: str, **engine_kwargs: Any):
        if not url:
            raise ValueError("A database URL is required.")
        self.url = url
        self.display_url = make_url(url).render_as_string(hide_password=True)
        engine_kwargs.setdefault("pool_pre_ping", True)
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self.SessionLocal = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )
        logger.info(f"Database engine configured for: {self.display_url}")

    async def connect(self) -> None:
        """Open a pooled connection once so a bad URL fails at startup, not mid-request."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection established.")

    async def disconnect(self) -> None:
        await self.engine.dispose()
        logger.info("Database connections released.")

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Scoped session: rolled back if the block raises, always closed.
        """
        db: AsyncSession = self.SessionLocal()
        try:
            yield db
        except Exception:
            await db.rollback()
            raise
        finally:
            await db.close()

    @staticmethod
    def is_valid_id(value: object) -> bool:
        """Whether `value` has the shape of a primary key this store generates (a UUID)."""
        if isinstance(value, uuid.UUID):
            return True
        if not isinstance(value, str):
            return False
        try:
            uuid.UUID(value)
        except ValueError:
            return False
        return True

    @staticmethod
    def as_id(value: object) -> uuid.UUID:
        """Convert a value accepted by is_valid_id to the key type. Raises ValueError otherwise."""
        if isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(str(value))
