from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from pathlib import Path
import logging
import urllib.parse

logger = logging.getLogger(__name__)

class Settings(BaseSettings):
    PROJECT_NAME: str = "Invoice Desk API"
    PROJECT_VERSION: str = "0.1.0"

    # Database
    POSTGRES_SERVER: Optional[str] = "localhost"
    POSTGRES_USER: Optional[str] = "invoice_user"
    POSTGRES_PASSWORD: Optional[str] = "securepassword123" # Default, should be overridden by .env
    POSTGRES_DB: Optional[str] = "invoicedesk_db"
    POSTGRES_PORT: int = 5432
    DATABASE_URL: Optional[str] = None # Built from the POSTGRES_* parts unless set directly
    CREATE_TABLES_ON_STARTUP: bool = True

    # Security
    SECRET_KEY: str = "a_very_secret_key_that_should_be_strong_and_from_env" # CHANGE THIS IN .ENV
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 # 1 day
    # bcrypt cost factor, used for both seeded and runtime password hashes
    BCRYPT_ROUNDS: int = 10

    # Dashboard
    ITEMS_PER_PAGE: int = 6
    LATEST_INVOICES_LIMIT: int = 5
    # Amount (in cents) matched by the /query debug endpoint
    DEBUG_QUERY_AMOUNT: int = 666

    model_config = SettingsConfigDict(
        # Project root: three .parent calls up from backend/invoicedesk/core
        env_file=Path(__file__).resolve().parent.parent.parent.parent / ".env",
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=True
    )

settings = Settings()

# Construct DATABASE_URL after settings are loaded, unless one was given explicitly
if not settings.DATABASE_URL:
    if settings.POSTGRES_USER and settings.POSTGRES_PASSWORD and \
       settings.POSTGRES_SERVER and settings.POSTGRES_DB and settings.POSTGRES_PORT:
        encoded_password = urllib.parse.quote_plus(settings.POSTGRES_PASSWORD)
        settings.DATABASE_URL = (
            f"postgresql+asyncpg://{settings.POSTGRES_USER}:{encoded_password}@"
            f"{settings.POSTGRES_SERVER}:{settings.POSTGRES_PORT}/{settings.POSTGRES_DB}"
        )
    else:
        logger.error("Database URL could not be constructed. Check POSTGRES environment variables in .env and config defaults.")
