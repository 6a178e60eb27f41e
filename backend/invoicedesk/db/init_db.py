import asyncio
import logging
from invoicedesk.db.session import Database
from invoicedesk.db.base_class import Base
# Import the models so Base knows about them
from invoicedesk import models  # noqa: F401

# Logger for the init_db function and module-level messages
logger = logging.getLogger(__name__)

async def init_db(database: Database) -> None:
    logger.info("Initializing database...")
    async with database.engine.begin() as conn:
        try:
            logger.info("Creating all tables...")
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Tables created successfully.")
        except Exception as e:
            logger.error(f"Error during table creation: {e}")
            raise # Re-raise the exception after logging
    logger.info("Database initialization complete.")


async def _main() -> None:
    from invoicedesk.core.config import settings

    database = Database(settings.DATABASE_URL)
    try:
        await init_db(database)
    finally:
        await database.disconnect()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(levelname)s:%(name)s:%(message)s')
    main_logger = logging.getLogger("__main__")

    from invoicedesk.core.config import settings

    if not settings.DATABASE_URL:
        main_logger.error("DATABASE_URL not set in settings. Exiting.")
    else:
        try:
            asyncio.run(_main())
        except Exception:
            main_logger.exception("An error occurred during database initialization")
            raise SystemExit(1)
