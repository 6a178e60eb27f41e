from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from invoicedesk.api.api import api_router
from invoicedesk.core.config import settings
from invoicedesk.core.cache import ViewCache
from invoicedesk.core.exceptions import AppError
from invoicedesk.db.init_db import init_db
from invoicedesk.db.session import Database

logger = logging.getLogger(__name__)

origins = [
    "http://localhost:3000",  # Dashboard frontend dev server
    "http://localhost:5173",
]


def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Build the application around an explicit Database. The database is
    connected on startup and its pool released on shutdown.
    """
    if database is None:
        database = Database(settings.DATABASE_URL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await database.connect()
        if settings.CREATE_TABLES_ON_STARTUP:
            await init_db(database)
        try:
            yield
        finally:
            await database.disconnect()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.PROJECT_VERSION,
        lifespan=lifespan,
    )
    app.state.database = database
    app.state.view_cache = ViewCache()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    app.include_router(api_router)

    @app.get("/")
    async def read_root():
        return {"message": f"Welcome to {settings.PROJECT_NAME}!"}

    @app.get("/health", tags=["Health"])
    async def health_check():
        """
        Health check endpoint.
        """
        return {"status": "ok", "message": f"{settings.PROJECT_NAME} is healthy!"}

    return app


app = create_app()
