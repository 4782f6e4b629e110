"""FastAPI application entrypoint. No business logic; only wiring, lifecycle and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import health
from app.api import router as api_router
from app.api.errors import register_error_handlers
from app.core.config import settings
from app.core.database import Database

logger = logging.getLogger(__name__)


def create_app(database: Database | None = None) -> FastAPI:
    """
    Build the application.

    The Database is created from DATABASE_URL at startup unless one is passed
    in; either way it is disposed at shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if getattr(app.state, "db", None) is None:
            app.state.db = Database(settings.DATABASE_URL, echo=settings.DEBUG)
            logger.info("Database engine created")
        try:
            yield
        finally:
            app.state.db.dispose()
            app.state.db = None

    app = FastAPI(
        title="User Directory API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.db = database

    if settings.CORS_ORIGINS:
        origins = settings.CORS_ORIGINS
    else:
        origins = ["*"] if settings.APP_ENV == "dev" else []
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(health.router, prefix="/health", tags=["health"])
    app.include_router(api_router, prefix=settings.API_PREFIX)
    return app


app = create_app()
