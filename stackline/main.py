"""
Stackline FastAPI Application Entry Point.

Run with: uvicorn stackline.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from stackline import __version__
from stackline.api.responses import register_exception_handlers
from stackline.api.routes import (
    chat,
    documents,
    images,
    insights,
    projects,
    stacks,
    tags,
    users,
)
from stackline.config import get_settings
from stackline.db.session import Database
from stackline.utils.logging import configure_logging

logger = logging.getLogger(__name__)


def create_app(database: Database | None = None) -> FastAPI:
    """
    Build the application.

    The database is created here unless one is passed in (tests do) and is
    disposed when the application shuts down.
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    if database is None:
        database = Database(
            settings.database_url,
            echo=settings.debug,
            requires_ssl=settings.database_requires_ssl,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan manager for startup/shutdown."""
        settings.upload_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Starting %s (%s)", settings.app_name, settings.environment)
        yield
        await app.state.database.dispose()

    app = FastAPI(
        title=settings.app_name,
        description="Project collaboration API: research stacks, insights, tags and chat",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.database = database

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(users.router)
    app.include_router(projects.router)
    app.include_router(stacks.router)
    app.include_router(chat.router)
    app.include_router(insights.router)
    app.include_router(tags.router)
    app.include_router(images.router)
    app.include_router(documents.router)

    # Uploaded files
    app.mount("/uploads", StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
