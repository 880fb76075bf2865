"""Database session management."""

import logging
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from stackline.db.base import Base

logger = logging.getLogger(__name__)

_TRANSACTION_DEPTH = "transaction_depth"


class Database:
    """
    Owns the async engine and session factory.

    Created by the application factory and disposed by its lifespan;
    request handlers reach it through app.state.
    """

    def __init__(self, url: str, *, echo: bool = False, requires_ssl: bool = False):
        self.url = url
        engine_kwargs: dict = {"echo": echo}
        if url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        else:
            engine_kwargs.update(pool_pre_ping=True, pool_size=5, max_overflow=10)
            if requires_ssl:
                engine_kwargs["connect_args"] = {"ssl": "require"}

        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)

        if url.startswith("sqlite"):
            # SQLite ships with foreign keys off; cascades depend on them
            @event.listens_for(self.engine.sync_engine, "connect")
            def _enable_foreign_keys(dbapi_connection, _connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def create_all(self) -> None:
        """Create every table directly from the models (tests and local dev)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database engine disposed")


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    database: Database = request.app.state.database
    async with database.session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def transaction(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Atomic scope for a multi-step mutation.

    Re-entrant: nested scopes join the outermost one, which commits once on
    success. Any exception rolls the whole unit back and propagates.
    """
    depth = session.info.get(_TRANSACTION_DEPTH, 0)
    session.info[_TRANSACTION_DEPTH] = depth + 1
    try:
        yield session
        if depth == 0:
            await session.commit()
    except Exception:
        if depth == 0:
            await session.rollback()
        raise
    finally:
        session.info[_TRANSACTION_DEPTH] = depth
