"""
Database connection management.

Provides the Database persistence client (async engine plus session
factory) and the FastAPI dependency that hands out request-scoped sessions.

A Database is constructed once at the process root (API lifespan or worker
entry point) and passed down by reference. Nothing in this module caches a
connection handle at import time.

Dependencies: sqlalchemy, quizfunnel.configs
System role: Database connection lifecycle management
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from quizfunnel.boundary.db.base import Base
from quizfunnel.configs.database import DatabaseSettings


def get_async_engine(db_config: DatabaseSettings) -> AsyncEngine:
    """
    Create async SQLAlchemy engine with connection pooling.

    pool_pre_ping=True verifies connections before use to detect
    stale/broken connections early.

    Args:
        db_config: Database settings

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine

    Raises:
        ArgumentError: If database URL is invalid or engine creation fails
    """
    url = db_config.async_database_url
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=db_config.echo_sql)

    return create_async_engine(
        url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


def get_async_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """
    Create async session factory for database operations.

    autoflush=False and expire_on_commit=False give explicit transaction
    control and keep loaded rows readable after commit.

    Args:
        engine: Async engine to bind

    Returns:
        async_sessionmaker: Async session factory
    """
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


class Database:
    """
    Persistence client shared by reference between components.

    Owns one engine and its session factory. The API stores it on
    ``app.state.database``; the worker receives it in its constructor.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        """
        Initialize the client around an existing engine.

        Args:
            engine: Async SQLAlchemy engine
        """
        self.engine = engine
        self.session_factory = get_async_session_factory(engine)

    @classmethod
    def from_settings(cls, db_config: DatabaseSettings) -> "Database":
        """Build a client from database settings."""
        return cls(get_async_engine(db_config))

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Open a session that is closed (and rolled back if uncommitted) on exit.

        Usage:
            async with database.session() as session:
                session.add(obj)
                await session.commit()
        """
        async with self.session_factory() as session:
            yield session

    async def create_all(self) -> None:
        """Create all registered tables (development and tests)."""
        # Import for side effect: registers every model on Base.metadata
        from quizfunnel.boundary.db import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()


async def get_async_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for async database session injection with automatic cleanup.

    Uses the Database constructed by the application lifespan and closes the
    session after the route completes, even if exceptions occur.

    Yields:
        AsyncSession: Async SQLAlchemy session (scoped to request lifetime)

    Usage:
        from fastapi import Depends

        @router.get("/reports/{attempt_id}")
        async def get_report(attempt_id: UUID, db: AsyncSession = Depends(get_async_db)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
