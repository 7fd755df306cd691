"""
Database session management.
"""
# tracker/db/session.py
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Type, TypeVar

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from tracker.core.config import settings
from tracker.db.base import Base

logger = logging.getLogger("tracker.db")


def _engine_options(url: str) -> Dict[str, Any]:
    """Pool settings per backend; SQLite has no connection pool to tune."""
    if url.startswith("sqlite"):
        options: Dict[str, Any] = {}
        if ":memory:" in url:
            # One shared connection, otherwise every session sees an empty database
            options["poolclass"] = StaticPool
        return options
    return {
        "pool_size": 20,
        "max_overflow": 30,
        "pool_timeout": 30,
        "pool_recycle": 3600,
        "pool_pre_ping": True,
    }


# Create async engine
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    **_engine_options(settings.DATABASE_URL)
)


def configure_sqlite_engine(async_engine: AsyncEngine) -> AsyncEngine:
    """
    Make SQLite honour SAVEPOINTs and foreign keys.

    The driver's own transaction handling is switched off so SQLAlchemy
    emits BEGIN itself and nested transactions stay inside the real one.
    """
    if async_engine.dialect.name != "sqlite":
        return async_engine

    @event.listens_for(async_engine.sync_engine, "connect")
    def _sqlite_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(async_engine.sync_engine, "begin")
    def _sqlite_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return async_engine


configure_sqlite_engine(engine)


# Create async session factory
async_session_factory = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

# Context manager for database sessions
@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Context manager for database sessions.

    Automatically handles commit/rollback and ensures session is closed.

    Usage:
        async with get_session() as session:
            # Use session here
    """
    session = async_session_factory()
    try:
        yield session
        await session.commit()
        logger.debug("Database session committed")
    except Exception as e:
        await session.rollback()
        logger.error(f"Database session rolled back due to: {str(e)}")
        raise
    finally:
        await session.close()
        logger.debug("Database session closed")

# Dependency function for FastAPI endpoints
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Get a database session for FastAPI endpoints via dependency injection.
    """
    async with get_session() as session:
        yield session

# Create a type variable for repository types
T = TypeVar('T')

# Context manager for repositories
@asynccontextmanager
async def get_repository_context(repo_type: Type[T]) -> AsyncGenerator[T, None]:
    """
    Get a repository with managed session lifecycle.

    Usage:
        async with get_repository_context(UserRepository) as repo:
            # Use repo here
    """
    async with get_session() as session:
        yield repo_type(session)

async def initialize_database() -> None:
    """
    Create missing tables and verify the connection.

    This should be called during application startup.
    """
    logger.info("Initializing database")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        await conn.execute(text("SELECT 1"))

    logger.info("Database initialization complete")


async def drop_database() -> None:
    """Drop every table known to the models."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.warning("All tables dropped")


async def close_database_connections() -> None:
    """
    Close all database connections in the pool.

    This should be called during application shutdown.
    """
    logger.info("Closing database connections")

    # Dispose the engine to close all connections in the pool
    await engine.dispose()

    logger.info("Database connections closed")
