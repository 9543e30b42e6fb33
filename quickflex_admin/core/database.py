"""Database client and session dependency.

The application factory builds one ``DatabaseClient`` and attaches it to
``app.state``; request handlers reach it through ``get_async_session`` so a
different client (for example an in-memory SQLite one) can be substituted.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from quickflex_admin.core.config import Settings
from quickflex_admin.utils.logging import get_logger

LOGGER = get_logger(__name__)

# Driver-level connectivity failures (refused, unreachable) are raised unwrapped
STORAGE_ERRORS = (SQLAlchemyError, OSError)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def build_engine(url: str, pool_size: int = 10, max_overflow: int = 20, echo: bool = False) -> AsyncEngine:
    """Create an async engine with pool options suited to the backend."""
    engine_kwargs: dict[str, Any] = {"echo": echo, "future": True}

    if url.startswith("sqlite"):
        if ":memory:" in url or url.rstrip("/").endswith(":"):
            # One shared connection, otherwise every session sees an empty database
            engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs["pool_size"] = pool_size
        engine_kwargs["max_overflow"] = max_overflow
        if "+asyncpg" in url:
            # Disable prepared statement cache for PgBouncer compatibility
            engine_kwargs["connect_args"] = {"statement_cache_size": 0}

    return create_async_engine(url, **engine_kwargs)


class DatabaseClient:
    """Relational store client with connection and schema management."""

    def __init__(self, engine: AsyncEngine):
        """Initialize database client.

        Args:
            engine: SQLAlchemy async engine
        """
        self.engine = engine
        self.session_maker = async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "DatabaseClient":
        return cls(
            build_engine(
                settings.database_url,
                pool_size=settings.database_pool_size,
                max_overflow=settings.database_max_overflow,
                echo=settings.database_echo,
            )
        )

    @classmethod
    def from_url(cls, url: str, echo: bool = False) -> "DatabaseClient":
        return cls(build_engine(url, echo=echo))

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Open a session that is closed when the block exits."""
        async with self.session_maker() as session:
            try:
                yield session
            finally:
                await session.close()

    async def connect(self) -> bool:
        """Test database connection."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))

            LOGGER.info("Database connection successful")
            return True

        except Exception:
            LOGGER.error("Database connection failed", exc_info=True)
            raise

    async def disconnect(self) -> None:
        """Dispose of the engine and its pooled connections."""
        try:
            await self.engine.dispose()
            LOGGER.info("Database connection closed")
        except Exception as e:
            LOGGER.error(
                "Error closing database connection",
                exc_info=True,
                extra={"error": str(e)},
            )

    async def create_tables(self) -> None:
        """Create tables that do not exist yet without touching existing ones."""
        # Registers the models on Base.metadata
        from quickflex_admin.database import models  # noqa: F401

        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

            LOGGER.info("Database tables created/verified successfully")

        except Exception as e:
            LOGGER.error(
                "Failed to create database tables",
                exc_info=True,
                extra={"error": str(e)},
            )
            raise

    async def drop_tables(self) -> None:
        """Drop all database tables.

        WARNING: This will delete all data!
        """
        from quickflex_admin.database import models  # noqa: F401

        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.drop_all)

            LOGGER.warning("All database tables dropped")

        except Exception as e:
            LOGGER.error(
                "Failed to drop database tables",
                exc_info=True,
                extra={"error": str(e)},
            )
            raise

    async def health_check(self) -> dict:
        """Check database health."""
        try:
            async with self.engine.connect() as conn:
                val = await conn.scalar(text("SELECT 1"))

            return {
                "status": "healthy",
                "connected": True,
                "database": self.engine.dialect.name,
                "latency_test": "passed" if val == 1 else "failed",
            }

        except Exception as e:
            LOGGER.error("Database health check failed", extra={"error": str(e)})
            return {
                "status": "unhealthy",
                "connected": False,
            }


async def init_database(client: DatabaseClient, create_tables: bool = True) -> None:
    """Verify connectivity and optionally create missing tables.

    Args:
        client: Database client to initialize
        create_tables: Whether to create missing tables on startup
    """
    LOGGER.info("Initializing database connection...")
    await client.connect()

    if create_tables:
        await client.create_tables()

    LOGGER.info("Database initialization completed")


async def close_database(client: DatabaseClient) -> None:
    """Close database connection."""
    LOGGER.info("Closing database connection...")
    await client.disconnect()


def get_db_client(request: Request) -> DatabaseClient:
    """FastAPI dependency returning the client attached to the application."""
    return request.app.state.db_client


async def get_async_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for getting async database session.

    Yields:
        AsyncSession: Database session
    """
    client: Optional[DatabaseClient] = getattr(request.app.state, "db_client", None)
    if client is None:
        raise RuntimeError("Database client is not configured on the application")

    async with client.session() as session:
        yield session
