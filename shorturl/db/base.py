"""Database base configuration for SQLAlchemy with SQLModel.

This module provides the store client used by the service:
- Engine configuration per environment
- An explicitly constructed Database object owning engine and session factory
- Schema creation on connect
- Health check functionality
"""

from typing import AsyncGenerator, Dict, Optional
import asyncio
import logging
from contextlib import asynccontextmanager

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, StaticPool
from sqlalchemy.sql import text
from sqlmodel import SQLModel

from shorturl.core.config import Settings, settings as default_settings

# Registers the tables on SQLModel.metadata
from shorturl import models  # noqa: F401

logger = logging.getLogger(__name__)


def get_engine_config(database_url: str, config: Settings) -> Dict:
    """Get the SQLAlchemy engine configuration for a database URL.

    SQLite URLs get a single shared connection, every other backend
    gets a pool sized from the POSTGRES_* settings.

    Returns:
        Dict: Engine configuration parameters for the current environment.
    """
    url = make_url(database_url)

    if url.get_backend_name() == "sqlite":
        return {
            "echo": config.DB_ECHO,
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }

    if config.ENVIRONMENT.value == "testing":
        return {
            "echo": config.DB_ECHO,
            "poolclass": NullPool,
        }

    return {
        "echo": config.DB_ECHO,
        "pool_size": config.POSTGRES_POOL_SIZE,
        "max_overflow": config.POSTGRES_POOL_MAX_OVERFLOW,
        "pool_timeout": config.POSTGRES_POOL_TIMEOUT,
        "pool_recycle": config.POSTGRES_POOL_RECYCLE,
        "pool_pre_ping": True,
    }


class Database:
    """
    Store client wrapping an async engine and its session factory.

    The application creates one instance at startup, calls ``connect()``
    before serving and ``dispose()`` on shutdown. Nothing is opened at
    construction time.
    """

    def __init__(self, url: Optional[str] = None, config: Optional[Settings] = None):
        self.config = config or default_settings
        self.url = url or self.config.SQLALCHEMY_DATABASE_URI
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker] = None

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    async def connect(self, create_tables: Optional[bool] = None) -> None:
        """Create the engine and, if configured, the schema.

        Args:
            create_tables: Override for settings.DB_CREATE_TABLES
        """
        if self._engine is not None:
            logger.warning("Database already connected")
            return

        engine_url = make_url(self.url)
        logger.info(f"Creating database engine with URL: {engine_url.render_as_string(hide_password=True)}")

        self._engine = create_async_engine(
            self.url,
            **get_engine_config(self.url, self.config),
        )
        self._session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

        if create_tables is None:
            create_tables = self.config.DB_CREATE_TABLES
        if create_tables:
            async with self._engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)
            logger.info("Database schema ensured")

    async def dispose(self) -> None:
        """Close all pooled connections and forget the engine."""
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Database engine disposed")

    def session_factory(self) -> async_sessionmaker:
        if self._session_factory is None:
            raise RuntimeError("Database is not connected; call connect() first")
        return self._session_factory

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get async session with proper cleanup.

        Yields:
            AsyncSession: SQLAlchemy async session
        """
        session = self.session_factory()()
        try:
            yield session
        finally:
            await session.close()


class DatabaseHealthCheck:
    """Health check functionality for the database connection."""

    @staticmethod
    async def check_connection(database: Database) -> Dict:
        """Check database connectivity and return status.

        Returns:
            Dict: Health check result containing status and latency information
        """
        loop = asyncio.get_running_loop()
        start_time = loop.time()
        status = "healthy"
        error_message = None
        latency_ms = 0

        try:
            async with database.session() as session:
                await session.execute(text("SELECT 1"))
            latency_ms = int((loop.time() - start_time) * 1000)
        except Exception as e:
            status = "unhealthy"
            error_message = "database unreachable"
            logger.error(f"Database health check failed: {e}")

        return {
            "status": status,
            "latency_ms": latency_ms,
            "error": error_message,
        }
